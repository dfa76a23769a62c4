"""Shared pydantic models, the contract between providers, builder and main.py."""

from datetime import datetime
from enum import IntEnum

from pydantic import BaseModel, ConfigDict

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class DeploymentContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    release_id: str
    repository: str
    branch: str
    is_production: bool
    issue_key: str | None = None


class DocNode(BaseModel):
    """One node of an Atlassian Document Format tree.

    Only the fields the extractor reads are modelled; attrs, marks and
    version are dropped.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str
    text: str | None = None  # set on "text" nodes only
    content: list["DocNode"] = []


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str  # OPS-42
    summary: str
    description: str | DocNode | None = None  # plain text, ADF tree, or absent
    priority: str = ""
    issue_type: str = ""
    status: str = ""
    assignee: str | None = None
    components: list[str] = []
    labels: list[str] = []


class RiskLevel(IntEnum):
    LOW = 0
    MEDIUM = 1
    MEDIUM_HIGH = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.replace("_", "-").title()


class RiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: RiskLevel = RiskLevel.LOW
    factors: tuple[str, ...] = ()


class ChangeRequest(BaseModel):
    """The change ticket as built locally, before serialization."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    requester_email: str
    category: str
    subcategory: str
    priority: str
    planned_start: datetime
    planned_end: datetime

    def to_payload(self) -> dict:
        """Return the body expected by POST /changes.json."""
        return {
            "change": {
                "name": self.name,
                "description": self.description,
                "requester": {"email": self.requester_email},
                "category": {"name": self.category},
                "subcategory": {"name": self.subcategory},
                "priority": self.priority,
                "planning_fields": {
                    "planned_start_date": self.planned_start.strftime(TIMESTAMP_FORMAT),
                    "planned_end_date": self.planned_end.strftime(TIMESTAMP_FORMAT),
                },
            }
        }


class ChangeResponse(BaseModel):
    """Returned by the ticket system; only what the caller logs."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)  # number arrives as int or str

    id: int
    number: str
    name: str = ""
    state: str = ""
    created_at: datetime | None = None
