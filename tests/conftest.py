"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest

from changethor.models import ChangeResponse, DeploymentContext, DocNode, Issue
from changethor.settings import ChangeThorSettings

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def deployment() -> DeploymentContext:
    return DeploymentContext(
        release_id="v1.2.3",
        repository="org/app",
        branch="main",
        is_production=True,
        issue_key=None,
    )


@pytest.fixture
def adf_description() -> DocNode:
    return DocNode.model_validate(
        {
            "type": "doc",
            "version": 1,
            "content": [
                {"type": "heading", "attrs": {"level": 2}, "content": [{"type": "text", "text": "Context"}]},
                {
                    "type": "paragraph",
                    "content": [
                        {"type": "text", "text": "Adds an index to "},
                        {"type": "text", "text": "orders", "marks": [{"type": "code"}]},
                        {"type": "text", "text": "."},
                    ],
                },
            ],
        }
    )


@pytest.fixture
def jira_issue(adf_description: DocNode) -> Issue:
    return Issue(
        key="OPS-42",
        summary="Speed up order lookups",
        description=adf_description,
        priority="Critical",
        issue_type="Bug",
        status="In Review",
        assignee="Jane Doe",
        components=["Database"],
        labels=["breaking-change"],
    )


@pytest.fixture
def plain_issue() -> Issue:
    return Issue(
        key="OPS-7",
        summary="Tweak footer copy",
        description="Update the footer text.",
        priority="Low",
        issue_type="Task",
        status="Done",
    )


@pytest.fixture
def settings() -> ChangeThorSettings:
    return ChangeThorSettings(  # type: ignore[call-arg]
        solarwinds_url="https://api.samanage.test",
        solarwinds_token="sw_token_12345",
        requester_email="release-bot@example.com",
        category="Software",
        subcategory="Deployment",
        priority="Medium",
        jira_base_url="https://example.atlassian.test",
        jira_username="bot@example.com",
        jira_api_token="jira_token_12345",
    )


@pytest.fixture
def change_response() -> ChangeResponse:
    return ChangeResponse(id=9001, number="CHG-1001", name="Production Deployment", state="New")
