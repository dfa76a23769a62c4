"""Jira Cloud REST API v3 issue tracker."""

import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from changethor.models import DocNode, Issue
from changethor.providers.base import IssueTracker
from changethor.settings import ChangeThorSettings

logger = logging.getLogger(__name__)


def _name(field: dict | None) -> str:
    return (field or {}).get("name") or ""


def _description(raw: object, summary: str, issue_key: str) -> str | DocNode | None:
    """Resolve the untyped description field into one of its three variants."""
    if raw is None or isinstance(raw, str):
        return raw
    try:
        return DocNode.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Unreadable description on Jira issue %s, using summary: %s", issue_key, exc)
        return summary


def issue_from_payload(payload: dict) -> Issue:
    fields = payload["fields"]
    summary = fields.get("summary") or ""
    assignee = fields.get("assignee")
    return Issue(
        key=payload["key"],
        summary=summary,
        description=_description(fields.get("description"), summary, payload["key"]),
        priority=_name(fields.get("priority")),
        issue_type=_name(fields.get("issuetype")),
        status=_name(fields.get("status")),
        assignee=assignee.get("displayName") if assignee else None,
        components=[c["name"] for c in fields.get("components") or [] if c.get("name")],
        labels=list(fields.get("labels") or []),
    )


class JiraClient(IssueTracker):
    def __init__(self, settings: ChangeThorSettings) -> None:
        if not settings.jira_base_url or not settings.jira_api_token:
            raise RuntimeError("jira_base_url and jira_api_token are required")
        self._client = httpx.Client(
            base_url=settings.jira_base_url.rstrip("/"),
            auth=(settings.jira_username, settings.jira_api_token.get_secret_value()),
            headers={"Accept": "application/json"},
            timeout=settings.jira_timeout_seconds,
        )

    def close(self) -> None:
        self._client.close()

    def get_issue(self, issue_key: str) -> Issue | None:
        """Fetch one issue. Every failure is logged and reported as None."""
        if not issue_key or not issue_key.strip():
            logger.warning("Jira issue key is empty")
            return None

        logger.debug("Fetching Jira issue %s", issue_key)
        try:
            response = self._client.get(f"/rest/api/3/issue/{quote(issue_key.strip(), safe='')}")
        except httpx.HTTPError as exc:
            logger.error("Error fetching Jira issue %s: %s", issue_key, exc)
            return None

        if not response.is_success:
            logger.error(
                "Failed to fetch Jira issue %s. Status: %s, Response: %s",
                issue_key,
                response.status_code,
                response.text,
            )
            return None

        try:
            issue = issue_from_payload(response.json())
        except (ValueError, KeyError, TypeError, AttributeError, RecursionError) as exc:
            # ValueError covers both bad JSON and pydantic.ValidationError; RecursionError is runaway nesting
            logger.error("Malformed Jira response for issue %s: %s", issue_key, exc)
            return None

        logger.debug("Retrieved Jira issue %s: %s", issue.key, issue.summary)
        return issue
