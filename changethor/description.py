"""Change ticket description rendering, with optional Jira enrichment."""

import logging
import re
from datetime import UTC, datetime

from changethor.adf import extract_plain_text
from changethor.models import DeploymentContext, Issue
from changethor.risk import assess, render_assessment

logger = logging.getLogger(__name__)

BANNER = "AUTOMATED PRODUCTION DEPLOYMENT"
MAX_DETAIL_LINES = 10
MAX_DETAIL_LINE_LENGTH = 200

NO_DETAILS_LINE = "• No detailed description available in Jira issue"
MORE_DETAILS_LINE = "• (Additional details available in the source Jira issue)"

_PROCESS_LINES = [
    "- This is an automated production deployment initiated by the GitHub release pipeline",
    "- The deployment follows established CI/CD processes and has passed all required tests",
    "- This change is part of the regular software release cycle",
]

_ROLLBACK_LINES = [
    "- If issues are encountered, the previous version can be redeployed using the established rollback procedures",
    "- Application monitoring will be actively monitored for any anomalies post-deployment",
]

_WHITESPACE = re.compile(r"\s+")
_JIRA_MARKUP = (re.compile(r"\{\{[^}]*\}\}"), re.compile(r"\[[^\]]*\]"))


def clean_text(text: str | None) -> str:
    """Collapse whitespace and strip {{monospace}} and [link] Jira markup."""
    if not text or not text.strip():
        return ""
    cleaned = _WHITESPACE.sub(" ", text)
    for pattern in _JIRA_MARKUP:
        cleaned = pattern.sub("", cleaned)
    return cleaned.strip()


def _timestamp(now: datetime) -> str:
    return f"{now:%Y-%m-%d %H:%M:%S} UTC"


def _deployment_facts(ctx: DeploymentContext, now: datetime) -> list[str]:
    return [
        f"Release ID: {ctx.release_id}",
        f"Repository: {ctx.repository}",
        f"Branch: {ctx.branch}",
        f"Deployment Time: {_timestamp(now)}",
    ]


def build_base_description(ctx: DeploymentContext, now: datetime | None = None) -> str:
    """Deployment facts plus the fixed narrative; used whenever there is no issue to enrich from."""
    now = now or datetime.now(UTC)
    lines = [BANNER, "=" * 32, ""]
    lines += _deployment_facts(ctx, now)
    lines += ["", "CHANGE DETAILS:", *_PROCESS_LINES, ""]
    lines += ["ROLLBACK PLAN:", *_ROLLBACK_LINES]
    return "\n".join(lines) + "\n"


def summarize_details(text: str) -> str:
    """Reduce an issue description to at most ten bullet lines.

    Only the first ten non-empty source lines are considered. Lines that are
    blank after cleaning, or 200 characters and longer, are dropped rather than
    truncated.
    """
    source_lines = [line for line in text.split("\n") if line]
    bullets = []
    for line in source_lines[:MAX_DETAIL_LINES]:
        cleaned = clean_text(line)
        if 0 < len(cleaned) < MAX_DETAIL_LINE_LENGTH:
            bullets.append(f"• {cleaned}")

    if not bullets:
        return NO_DETAILS_LINE
    if len(source_lines) > MAX_DETAIL_LINES:
        bullets.append(MORE_DETAILS_LINE)
    return "\n".join(bullets)


def _issue_lines(issue: Issue) -> list[str]:
    lines = [
        "ASSOCIATED JIRA ISSUE:",
        f"Issue Key: {issue.key}",
        f"Summary: {clean_text(issue.summary)}",
        f"Type: {issue.issue_type}",
        f"Priority: {issue.priority}",
        f"Status: {issue.status}",
    ]
    if issue.assignee:
        lines.append(f"Assignee: {issue.assignee}")
    if issue.components:
        lines.append(f"Components: {', '.join(issue.components)}")
    if issue.labels:
        lines.append(f"Labels: {', '.join(issue.labels)}")
    return lines


def _render(issue: Issue, ctx: DeploymentContext, now: datetime) -> str:
    lines = [BANNER, "=" * 32, "", "DEPLOYMENT INFORMATION:"]
    lines += _deployment_facts(ctx, now)
    lines += ["", *_issue_lines(issue), ""]

    details = extract_plain_text(issue.description, fallback=issue.summary)
    if details.strip():
        lines += ["CHANGE DETAILS (from Jira):", summarize_details(details), ""]

    lines += ["DEPLOYMENT PROCESS:", *_PROCESS_LINES, f"- Associated with Jira issue: {issue.key}", ""]
    lines += ["RISK ASSESSMENT:", render_assessment(assess(issue)), ""]
    lines += [
        "ROLLBACK PLAN:",
        *_ROLLBACK_LINES,
        f"- Jira issue {issue.key} will be updated with deployment status and any rollback actions",
    ]
    return "\n".join(lines)


def enhance(
    issue: Issue | None,
    base_description: str,
    ctx: DeploymentContext,
    now: datetime | None = None,
) -> str:
    """Return an issue-enriched description, or ``base_description`` on any failure."""
    if issue is None:
        logger.debug("No Jira issue provided, using base description")
        return base_description

    try:
        enhanced = _render(issue, ctx, now or datetime.now(UTC))
    except Exception:
        logger.exception("Error enhancing description, falling back to base description")
        return base_description

    logger.debug("Enhanced description for Jira issue %s", issue.key)
    return enhanced
