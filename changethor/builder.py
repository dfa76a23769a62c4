"""Assemble the change ticket for a production deployment."""

from datetime import UTC, datetime, timedelta

from changethor.description import build_base_description, enhance
from changethor.models import ChangeRequest, DeploymentContext, Issue
from changethor.settings import ChangeThorSettings

MAX_NAME_LENGTH = 100
START_DELAY = timedelta(minutes=30)
WINDOW_END = timedelta(hours=2)


def change_name(ctx: DeploymentContext, issue: Issue | None) -> str:
    """Ticket title, cut to 97 characters plus an ellipsis when over 100."""
    if issue is not None:
        name = f"Production Deployment - {issue.key}: {issue.summary}"
    else:
        name = f"Production Deployment - Release {ctx.release_id}"
    if len(name) > MAX_NAME_LENGTH:
        name = name[: MAX_NAME_LENGTH - 3] + "..."
    return name


def build_change_request(
    ctx: DeploymentContext,
    issue: Issue | None,
    settings: ChangeThorSettings,
    now: datetime | None = None,
) -> ChangeRequest:
    now = now or datetime.now(UTC)

    description = build_base_description(ctx, now)
    if settings.enable_description_enhancement:
        description = enhance(issue, description, ctx, now)

    return ChangeRequest(
        name=change_name(ctx, issue),
        description=description,
        requester_email=settings.requester_email,
        category=settings.category,
        subcategory=settings.subcategory,
        priority=settings.priority,
        planned_start=now + START_DELAY,
        planned_end=now + WINDOW_END,
    )
