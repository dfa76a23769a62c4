"""changethor CLI: create a change ticket for a production deployment."""

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich import print_json
from rich.table import Table

from changethor.builder import build_change_request
from changethor.log import LogLevel, setup_logging
from changethor.models import DeploymentContext, Issue
from changethor.pipeline import PipelineContext
from changethor.providers.base import IssueTracker
from changethor.providers.jira import JiraClient
from changethor.providers.solarwinds import SolarWindsClient
from changethor.settings import config_path, get_settings

logger = logging.getLogger(__name__)

app = typer.Typer(help="changethor: SolarWinds change tickets for production deployments", no_args_is_help=True)

ConfigOpt = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="TOML config file (default: ./changethor.toml)"),
]


@app.callback()
def main(
    log_level: Annotated[
        LogLevel,
        typer.Option("--log-level", envvar="CHANGETHOR_LOG_LEVEL", case_sensitive=False, help="Console log level"),
    ] = LogLevel.INFO,
) -> None:
    setup_logging(log_level)


# ---------------------------------------------------------------------------
# Pipeline steps
# ---------------------------------------------------------------------------


def _fetch_issue(tracker: IssueTracker | None, ctx: DeploymentContext) -> Issue | None:
    if not ctx.issue_key:
        logger.debug("No Jira issue key detected")
        return None
    if tracker is None:
        logger.debug("Jira is not configured, ignoring issue key %s", ctx.issue_key)
        return None
    logger.debug("Attempting to fetch Jira issue: %s", ctx.issue_key)
    return tracker.get_issue(ctx.issue_key)


def _summary_line(ctx: DeploymentContext, issue: Issue | None, number: str) -> str:
    if issue is not None:
        return f"Release ID: {ctx.release_id}, Jira Issue: {issue.key}, Created change ticket: {number}"
    return f"Release ID: {ctx.release_id}, Created change ticket: {number} (No Jira issue detected)"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("create")
def create(
    config: ConfigOpt = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Build and print the payload without submitting it")
    ] = False,
) -> None:
    """Create a change ticket for the current production deployment."""
    pipeline = PipelineContext()
    ctx = pipeline.resolve()
    if not ctx.is_production:
        logger.warning("Not a production deployment. Skipping change ticket creation.")
        return

    settings = get_settings(config)
    logger.debug(
        "Pipeline information - Release ID: %s, Repository: %s, Branch: %s, Jira Issue: %s",
        ctx.release_id,
        ctx.repository,
        ctx.branch,
        ctx.issue_key or "None",
    )

    try:
        with ExitStack() as stack:
            tracker = stack.enter_context(JiraClient(settings)) if settings.jira_enabled else None
            issue = _fetch_issue(tracker, ctx)
            request = build_change_request(ctx, issue, settings)

            if dry_run:
                print_json(data=request.to_payload())
                logger.info("Dry run: change ticket for release %s not submitted", ctx.release_id)
                return

            changes = stack.enter_context(SolarWindsClient(settings))
            created = changes.submit(request)
    except Exception:
        logger.exception("An unexpected error occurred while creating the change ticket")
        raise typer.Exit(1)

    if created is None:
        logger.error("Failed to create change ticket for release %s", ctx.release_id)
        raise typer.Exit(1)

    logger.info(_summary_line(ctx, issue, created.number))
    logger.debug(
        "Change ticket created. ID: %s, Number: %s, State: %s", created.id, created.number, created.state
    )


@app.command("context")
def context_cmd() -> None:
    """Show the deployment context resolved from the environment."""
    ctx = PipelineContext().resolve()

    table = Table(title="Deployment Context")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Release ID", ctx.release_id)
    table.add_row("Repository", ctx.repository)
    table.add_row("Branch", ctx.branch)
    table.add_row("Production", "yes" if ctx.is_production else "no")
    table.add_row("Jira Issue", ctx.issue_key or "[dim](none)[/dim]")

    rprint(table)


@app.command("config-show")
def config_show(config: ConfigOpt = None) -> None:
    """Show resolved configuration (masks credentials)."""
    settings = get_settings(config)

    def mask(val: str | None) -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"...{val[-5:]}"

    def plain(val: str | None) -> str:
        return val or "[dim](not set)[/dim]"

    table = Table(title=f"changethor Configuration ({config or config_path()})")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("solarwinds_url", settings.solarwinds_url)
    table.add_row(
        "solarwinds_token",
        mask(settings.solarwinds_token.get_secret_value() if settings.solarwinds_token else None),
    )
    table.add_row("requester_email", plain(settings.requester_email))
    table.add_row("category", plain(settings.category))
    table.add_row("subcategory", plain(settings.subcategory))
    table.add_row("priority", plain(settings.priority))
    table.add_row("jira_base_url", plain(settings.jira_base_url))
    table.add_row("jira_username", plain(settings.jira_username))
    table.add_row(
        "jira_api_token",
        mask(settings.jira_api_token.get_secret_value() if settings.jira_api_token else None),
    )
    table.add_row("enable_description_enhancement", str(settings.enable_description_enhancement))
    table.add_row("jira_timeout_seconds", str(settings.jira_timeout_seconds))

    rprint(table)
