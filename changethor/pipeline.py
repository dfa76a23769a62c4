"""Deployment context from GitHub Actions (or generic CI) environment variables."""

import logging
import os
import re
from collections.abc import Mapping

from changethor.models import DeploymentContext

logger = logging.getLogger(__name__)

PRODUCTION_ENVIRONMENTS = {"prd", "prod", "production"}
PRODUCTION_BRANCHES = {"main", "master"}

# Jira-style key: OPS-42, AB2-7
ISSUE_KEY_RE = re.compile(r"\b[A-Z][A-Z0-9]+-[0-9]+\b")


class PipelineContext:
    """Reads pipeline facts from an environment mapping. Never raises.

    The mapping defaults to os.environ; tests pass a plain dict.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def _first(self, *names: str) -> str | None:
        for name in names:
            value = self._environ.get(name, "").strip()
            if value:
                return value
        return None

    def get_release_id(self) -> str:
        sha = self._first("GITHUB_SHA")
        release_id = (
            self._first("GITHUB_REF_NAME")
            or (sha[:8] if sha else None)
            or self._first("RELEASE_ID", "GITHUB_RUN_ID")
            or "UNKNOWN"
        )
        logger.debug("Retrieved release ID: %s", release_id)
        return release_id

    def get_repository(self) -> str:
        repository = self._first("GITHUB_REPOSITORY", "REPO_NAME") or "UNKNOWN"
        logger.debug("Retrieved repository: %s", repository)
        return repository

    def get_branch(self) -> str:
        branch = self._first("GITHUB_REF_NAME", "GITHUB_HEAD_REF", "GITHUB_BASE_REF", "BRANCH_NAME") or "main"
        logger.debug("Retrieved branch: %s", branch)
        return branch

    def is_production_deployment(self) -> bool:
        environment = self._first("DEPLOYMENT_ENVIRONMENT", "ENVIRONMENT", "DEPLOY_ENV") or ""
        is_production = environment.lower() in PRODUCTION_ENVIRONMENTS
        if not is_production:
            # Releases cut from the default branch count as production.
            is_production = self.get_branch().lower() in PRODUCTION_BRANCHES
        logger.debug("Is production deployment: %s (environment: %r)", is_production, environment)
        return is_production

    def get_issue_key(self) -> str | None:
        explicit = self._first("JIRA_ISSUE_KEY")
        if explicit:
            return explicit
        for name in ("GITHUB_HEAD_REF", "GITHUB_REF_NAME", "COMMIT_MESSAGE"):
            match = ISSUE_KEY_RE.search(self._environ.get(name, ""))
            if match:
                logger.debug("Detected Jira issue key %s in %s", match.group(0), name)
                return match.group(0)
        return None

    def resolve(self) -> DeploymentContext:
        return DeploymentContext(
            release_id=self.get_release_id(),
            repository=self.get_repository(),
            branch=self.get_branch(),
            is_production=self.is_production_deployment(),
            issue_key=self.get_issue_key(),
        )
