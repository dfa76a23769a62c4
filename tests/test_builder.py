"""Tests for change request assembly."""

from datetime import datetime, timedelta

from changethor.builder import build_change_request, change_name
from changethor.models import DeploymentContext, Issue
from changethor.settings import ChangeThorSettings


class TestChangeName:
    def test_without_issue(self, deployment: DeploymentContext) -> None:
        assert change_name(deployment, None) == "Production Deployment - Release v1.2.3"

    def test_with_issue(self, deployment: DeploymentContext, jira_issue: Issue) -> None:
        assert change_name(deployment, jira_issue) == "Production Deployment - OPS-42: Speed up order lookups"

    def test_exactly_100_not_truncated(self, deployment: DeploymentContext) -> None:
        prefix = "Production Deployment - OPS-1: "
        issue = Issue(key="OPS-1", summary="s" * (100 - len(prefix)))
        name = change_name(deployment, issue)
        assert len(name) == 100
        assert not name.endswith("...")

    def test_long_name_truncated_to_100(self, deployment: DeploymentContext) -> None:
        issue = Issue(key="OPS-1", summary="word " * 40)
        name = change_name(deployment, issue)
        assert len(name) == 100
        assert name.endswith("...")
        assert name.startswith("Production Deployment - OPS-1: word word")


class TestBuildChangeRequest:
    def test_no_issue_uses_base_description(
        self, deployment: DeploymentContext, settings: ChangeThorSettings, now: datetime
    ) -> None:
        request = build_change_request(deployment, None, settings, now)
        assert request.name == "Production Deployment - Release v1.2.3"
        assert "Release ID: v1.2.3" in request.description
        assert "ROLLBACK PLAN:" in request.description
        assert "ASSOCIATED JIRA ISSUE:" not in request.description
        assert "RISK ASSESSMENT:" not in request.description

    def test_defaults_copied_verbatim(
        self, deployment: DeploymentContext, settings: ChangeThorSettings, now: datetime
    ) -> None:
        request = build_change_request(deployment, None, settings, now)
        assert request.requester_email == "release-bot@example.com"
        assert request.category == "Software"
        assert request.subcategory == "Deployment"
        assert request.priority == "Medium"

    def test_planning_window(
        self, deployment: DeploymentContext, settings: ChangeThorSettings, now: datetime
    ) -> None:
        request = build_change_request(deployment, None, settings, now)
        assert request.planned_start == now + timedelta(minutes=30)
        assert request.planned_end == now + timedelta(hours=2)
        fields = request.to_payload()["change"]["planning_fields"]
        assert fields == {"planned_start_date": "2024-05-01T12:30:00Z", "planned_end_date": "2024-05-01T14:00:00Z"}

    def test_with_issue_is_enhanced(
        self, deployment: DeploymentContext, jira_issue: Issue, settings: ChangeThorSettings, now: datetime
    ) -> None:
        request = build_change_request(deployment, jira_issue, settings, now)
        assert request.name == "Production Deployment - OPS-42: Speed up order lookups"
        assert "ASSOCIATED JIRA ISSUE:" in request.description
        assert "Risk Level: High" in request.description

    def test_enhancement_disabled(
        self, deployment: DeploymentContext, jira_issue: Issue, settings: ChangeThorSettings, now: datetime
    ) -> None:
        disabled = settings.model_copy(update={"enable_description_enhancement": False})
        request = build_change_request(deployment, jira_issue, disabled, now)
        assert "ASSOCIATED JIRA ISSUE:" not in request.description
        # the title still names the issue
        assert request.name.startswith("Production Deployment - OPS-42")
