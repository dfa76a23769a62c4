"""Heuristic deployment risk scoring from Jira issue metadata."""

from changethor.models import Issue, RiskAssessment, RiskLevel

MINIMAL_RISK_LINE = "Standard deployment with minimal risk factors identified"

_PRIORITY_MARKERS = ("high", "critical")
_COMPONENT_MARKERS = ("database", "security", "authentication")
_LABEL_MARKERS = ("breaking-change", "database-migration")


def _contains_any(value: str, markers: tuple[str, ...]) -> bool:
    lowered = value.lower()
    return any(marker in lowered for marker in markers)


def assess(issue: Issue) -> RiskAssessment:
    """Score an issue. Each rule may only raise the level, never lower it."""
    level = RiskLevel.LOW
    factors: list[str] = []

    if _contains_any(issue.priority, _PRIORITY_MARKERS):
        factors.append("High priority issue")
        level = max(level, RiskLevel.MEDIUM_HIGH)

    if "bug" in issue.issue_type.lower():
        factors.append("Bug fix deployment")
        level = max(level, RiskLevel.MEDIUM if level == RiskLevel.LOW else RiskLevel.MEDIUM_HIGH)

    if any(_contains_any(c, _COMPONENT_MARKERS) for c in issue.components):
        factors.append("Critical system components affected")
        level = max(level, RiskLevel.MEDIUM_HIGH)

    if any(_contains_any(label, _LABEL_MARKERS) for label in issue.labels):
        factors.append("Breaking changes or database migrations")
        level = RiskLevel.HIGH

    return RiskAssessment(level=level, factors=tuple(factors))


def render_assessment(assessment: RiskAssessment) -> str:
    """Render the RISK ASSESSMENT body of a change description."""
    lines = [f"Risk Level: {assessment.level.label}"]
    if assessment.factors:
        lines.append("Risk Factors:")
        lines += [f"  • {factor}" for factor in assessment.factors]
    else:
        lines.append(f"• {MINIMAL_RISK_LINE}")
    return "\n".join(lines)
