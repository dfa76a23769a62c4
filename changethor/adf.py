"""Plain-text rendering of Atlassian Document Format (ADF) descriptions."""

import logging

from changethor.models import DocNode

logger = logging.getLogger(__name__)


class MalformedDocumentError(ValueError):
    pass


def _visit(node: DocNode, out: list[str]) -> None:
    match node.type:
        case "text":
            if node.text is None:
                raise MalformedDocumentError("text node without text")
            out.append(node.text)
        case "paragraph" | "heading":
            for child in node.content:
                _visit(child, out)
            out.append("\n")
        case _:
            # Unknown kinds are transparent: children only, no markup.
            for child in node.content:
                _visit(child, out)


def extract_plain_text(description: str | DocNode | None, fallback: str = "") -> str:
    """Flatten an issue description to plain text.

    Plain strings are returned unchanged. ADF trees are walked depth-first;
    a malformed tree yields ``fallback`` (normally the issue summary) instead
    of raising.
    """
    if description is None:
        return ""
    if isinstance(description, str):
        return description

    out: list[str] = []
    try:
        _visit(description, out)
    except (MalformedDocumentError, RecursionError) as exc:
        logger.warning("Failed to extract text from ADF description, using fallback: %s", exc)
        return fallback.strip()
    return "".join(out).strip()
