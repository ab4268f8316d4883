"""Per-type display normalization for clipboard text."""

import re
from collections.abc import Callable
from urllib.parse import urlsplit

from ceevee.classify import classify
from ceevee.config import DISPLAY_LENGTH, ELLIPSIS
from ceevee.models import ContentType
from ceevee.utils import truncate_text

CODE_BLOCK_PLACEHOLDER = "[code block]"
BULLET = "• "
DATA_EDGE_LENGTH = 20

FENCED_BLOCK = re.compile(r"```.*?```", re.DOTALL)
HEADING = re.compile(r"^#{1,6}[ \t]+", re.MULTILINE)
LIST_MARKER = re.compile(r"^(?:[-*+]|[0-9]+\.)[ \t]+", re.MULTILINE)
BLOCKQUOTE = re.compile(r"^>[ \t]+", re.MULTILINE)
BOLD = re.compile(r"\*\*(.*?)\*\*")
ITALIC = re.compile(r"\*(.*?)\*")
INLINE_CODE = re.compile(r"`(.*?)`")
IMAGE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
LINK = re.compile(r"\[([^\]]*)\]\([^)]*\)")
PATH_SEPARATOR = re.compile(r"[/\\]")


def _format_url(content: str) -> str:
    text = content.strip()
    try:
        parts = urlsplit(text)
        host = parts.hostname
    except ValueError:
        parts, host = None, None

    if parts is not None and parts.scheme and host:
        path = "" if parts.path in ("", "/") else parts.path
        query = ELLIPSIS if parts.query else ""
        return truncate_text(f"{host.removeprefix('www.')}{path}{query}")

    if text.startswith("www."):
        return truncate_text(text[4:])
    return truncate_text(content)


def _format_compact(content: str) -> str:
    return truncate_text(" ".join(content.split()))


def _format_markdown(content: str) -> str:
    cleaned = FENCED_BLOCK.sub(CODE_BLOCK_PLACEHOLDER, content)
    cleaned = HEADING.sub("", cleaned)
    cleaned = LIST_MARKER.sub(BULLET, cleaned)
    cleaned = BLOCKQUOTE.sub(BULLET, cleaned)
    cleaned = BOLD.sub(r"\1", cleaned)
    cleaned = ITALIC.sub(r"\1", cleaned)
    cleaned = INLINE_CODE.sub(r"\1", cleaned)
    cleaned = IMAGE.sub(r"\1", cleaned)
    cleaned = LINK.sub(r"\1", cleaned)
    return truncate_text(cleaned.strip())


def _format_contact(content: str) -> str:
    return truncate_text(content.strip())


def _format_filepath(content: str) -> str:
    segments = PATH_SEPARATOR.split(content.strip())
    if len(segments) > 2 and len(content) > DISPLAY_LENGTH:
        return truncate_text(f".../{segments[-2]}/{segments[-1]}")
    return truncate_text(content)


def _format_data(content: str) -> str:
    # Keep both ends so similar blobs can be told apart
    if len(content) > DISPLAY_LENGTH:
        return content[:DATA_EDGE_LENGTH] + ELLIPSIS + content[-DATA_EDGE_LENGTH:]
    return content


FORMATTERS: dict[ContentType, Callable[[str], str]] = {
    ContentType.URL: _format_url,
    ContentType.CODE: _format_compact,
    ContentType.JSON: _format_compact,
    ContentType.COMMAND: _format_compact,
    ContentType.MARKDOWN: _format_markdown,
    ContentType.EMAIL: _format_contact,
    ContentType.PHONE: _format_contact,
    ContentType.FILEPATH: _format_filepath,
    ContentType.DATA: _format_data,
}


def format_for_display(content: str | None, content_type: ContentType | str | None = None) -> str:
    """Format clipboard text for a single list row.

    Args:
        content: Raw clipboard text.
        content_type: Detected type; classified from the content when omitted.

    Returns:
        Display text of at most DISPLAY_LENGTH characters plus ELLIPSIS.
    """
    if not isinstance(content, str):
        return ""
    if content_type is None:
        content_type = classify(content)
    try:
        content_type = ContentType(content_type)
    except ValueError:
        content_type = ContentType.TEXT

    formatter = FORMATTERS.get(content_type, truncate_text)
    return formatter(content)
