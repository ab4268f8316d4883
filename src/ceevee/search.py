"""Search filtering and term highlighting."""

import html
import re
from collections.abc import Iterable

from ceevee.models import ClipboardItem

HIGHLIGHT_OPEN = "<mark>"
HIGHLIGHT_CLOSE = "</mark>"


def normalize_query(query: str | None) -> str:
    if not isinstance(query, str):
        return ""
    return query.strip().lower()


def matches(item: ClipboardItem, query: str | None) -> bool:
    """Check whether an item matches a search query.

    Args:
        item: The clipboard item.
        query: Search text; compared case-insensitively as a substring.

    Returns:
        True if the query is empty or found in the content or source app.
    """
    needle = normalize_query(query)
    if not needle:
        return True
    if needle in (item.content or "").lower():
        return True
    return bool(item.source_app) and needle in item.source_app.lower()


def filter_items(items: Iterable[ClipboardItem], query: str | None) -> tuple[ClipboardItem, ...]:
    return tuple(item for item in items if matches(item, query))


def _valid_terms(terms: str | Iterable[str] | None) -> list[str]:
    if not terms:
        return []
    if isinstance(terms, str):
        terms = [terms]
    valid = [term for term in terms if isinstance(term, str) and term.strip()]
    # Longest first so a shorter overlapping term never splits a longer match
    return sorted(set(valid), key=len, reverse=True)


def highlight(
    text: str | None,
    terms: str | Iterable[str] | None,
    open_tag: str = HIGHLIGHT_OPEN,
    close_tag: str = HIGHLIGHT_CLOSE,
) -> str:
    """Escape text for display and wrap each search term occurrence.

    Matching runs on the raw text, so entities produced by escaping and the
    inserted markers are never matched themselves.

    Args:
        text: Text to display.
        terms: A single search term or an iterable of terms.
        open_tag: Marker inserted before each match.
        close_tag: Marker inserted after each match.

    Returns:
        Escaped text with matches wrapped in the markers.
    """
    if not isinstance(text, str):
        return ""

    valid = _valid_terms(terms)
    if not valid:
        return html.escape(text, quote=False)

    pattern = re.compile("|".join(re.escape(term) for term in valid), re.IGNORECASE)
    result = []
    last_pos = 0
    for match in pattern.finditer(text):
        result.append(html.escape(text[last_pos:match.start()], quote=False))
        result.append(open_tag + html.escape(match.group(0), quote=False) + close_tag)
        last_pos = match.end()
    result.append(html.escape(text[last_pos:], quote=False))

    return "".join(result)
