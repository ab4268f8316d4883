"""Pure projection of a ListState into displayable rows."""

from dataclasses import dataclass, field

from ceevee.config import QUICK_PASTE_SLOTS
from ceevee.formatting import format_for_display
from ceevee.models import ContentType
from ceevee.search import HIGHLIGHT_CLOSE, HIGHLIGHT_OPEN, highlight
from ceevee.state import ListState
from ceevee.utils import content_size_info, format_relative_time

EMPTY_TITLE = "Your clipboard is empty"
EMPTY_SUBTITLE = "Copy something to get started"
NO_RESULTS_TITLE = "No items match your search"
NO_RESULTS_SUBTITLE = "Try a different search term"
SHORTCUT_MODIFIER = "⌘"


@dataclass
class ItemRow:
    """Everything needed to draw one list row, independent of the UI toolkit."""

    item_id: int
    index: int
    content_type: ContentType
    display_text: str
    markup: str
    source_app: str | None
    source_markup: str | None
    relative_time: str
    size_info: str
    shortcut: str | None
    selected: bool


@dataclass
class ListView:
    rows: list[ItemRow] = field(default_factory=list)
    is_loading: bool = False
    empty_title: str | None = None
    empty_subtitle: str | None = None


def shortcut_label(index: int) -> str | None:
    if 0 <= index < QUICK_PASTE_SLOTS:
        return f"{SHORTCUT_MODIFIER}{index + 1}"
    return None


def render(
    state: ListState,
    now: float | None = None,
    open_tag: str = HIGHLIGHT_OPEN,
    close_tag: str = HIGHLIGHT_CLOSE,
) -> ListView:
    if state.is_loading:
        return ListView(is_loading=True)

    if not state.filtered_items:
        if state.is_searching:
            return ListView(empty_title=NO_RESULTS_TITLE, empty_subtitle=NO_RESULTS_SUBTITLE)
        return ListView(empty_title=EMPTY_TITLE, empty_subtitle=EMPTY_SUBTITLE)

    terms = state.search_query or None
    rows = []
    for index, item in enumerate(state.filtered_items):
        content_type = item.content_type
        display_text = format_for_display(item.content, content_type)
        source_markup = None
        if item.source_app:
            source_markup = highlight(item.source_app, terms, open_tag, close_tag)
        rows.append(ItemRow(
            item_id=item.id,
            index=index,
            content_type=content_type,
            display_text=display_text,
            markup=highlight(display_text, terms, open_tag, close_tag),
            source_app=item.source_app,
            source_markup=source_markup,
            relative_time=format_relative_time(item.timestamp, now),
            size_info=content_size_info(item.content),
            shortcut=shortcut_label(index),
            selected=index == state.selected_index,
        ))

    return ListView(rows=rows)
