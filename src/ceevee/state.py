"""Selection and filtering state for the clipboard list.

Every transition returns a new ListState; nothing is mutated in place, so a
renderer can project any state without seeing a half-applied update.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace

from ceevee.models import ClipboardItem
from ceevee.search import filter_items, normalize_query

NO_SELECTION = -1


def _clamp_selection(index: int, length: int) -> int:
    if length == 0:
        return NO_SELECTION
    if index < 0:
        return 0
    return min(index, length - 1)


@dataclass(frozen=True)
class ListState:
    items: tuple[ClipboardItem, ...] = ()
    search_query: str = ""
    filtered_items: tuple[ClipboardItem, ...] = ()
    selected_index: int = NO_SELECTION
    is_loading: bool = False

    @property
    def is_searching(self) -> bool:
        return bool(self.search_query)

    @property
    def has_selection(self) -> bool:
        return self.selected_index != NO_SELECTION

    def begin_loading(self) -> "ListState":
        return replace(self, is_loading=True)

    def end_loading(self) -> "ListState":
        return replace(self, is_loading=False)

    def load(self, items: Iterable[ClipboardItem]) -> "ListState":
        """Replace the items with a fresh snapshot, keeping the active query."""
        new_items = tuple(items)
        filtered = filter_items(new_items, self.search_query)
        return replace(
            self,
            items=new_items,
            filtered_items=filtered,
            selected_index=_clamp_selection(self.selected_index, len(filtered)),
            is_loading=False,
        )

    def set_query(self, query: str | None) -> "ListState":
        normalized = normalize_query(query)
        filtered = filter_items(self.items, normalized)
        return replace(
            self,
            search_query=normalized,
            filtered_items=filtered,
            selected_index=0 if filtered else NO_SELECTION,
        )

    def move_selection(self, direction: int) -> "ListState":
        """Move the selection one step, wrapping at both ends."""
        count = len(self.filtered_items)
        if count == 0 or direction == 0:
            return self

        step = 1 if direction > 0 else -1
        if self.selected_index == NO_SELECTION:
            new_index = 0 if step > 0 else count - 1
        else:
            new_index = (self.selected_index + step) % count
        return replace(self, selected_index=new_index)

    def select(self, index: int) -> "ListState":
        if not 0 <= index < len(self.filtered_items):
            return self
        return replace(self, selected_index=index)

    def remove_item(self, item_id: int) -> "ListState":
        items = tuple(item for item in self.items if item.id != item_id)
        filtered = tuple(item for item in self.filtered_items if item.id != item_id)
        return replace(
            self,
            items=items,
            filtered_items=filtered,
            selected_index=_clamp_selection(self.selected_index, len(filtered)),
        )

    def delete_at(self, index: int) -> "ListState":
        # The filtered view and the full list diverge while searching; match by id
        item = self.item_at(index)
        if item is None:
            return self
        return self.remove_item(item.id)

    def item_at(self, index: int) -> ClipboardItem | None:
        if 0 <= index < len(self.filtered_items):
            return self.filtered_items[index]
        return None

    def selected_item(self) -> ClipboardItem | None:
        return self.item_at(self.selected_index)
