"""Keyboard and pointer handling for the clipboard list.

The controller owns the current ListState and is the single place where input
events become state transitions or collaborator requests.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ceevee.backend import Backend, RequestResult
from ceevee.config import QUICK_PASTE_SLOTS, SEARCH_DEBOUNCE
from ceevee.debounce import Debouncer, ImmediateScheduler, Scheduler
from ceevee.models import ClipboardItem
from ceevee.state import ListState

logger = logging.getLogger(__name__)

ARROW_DOWN = "ArrowDown"
ARROW_UP = "ArrowUp"
TAB = "Tab"
ENTER = "Enter"
ESCAPE = "Escape"
BACKSPACE = "Backspace"
DELETE = "Delete"

QUICK_PASTE_KEYS = [str(n) for n in range(1, QUICK_PASTE_SLOTS + 1)]

PASTE_ERROR = "Failed to paste item. Please try again."
DELETE_ERROR = "Failed to delete item. Please try again."
LOAD_ERROR = "Failed to load clipboard history."


class Focus(Enum):
    LIST = "list"
    SEARCH = "search"


@dataclass(frozen=True)
class KeyEvent:
    """A logical key press. `modifier` is Cmd on macOS, Ctrl elsewhere."""

    key: str
    modifier: bool = False


class InteractionController:
    def __init__(
        self,
        backend: Backend,
        scheduler: Scheduler | None = None,
        notify: Callable[[str], None] | None = None,
        on_render: Callable[[ListState], None] | None = None,
        on_focus_search: Callable[[], None] | None = None,
        debounce: float = SEARCH_DEBOUNCE,
    ):
        self._backend = backend
        self._notify = notify
        self._on_render = on_render
        self._on_focus_search = on_focus_search
        self._search = Debouncer(debounce, scheduler or ImmediateScheduler())
        self._subscribed = False
        self._paste_in_flight = False
        self._delete_in_flight = False
        self.state = ListState()
        self.focus = Focus.LIST
        self.search_text = ""

    def _set_state(self, state: ListState) -> None:
        if state is self.state:
            return
        self.state = state
        if self._on_render:
            self._on_render(state)

    def _show_error(self, message: str) -> None:
        if self._notify:
            self._notify(message)

    def start(self) -> None:
        self._set_state(self.state.begin_loading())
        if not self._subscribed:
            self._backend.on_clipboard_changed(self.refresh)
            self._subscribed = True
        self.refresh()

    def refresh(self) -> bool:
        try:
            items = self._backend.fetch_items()
        except Exception:
            logger.exception("Failed to fetch clipboard items")
            self._set_state(self.state.end_loading())
            self._show_error(LOAD_ERROR)
            return False

        self._set_state(self.state.load(items))
        logger.debug("Loaded %d clipboard items", len(self.state.items))
        return True

    # Search

    def on_search_input(self, text: str | None) -> None:
        self.search_text = text or ""
        self._search.call(self._apply_search, self.search_text)

    def _apply_search(self, text: str) -> None:
        self._set_state(self.state.set_query(text))
        logger.debug("Search %r matched %d items", self.state.search_query, len(self.state.filtered_items))

    def flush_search(self) -> None:
        self._search.flush()

    def clear_search(self) -> None:
        self._search.cancel()
        self.search_text = ""
        self._set_state(self.state.set_query(""))

    def focus_search(self) -> None:
        self.focus = Focus.SEARCH
        if self._on_focus_search:
            self._on_focus_search()

    def focus_list(self) -> None:
        self.focus = Focus.LIST

    # Keyboard

    def handle_key(self, event: KeyEvent) -> bool:
        """Route a key press to exactly one handler.

        Returns:
            True if the event was consumed.
        """
        if self.focus is Focus.SEARCH and self._handle_search_key(event):
            return True
        return self._handle_window_key(event)

    def _handle_search_key(self, event: KeyEvent) -> bool:
        # Only Escape belongs to the search field; navigation is window-level
        if event.key == ESCAPE and not event.modifier and self.search_text.strip():
            self.clear_search()
            return True
        return False

    def _handle_window_key(self, event: KeyEvent) -> bool:
        key = event.key
        if event.modifier:
            if key in QUICK_PASTE_KEYS:
                self.paste_at(int(key) - 1)
                return True
            if key.lower() == "f":
                self.focus_search()
                return True
            if key in (BACKSPACE, DELETE):
                self.delete_selected()
                return True
            return False

        if key in (ARROW_DOWN, TAB):
            self.move_selection(1)
        elif key == ARROW_UP:
            self.move_selection(-1)
        elif key == ENTER:
            self.paste_selected()
        elif key == ESCAPE:
            if self.search_text.strip():
                self.clear_search()
            else:
                self.request_hide()
        else:
            return False
        return True

    # Actions

    def move_selection(self, direction: int) -> None:
        self._set_state(self.state.move_selection(direction))

    def click(self, index: int) -> None:
        self._set_state(self.state.select(index))

    def double_click(self, index: int) -> bool:
        self.click(index)
        if self.state.selected_index != index:
            return False
        return self.paste_selected()

    def paste_selected(self) -> bool:
        item = self.state.selected_item()
        if item is None:
            return False
        return self._paste(item)

    def paste_at(self, index: int) -> bool:
        item = self.state.item_at(index)
        if item is None:
            return False
        return self._paste(item)

    def delete_selected(self) -> bool:
        item = self.state.selected_item()
        if item is None:
            return False
        return self._delete(item)

    def request_hide(self) -> None:
        try:
            self._backend.request_hide()
        except Exception:
            logger.exception("Failed to hide window")

    def on_show(self) -> None:
        """Reset to a fresh list view whenever the UI is shown."""
        self.clear_search()
        self.focus = Focus.LIST
        self._set_state(self.state.select(0))

    def _paste(self, item: ClipboardItem) -> bool:
        if self._paste_in_flight:
            logger.debug("Paste already in progress, ignoring item %s", item.id)
            return False

        self._paste_in_flight = True
        try:
            result = self._backend.request_paste(item.id)
        except Exception:
            logger.exception("Failed to paste item %s", item.id)
            result = RequestResult(False, "Paste request failed")
        finally:
            self._paste_in_flight = False

        if not result.success:
            logger.error("Failed to paste item %s: %s", item.id, result.error)
            self._show_error(PASTE_ERROR)
            return False
        return True

    def _delete(self, item: ClipboardItem) -> bool:
        if self._delete_in_flight:
            logger.debug("Delete already in progress, ignoring item %s", item.id)
            return False

        self._delete_in_flight = True
        try:
            result = self._backend.request_delete(item.id)
        except Exception:
            logger.exception("Failed to delete item %s", item.id)
            result = RequestResult(False, "Delete request failed")
        finally:
            self._delete_in_flight = False

        if not result.success:
            logger.error("Failed to delete item %s: %s", item.id, result.error)
            self._show_error(DELETE_ERROR)
            return False

        self._set_state(self.state.remove_item(item.id))
        return True
