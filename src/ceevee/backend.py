"""Collaborator interface between the list UI and the clipboard history."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from ceevee.models import ClipboardItem
from ceevee.storage import HistoryStore

logger = logging.getLogger(__name__)


class CollaboratorUnavailable(Exception):
    """A fetch, paste or delete request could not be completed."""


@dataclass(frozen=True)
class RequestResult:
    success: bool
    error: str | None = None


class Backend(Protocol):
    def fetch_items(self) -> list[ClipboardItem]: ...

    def request_paste(self, item_id: int) -> RequestResult: ...

    def request_delete(self, item_id: int) -> RequestResult: ...

    def on_clipboard_changed(self, callback: Callable[[], None]) -> None: ...

    def request_hide(self) -> None: ...


class LocalBackend:
    """Backend over an in-process HistoryStore.

    Args:
        store: History the list is read from and deleted from.
        write_clipboard: Puts text on the system clipboard.
        simulate_paste: Sends the paste keystroke; returns False on failure.
        hide: Collapses the UI so focus returns to the previous application.
    """

    def __init__(
        self,
        store: HistoryStore,
        write_clipboard: Callable[[str], None],
        simulate_paste: Callable[[], bool],
        hide: Callable[[], None] | None = None,
    ):
        self._store = store
        self._write_clipboard = write_clipboard
        self._simulate_paste = simulate_paste
        self._hide = hide
        self._listeners: list[Callable[[], None]] = []

    def fetch_items(self) -> list[ClipboardItem]:
        return self._store.get_items()

    def request_paste(self, item_id: int) -> RequestResult:
        item = self._store.get_item(item_id)
        if item is None:
            logger.error("Item not found: %s", item_id)
            return RequestResult(False, "Item not found")

        # Hide first so the paste lands in the previously active application
        self.request_hide()
        try:
            self._write_clipboard(item.content)
        except Exception as exc:
            logger.exception("Error writing item %s to clipboard", item_id)
            raise CollaboratorUnavailable("Clipboard is unavailable") from exc

        if not self._simulate_paste():
            return RequestResult(False, "Paste operation failed")

        logger.info("Pasted item %s", item_id)
        return RequestResult(True)

    def request_delete(self, item_id: int) -> RequestResult:
        if not self._store.delete_item(item_id):
            return RequestResult(False, "Item not found")
        return RequestResult(True)

    def on_clipboard_changed(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def notify_changed(self) -> None:
        for callback in list(self._listeners):
            callback()

    def request_hide(self) -> None:
        if self._hide:
            self._hide()
