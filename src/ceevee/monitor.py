import logging
from collections.abc import Callable

from AppKit import NSPasteboard, NSPasteboardTypeString, NSWorkspace

from ceevee.storage import HistoryStore

logger = logging.getLogger(__name__)


class ClipboardMonitor:
    def __init__(self, store: HistoryStore, on_change: Callable[[], None] | None = None):
        self._store = store
        self._on_change = on_change
        self._pasteboard = NSPasteboard.generalPasteboard()
        self._last_change_count = self._pasteboard.changeCount()

    def check_clipboard(self) -> bool:
        current_count = self._pasteboard.changeCount()
        if current_count == self._last_change_count:
            return False

        self._last_change_count = current_count

        try:
            text = self._read_text()
            if text is None:
                return False

            item = self._store.add_item(text, source_app=self._frontmost_app_name())
            if item is None:
                return False

            if self._on_change:
                self._on_change()
            return True
        except Exception:
            logger.exception("Error reading clipboard")
            return False

    def capture_current(self) -> bool:
        """Record whatever text is on the clipboard right now."""
        self.sync_change_count()
        text = self._read_text()
        if text is None:
            return False
        return self._store.add_item(text) is not None

    def sync_change_count(self) -> None:
        self._last_change_count = self._pasteboard.changeCount()

    def write_text(self, text: str) -> None:
        self._pasteboard.clearContents()
        self._pasteboard.setString_forType_(text, NSPasteboardTypeString)
        # Our own write must not come back as a new capture
        self.sync_change_count()

    def _read_text(self) -> str | None:
        types = self._pasteboard.types()
        if types is None or NSPasteboardTypeString not in types:
            return None

        text = self._pasteboard.stringForType_(NSPasteboardTypeString)
        if not text or not text.strip():
            return None
        return str(text)

    @staticmethod
    def _frontmost_app_name() -> str | None:
        try:
            app = NSWorkspace.sharedWorkspace().frontmostApplication()
            return str(app.localizedName()) if app else None
        except Exception:
            logger.exception("Error detecting source application")
            return None
