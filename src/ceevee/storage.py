import json
import logging
import time
from pathlib import Path

from ceevee.config import HISTORY_PATH, MAX_CONTENT_LENGTH, MAX_ITEMS, RETENTION_DAYS
from ceevee.models import ClipboardItem

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class HistoryStore:
    """Most-recent-first clipboard history persisted as a JSON list of records."""

    def __init__(
        self,
        path: str | Path | None = None,
        max_items: int = MAX_ITEMS,
        retention_days: int | None = RETENTION_DAYS,
    ):
        self._path = Path(path) if path else HISTORY_PATH
        self._max_items = max_items
        self._items: list[ClipboardItem] = []
        self.load()
        if retention_days is not None:
            self.purge_old(retention_days)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        if not self._path.exists():
            logger.info("No clipboard history at %s, starting fresh", self._path)
            self._items = []
            return

        try:
            records = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Error reading clipboard history from %s", self._path)
            self._items = []
            return

        if not isinstance(records, list):
            logger.error("Clipboard history in %s is not a list, ignoring it", self._path)
            records = []

        items = []
        for record in records:
            try:
                items.append(ClipboardItem.from_record(record))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed history record: %r", record)
        self._items = items[: self._max_items]
        logger.info("Loaded %d clipboard items from %s", len(self._items), self._path)

    def save(self) -> None:
        records = [item.to_record() for item in self._items]
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError:
            logger.exception("Error saving clipboard history to %s", self._path)

    def add_item(self, content: str, source_app: str | None = None, now: float | None = None) -> ClipboardItem | None:
        """Record a new capture at the front of the history.

        Args:
            content: Captured clipboard text.
            source_app: Application that had focus at capture time.
            now: Capture time in epoch seconds, defaults to the current time.

        Returns:
            The stored item, or None if the capture was rejected as empty,
            oversize, or identical to the most recent item.
        """
        if not isinstance(content, str) or not content.strip():
            logger.debug("Ignoring empty clipboard content")
            return None
        if len(content) > MAX_CONTENT_LENGTH:
            logger.debug("Ignoring clipboard content of %d characters", len(content))
            return None
        if self._items and self._items[0].content == content:
            return None

        current = time.time() if now is None else now
        item_id = int(current * 1000)
        if self._items:
            item_id = max(item_id, max(item.id for item in self._items) + 1)

        item = ClipboardItem(id=item_id, content=content, timestamp=int(current), source_app=source_app)
        self._items.insert(0, item)
        del self._items[self._max_items:]
        self.save()
        logger.info("Saved clipboard item %d from %s", item.id, source_app or "unknown app")
        return item

    def get_items(self) -> list[ClipboardItem]:
        return list(self._items)

    def get_item(self, item_id: int) -> ClipboardItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def delete_item(self, item_id: int) -> bool:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                del self._items[index]
                self.save()
                logger.info("Deleted clipboard item %d", item_id)
                return True
        return False

    def purge_old(self, max_age_days: int = RETENTION_DAYS, now: float | None = None) -> int:
        current = time.time() if now is None else now
        cutoff = current - max_age_days * SECONDS_PER_DAY
        before = len(self._items)
        self._items = [item for item in self._items if item.timestamp > cutoff]

        deleted = before - len(self._items)
        if deleted:
            logger.info("Purged %d items older than %d days", deleted, max_age_days)
            self.save()
        return deleted

    def clear_all(self) -> None:
        self._items = []
        self.save()

    def count(self) -> int:
        return len(self._items)

    def close(self) -> None:
        self.save()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
