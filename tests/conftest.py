import time

import pytest

from ceevee.models import ClipboardItem
from ceevee.storage import HistoryStore


@pytest.fixture
def store(tmp_path):
    mgr = HistoryStore(path=tmp_path / "history.json")
    yield mgr
    mgr.close()


@pytest.fixture
def make_item():
    """Factory fixture to create ClipboardItem instances for testing."""
    counter = iter(range(1, 10_000))

    def _make_item(
        content: str = "hello world",
        source_app: str | None = None,
        item_id: int | None = None,
        timestamp: int | None = None,
    ) -> ClipboardItem:
        return ClipboardItem(
            id=item_id if item_id is not None else next(counter),
            content=content,
            timestamp=timestamp if timestamp is not None else int(time.time()),
            source_app=source_app,
        )

    return _make_item


class ManualTask:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Collects scheduled callbacks so tests decide when time passes."""

    def __init__(self):
        self.tasks = []

    def schedule(self, delay, callback):
        task = ManualTask(callback)
        self.tasks.append(task)
        return task

    def advance(self):
        for task in list(self.tasks):
            if not task.cancelled:
                task.callback()
        self.tasks.clear()


@pytest.fixture
def scheduler():
    return ManualScheduler()
