import json

from ceevee.config import MAX_CONTENT_LENGTH, MAX_ITEMS
from ceevee.storage import SECONDS_PER_DAY, HistoryStore

NOW = 1_700_000_000


class TestAddAndRetrieve:
    def test_add_item(self, store):
        item = store.add_item("test text", source_app="Terminal", now=NOW)
        assert item is not None
        assert item.content == "test text"
        assert item.source_app == "Terminal"
        assert item.timestamp == NOW
        assert item.id == NOW * 1000

    def test_most_recent_first(self, store):
        store.add_item("first", now=NOW)
        store.add_item("second", now=NOW + 1)
        assert [item.content for item in store.get_items()] == ["second", "first"]

    def test_get_item(self, store):
        item = store.add_item("find me")
        assert store.get_item(item.id).content == "find me"

    def test_get_item_not_found(self, store):
        assert store.get_item(99999) is None

    def test_get_items_returns_copy(self, store):
        store.add_item("one")
        store.get_items().clear()
        assert store.count() == 1

    def test_ids_unique_within_same_millisecond(self, store):
        first = store.add_item("a", now=NOW)
        second = store.add_item("b", now=NOW)
        assert second.id > first.id


class TestRejection:
    def test_empty(self, store):
        assert store.add_item("") is None

    def test_whitespace_only(self, store):
        assert store.add_item("  \n\t") is None

    def test_non_string(self, store):
        assert store.add_item(None) is None

    def test_oversize(self, store):
        assert store.add_item("x" * (MAX_CONTENT_LENGTH + 1)) is None
        assert store.count() == 0

    def test_max_length_accepted(self, store):
        assert store.add_item("x" * MAX_CONTENT_LENGTH) is not None

    def test_adjacent_duplicate(self, store):
        store.add_item("same")
        assert store.add_item("same") is None
        assert store.count() == 1

    def test_non_adjacent_duplicate_kept(self, store):
        store.add_item("same", now=NOW)
        store.add_item("other", now=NOW + 1)
        assert store.add_item("same", now=NOW + 2) is not None
        assert store.count() == 3


class TestCap:
    def test_oldest_evicted(self, store):
        for n in range(MAX_ITEMS + 1):
            store.add_item(f"item {n}", now=NOW + n)
        items = store.get_items()
        assert len(items) == MAX_ITEMS
        assert items[0].content == f"item {MAX_ITEMS}"
        assert "item 0" not in [item.content for item in items]

    def test_custom_cap(self, tmp_path):
        store = HistoryStore(tmp_path / "h.json", max_items=3)
        for n in range(5):
            store.add_item(f"item {n}", now=NOW + n)
        assert [item.content for item in store.get_items()] == ["item 4", "item 3", "item 2"]


class TestDelete:
    def test_delete_item(self, store):
        item = store.add_item("delete me")
        assert store.delete_item(item.id)
        assert store.get_item(item.id) is None

    def test_delete_missing(self, store):
        assert not store.delete_item(424242)

    def test_clear_all(self, store):
        store.add_item("a", now=NOW)
        store.add_item("b", now=NOW + 1)
        store.clear_all()
        assert store.count() == 0


class TestPurge:
    def test_purge_old(self, store):
        store.add_item("old", now=NOW - 8 * SECONDS_PER_DAY)
        store.add_item("new", now=NOW)
        assert store.purge_old(7, now=NOW) == 1
        assert [item.content for item in store.get_items()] == ["new"]

    def test_purge_nothing(self, store):
        store.add_item("fresh", now=NOW)
        assert store.purge_old(7, now=NOW) == 0

    def test_purged_on_open(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text(json.dumps([
            {"id": 2, "content": "recent", "timestamp": 9_999_999_999, "source_app": None},
            {"id": 1, "content": "ancient", "timestamp": 1, "source_app": None},
        ]))
        store = HistoryStore(path)
        assert [item.content for item in store.get_items()] == ["recent"]

    def test_retention_disabled(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text(json.dumps([{"id": 1, "content": "ancient", "timestamp": 1}]))
        store = HistoryStore(path, retention_days=None)
        assert store.count() == 1


class TestPersistence:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "history.json"
        with HistoryStore(path) as store:
            store.add_item("kept", source_app="Notes")
        reopened = HistoryStore(path)
        assert reopened.get_items()[0].content == "kept"
        assert reopened.get_items()[0].source_app == "Notes"

    def test_record_shape(self, tmp_path):
        path = tmp_path / "history.json"
        HistoryStore(path).add_item("shape", source_app="Mail", now=NOW)
        records = json.loads(path.read_text())
        assert records == [{"id": NOW * 1000, "content": "shape", "timestamp": NOW, "source_app": "Mail"}]

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "history.json"
        HistoryStore(path).add_item("x")
        assert path.exists()

    def test_missing_file(self, tmp_path):
        assert HistoryStore(tmp_path / "absent.json").count() == 0

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text("{not json")
        assert HistoryStore(path).count() == 0

    def test_non_list_file(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text('{"id": 1}')
        assert HistoryStore(path).count() == 0

    def test_malformed_records_skipped(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text(json.dumps([
            {"id": 1, "content": "good", "timestamp": 9_999_999_999},
            {"content": "no id"},
            "not a record",
        ]))
        store = HistoryStore(path)
        assert [item.content for item in store.get_items()] == ["good"]

    def test_non_string_content_skipped(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text(json.dumps([
            {"id": 1, "content": None, "timestamp": 2_000_000_000, "source_app": None},
            {"id": 2, "content": 42, "timestamp": 2_000_000_000},
            {"id": 3, "content": "kept", "timestamp": 2_000_000_000},
        ]))
        store = HistoryStore(path)
        assert [item.content for item in store.get_items()] == ["kept"]
