from ceevee.models import ContentType
from ceevee.render import (
    EMPTY_SUBTITLE,
    EMPTY_TITLE,
    NO_RESULTS_SUBTITLE,
    NO_RESULTS_TITLE,
    render,
    shortcut_label,
)
from ceevee.state import ListState

NOW = 1_700_000_000


class TestShortcutLabel:
    def test_first_slot(self):
        assert shortcut_label(0) == "⌘1"

    def test_last_slot(self):
        assert shortcut_label(8) == "⌘9"

    def test_beyond_slots(self):
        assert shortcut_label(9) is None


class TestRender:
    def test_loading(self):
        view = render(ListState().begin_loading())
        assert view.is_loading
        assert view.rows == []

    def test_empty_history(self):
        view = render(ListState())
        assert view.empty_title == EMPTY_TITLE
        assert view.empty_subtitle == EMPTY_SUBTITLE

    def test_no_results(self, make_item):
        view = render(ListState().load([make_item("abc")]).set_query("zzz"))
        assert view.empty_title == NO_RESULTS_TITLE
        assert view.empty_subtitle == NO_RESULTS_SUBTITLE

    def test_row_fields(self, make_item):
        item = make_item("https://example.com/docs", source_app="Safari", timestamp=NOW - 120)
        view = render(ListState().load([item]).select(0), now=NOW)
        row = view.rows[0]
        assert row.item_id == item.id
        assert row.content_type == ContentType.URL
        assert row.display_text == "example.com/docs"
        assert row.markup == "example.com/docs"
        assert row.source_app == "Safari"
        assert row.relative_time == "2m ago"
        assert row.size_info == "24 chars"
        assert row.shortcut == "⌘1"
        assert row.selected

    def test_only_selected_row_flagged(self, make_item):
        items = [make_item("one"), make_item("two"), make_item("three")]
        view = render(ListState().load(items).select(1), now=NOW)
        assert [row.selected for row in view.rows] == [False, True, False]

    def test_search_highlights_display_and_source(self, make_item):
        item = make_item("hello abc", source_app="abc editor", timestamp=NOW)
        view = render(ListState().load([item]).set_query("ABC"), now=NOW)
        row = view.rows[0]
        assert row.markup == "hello <mark>abc</mark>"
        assert row.source_markup == "<mark>abc</mark> editor"

    def test_markup_escaped_without_search(self, make_item):
        view = render(ListState().load([make_item("a < b", timestamp=NOW)]), now=NOW)
        assert view.rows[0].markup == "a &lt; b"

    def test_custom_tags(self, make_item):
        view = render(
            ListState().load([make_item("hello abc", timestamp=NOW)]).set_query("abc"),
            now=NOW,
            open_tag="[",
            close_tag="]",
        )
        assert view.rows[0].markup == "hello [abc]"

    def test_shortcuts_stop_after_nine(self, make_item):
        items = [make_item(f"entry {n}") for n in range(12)]
        view = render(ListState().load(items), now=NOW)
        assert [row.shortcut for row in view.rows[8:11]] == ["⌘9", None, None]

    def test_render_is_pure(self, make_item):
        state = ListState().load([make_item("abc", timestamp=NOW)])
        assert render(state, now=NOW) == render(state, now=NOW)

    def test_non_string_content_degrades_to_text(self, make_item):
        view = render(ListState().load([make_item(None, timestamp=NOW)]), now=NOW)
        row = view.rows[0]
        assert row.content_type == ContentType.TEXT
        assert row.display_text == ""
        assert row.size_info == "0 chars"
