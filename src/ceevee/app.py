import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import rumps
from AppKit import NSEvent, NSEventModifierFlagOption

from ceevee import __version__
from ceevee.backend import LocalBackend
from ceevee.config import ERROR_DISPLAY_SECONDS, HISTORY_PATH, MENU_DISPLAY_COUNT, POLL_INTERVAL
from ceevee.controller import InteractionController
from ceevee.monitor import ClipboardMonitor
from ceevee.render import ItemRow, ListView, render
from ceevee.state import ListState
from ceevee.storage import HistoryStore
from ceevee.utils import ensure_dirs, simulate_paste

logger = logging.getLogger(__name__)

ENTRY_KEY_PREFIX = "ceevee_entry_"
APP_TITLE = "📋"
ERROR_TITLE = "⚠️"
SCHEDULER_TICK = 0.05  # seconds


@dataclass
class MenuItemSpec:
    """Specification for a menu item, separating logic from rumps rendering."""

    title: str
    callback: Callable | None = None
    key: str | None = None
    checked: bool = False
    entry_index: int | None = None


class _TimerTask:
    def __init__(self, timer: rumps.Timer):
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()


class RumpsScheduler:
    """Schedules callbacks on the main run loop using rumps timers."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> _TimerTask:
        deadline = time.monotonic() + delay

        def _tick(timer) -> None:
            if time.monotonic() < deadline:
                return
            timer.stop()
            callback()

        timer = rumps.Timer(_tick, SCHEDULER_TICK)
        timer.start()
        return _TimerTask(timer)


class CeeVeeApp(rumps.App):
    def __init__(self):
        super().__init__("CeeVee", title=APP_TITLE, quit_button=None)
        self._init_app()

    def _init_app(self) -> None:
        """Initialize app components. Separated for testability."""
        ensure_dirs()
        self._store = HistoryStore(HISTORY_PATH)
        self._backend = LocalBackend(
            self._store,
            write_clipboard=self._write_clipboard,
            simulate_paste=simulate_paste,
        )
        self._monitor = ClipboardMonitor(self._store, on_change=self._backend.notify_changed)
        self._monitor.capture_current()
        self._entry_indexes: dict[str, int] = {}
        self._scheduler = RumpsScheduler()
        self._error_task: _TimerTask | None = None
        self._controller = InteractionController(
            self._backend,
            scheduler=self._scheduler,
            notify=self._notify,
            on_render=self._on_render,
        )
        self._controller.start()

    def _on_render(self, state: ListState) -> None:
        self._build_menu(render(state))

    def _build_menu(self, view: ListView) -> None:
        """Build the menu from computed specifications."""
        self.menu.clear()
        self._entry_indexes.clear()
        specs = self._compute_menu_specs(view)
        self.menu = [self._render_single_spec(spec) for spec in specs]

    def _compute_menu_specs(self, view: ListView) -> list[MenuItemSpec | None]:
        """Compute menu item specifications. Pure logic, no rumps dependency."""
        state = self._controller.state
        specs: list[MenuItemSpec | None] = [
            MenuItemSpec(f"CeeVee v{__version__} - Clipboard History"),
            None,  # separator
            MenuItemSpec("Search...", callback=self._on_search, key="f"),
        ]

        if state.is_searching:
            specs.append(MenuItemSpec(f'Search: "{state.search_query}" ({len(state.filtered_items)} results)'))
            specs.append(MenuItemSpec("Show All", callback=self._on_show_all))
        specs.append(None)

        if view.is_loading:
            specs.append(MenuItemSpec("Loading..."))
        elif not view.rows:
            specs.append(MenuItemSpec(f"({view.empty_title})"))
            specs.append(MenuItemSpec(view.empty_subtitle))
        else:
            for row in view.rows[:MENU_DISPLAY_COUNT]:
                specs.append(self._compute_entry_spec(row))

        specs.extend([
            None,  # separator
            MenuItemSpec("Clear History", callback=self._on_clear),
            None,  # separator
            MenuItemSpec("Quit CeeVee", callback=self._on_quit),
        ])

        return specs

    def _compute_entry_spec(self, row: ItemRow) -> MenuItemSpec:
        key = f"{ENTRY_KEY_PREFIX}{row.index}"
        self._entry_indexes[key] = row.index
        source = f"  ·  {row.source_app}" if row.source_app else ""
        return MenuItemSpec(
            title=f"[{row.content_type.value}] {row.display_text}  ·  {row.relative_time}{source}",
            callback=self._on_entry_click,
            key=str(row.index + 1) if row.shortcut else None,
            checked=row.selected,
            entry_index=row.index,
        )

    def _render_single_spec(self, spec: MenuItemSpec | None) -> rumps.MenuItem | None:
        """Render a single menu item specification."""
        if spec is None:
            return None

        kwargs = {"callback": spec.callback}
        if spec.key:
            kwargs["key"] = spec.key
        item = rumps.MenuItem(spec.title, **kwargs)
        if spec.checked:
            item.state = 1

        if spec.entry_index is not None:
            item._id = f"{ENTRY_KEY_PREFIX}{spec.entry_index}"

        return item

    def _write_clipboard(self, text: str) -> None:
        self._monitor.write_text(text)

    def _notify(self, message: str) -> None:
        rumps.notification("CeeVee", "", message, sound=False)
        # Flag the menu-bar icon until the error times out
        if self._error_task is not None:
            self._error_task.cancel()
        self.title = ERROR_TITLE
        self._error_task = self._scheduler.schedule(ERROR_DISPLAY_SECONDS, self._clear_error)

    def _clear_error(self) -> None:
        self._error_task = None
        self.title = APP_TITLE

    @rumps.timer(POLL_INTERVAL)
    def _poll_clipboard(self, _sender) -> None:
        self._monitor.check_clipboard()

    def _on_entry_click(self, sender) -> None:
        index = self._entry_indexes.get(getattr(sender, "_id", ""))
        if index is None:
            return

        # Option-click deletes instead of pasting
        if NSEvent.modifierFlags() & NSEventModifierFlagOption:
            self._controller.click(index)
            self._controller.delete_selected()
            return

        self._controller.double_click(index)

    def _on_search(self, _sender) -> None:
        response = rumps.Window(
            message="Search clipboard history:",
            title="CeeVee Search",
            default_text=self._controller.search_text,
            ok="Search",
            cancel="Cancel",
            dimensions=(300, 24),
        ).run()

        if response.clicked:
            self._controller.on_search_input(response.text)
            # The dialog is modal, so there are no further keystrokes to wait for
            self._controller.flush_search()

    def _on_show_all(self, _sender) -> None:
        self._controller.clear_search()

    def _on_clear(self, _sender) -> None:
        if rumps.alert("CeeVee", "Clear all clipboard history?", ok="Clear", cancel="Cancel"):
            self._store.clear_all()
            logger.info("Cleared clipboard history")
            self._controller.refresh()

    def _on_quit(self, _sender) -> None:
        self._store.close()
        rumps.quit_application()
