import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("CEEVEE_DATA_DIR", Path.home() / ".local" / "share" / "ceevee"))
HISTORY_PATH = DATA_DIR / "clipboard-history.json"
LOG_PATH = DATA_DIR / "ceevee.log"

POLL_INTERVAL = 0.25  # seconds between clipboard checks
MAX_ITEMS = 100  # oldest evicted beyond this
MAX_CONTENT_LENGTH = 10_000  # characters
RETENTION_DAYS = 7  # purged at startup
DISPLAY_LENGTH = 100  # characters shown per item before the ellipsis
ELLIPSIS = "..."
QUICK_PASTE_SLOTS = 9  # Cmd+1..Cmd+9
ERROR_DISPLAY_SECONDS = 3


def _parse_int_env(name: str, default: int, minimum: int, maximum: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, min(maximum, value))


def _parse_menu_display_count() -> int:
    return _parse_int_env("CEEVEE_MENU_DISPLAY_COUNT", 10, 5, 50)


def _parse_search_debounce() -> float:
    return _parse_int_env("CEEVEE_SEARCH_DEBOUNCE_MS", 150, 0, 1000) / 1000


MENU_DISPLAY_COUNT = _parse_menu_display_count()
SEARCH_DEBOUNCE = _parse_search_debounce()  # seconds
