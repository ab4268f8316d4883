import logging
import subprocess
import sys
import time
from datetime import datetime

from ceevee.config import DATA_DIR, DISPLAY_LENGTH, ELLIPSIS

logger = logging.getLogger(__name__)

PASTE_SCRIPT = 'tell application "System Events" to keystroke "v" using command down'


def truncate_text(text: str, max_len: int = DISPLAY_LENGTH) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + ELLIPSIS


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def format_relative_time(timestamp: int, now: float | None = None) -> str:
    """Format an epoch-seconds timestamp as a short age like "5m ago"."""
    current = time.time() if now is None else now
    seconds = int(current - timestamp)

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    if seconds < 604800:
        return f"{seconds // 86400}d ago"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d")


def content_size_info(content: str | None) -> str:
    if not isinstance(content, str):
        content = ""
    lines = content.count("\n") + 1
    if lines > 1:
        return f"{lines} lines"
    words = len(content.split())
    if words > 20:
        return f"{words} words"
    return f"{len(content)} chars"


def simulate_paste() -> bool:
    """Send the platform paste keystroke to the frontmost application.

    Returns:
        True if the keystroke was delivered, False otherwise
    """
    if sys.platform == "darwin":
        command = ["osascript", "-e", PASTE_SCRIPT]
    else:
        command = ["xdotool", "key", "ctrl+v"]

    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except OSError:
        logger.exception("Error simulating paste")
        return False

    if result.returncode != 0:
        logger.error("Paste keystroke failed: %s", result.stderr.strip())
        return False
    return True
