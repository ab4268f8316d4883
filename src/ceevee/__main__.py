import argparse
import logging
import plistlib
import shutil
import subprocess
import sys
from pathlib import Path

from ceevee.config import HISTORY_PATH, LOG_PATH
from ceevee.utils import ensure_dirs

PLIST_LABEL = "com.ceevee.app"
PLIST_NAME = f"{PLIST_LABEL}.plist"
LAUNCHAGENT_DIR = Path.home() / "Library" / "LaunchAgents"
PLIST_PATH = LAUNCHAGENT_DIR / PLIST_NAME

ANSI_BOLD = "\033[1m"
ANSI_RESET = "\033[0m"


def get_ceevee_command() -> list[str]:
    """Command line launchd should run, preferring the installed script."""
    ceevee_path = shutil.which("ceevee")
    if ceevee_path:
        return [ceevee_path]
    return [sys.executable, "-m", "ceevee"]


def create_plist(command: list[str]) -> str:
    """Generate the LaunchAgent plist content."""
    return plistlib.dumps({
        "Label": PLIST_LABEL,
        "ProgramArguments": [*command, "run"],
        "RunAtLoad": True,
        "KeepAlive": True,
        "StandardOutPath": str(LOG_PATH),
        "StandardErrorPath": str(LOG_PATH),
    }).decode("utf-8")


def _launchctl(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(["launchctl", *args], capture_output=True, text=True)


def install_launchagent() -> int:
    """Install and start the LaunchAgent."""
    ensure_dirs()
    command = get_ceevee_command()
    print(f"Installing LaunchAgent for: {' '.join(command)}")

    LAUNCHAGENT_DIR.mkdir(parents=True, exist_ok=True)
    if PLIST_PATH.exists():
        _launchctl("unload", str(PLIST_PATH))

    PLIST_PATH.write_text(create_plist(command))
    print(f"Created: {PLIST_PATH}")

    result = _launchctl("load", str(PLIST_PATH))
    if result.returncode != 0:
        print(f"Failed to load LaunchAgent: {result.stderr}")
        return 1

    print("CeeVee is now running in the background and will start on login.")
    return 0


def uninstall_launchagent() -> int:
    """Stop and remove the LaunchAgent."""
    if not PLIST_PATH.exists():
        print("LaunchAgent not installed.")
        return 0

    _launchctl("unload", str(PLIST_PATH))
    PLIST_PATH.unlink()
    print("LaunchAgent removed. CeeVee will no longer start on login.")
    return 0


def check_status() -> int:
    """Report whether launchd has CeeVee loaded."""
    running = _launchctl("list", PLIST_LABEL).returncode == 0
    print("CeeVee is running." if running else "CeeVee is not running.")

    if PLIST_PATH.exists():
        state = "" if running else " (installed but not loaded)"
        print(f"LaunchAgent: {PLIST_PATH}{state}")
    elif not running:
        print("LaunchAgent not installed. Run: ceevee install")
    return 0 if running else 1


def list_history(search: str | None = None, limit: int = 20, color: bool | None = None) -> int:
    """Print stored history through the same pipeline the menu uses."""
    from ceevee.render import render
    from ceevee.state import ListState
    from ceevee.storage import HistoryStore

    if color is None:
        color = sys.stdout.isatty()
    open_tag, close_tag = (ANSI_BOLD, ANSI_RESET) if color else ("", "")

    store = HistoryStore(HISTORY_PATH, retention_days=None)
    state = ListState().load(store.get_items()).set_query(search)
    view = render(state, open_tag=open_tag, close_tag=close_tag)

    if not view.rows:
        print(view.empty_title)
        return 0 if not state.is_searching else 1

    for row in view.rows[:limit]:
        slot = row.shortcut or "  "
        print(f"{slot:>3}  {row.content_type.value:<8}  {row.markup}  ({row.relative_time})")
    if len(view.rows) > limit:
        print(f"... {len(view.rows) - limit} more")
    return 0


def run_app():
    """Run the CeeVee application."""
    ensure_dirs()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_PATH),
            logging.StreamHandler(sys.stderr),
        ],
    )

    from ceevee.app import CeeVeeApp

    app = CeeVeeApp()
    app.run()


def main():
    parser = argparse.ArgumentParser(
        description="CeeVee - Clipboard history manager for macOS",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  (none), run Run CeeVee in foreground
  install     Install as LaunchAgent (runs on login)
  uninstall   Remove LaunchAgent
  status      Check if CeeVee is running
  list        Print clipboard history

Examples:
  ceevee install            # Install and start as background service
  ceevee list --search git  # Show history items matching "git"
  ceevee uninstall          # Stop and remove from login items
""",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["run", "install", "uninstall", "status", "list"],
        help="Command to run",
    )
    parser.add_argument("--search", "-s", default="", help="Filter history (list only)")
    parser.add_argument("--limit", "-n", type=int, default=20, help="Maximum rows to print (list only)")

    args = parser.parse_args()

    if args.command == "install":
        sys.exit(install_launchagent())
    elif args.command == "uninstall":
        sys.exit(uninstall_launchagent())
    elif args.command == "status":
        sys.exit(check_status())
    elif args.command == "list":
        sys.exit(list_history(args.search, args.limit))
    else:
        run_app()


if __name__ == "__main__":
    main()
