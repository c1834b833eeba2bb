import curses
import logging
import os
import sys

from config_paths import LOG_PATH, load_config, setup_logging
from orchestrator import Orchestrator
from viewer_session import ViewerSession
from _version import __version__

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")

USAGE = "tabscope - terminal CSV viewer\n\nUsage:\n  tabscope <path.csv>\n  tabscope -v\n  tabscope -h\n"

logger = logging.getLogger(__name__)


def _validate_path(path: str) -> str | None:
    """Return an error message when ``path`` cannot be viewed, else None."""
    if not path.lower().endswith(".csv"):
        return f"Not a CSV file: {path}"
    if not os.path.exists(path):
        return f"File not found: {path}"
    if os.path.isdir(path):
        return f"Is a directory: {path}"
    return None


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)

    if "-v" in args or "-V" in args:
        print(__version__)
        return 0

    if "-h" in args or "--help" in args:
        print(USAGE)
        return 0

    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 1

    path = os.path.expanduser(args[0])
    problem = _validate_path(path)
    if problem:
        print(problem, file=sys.stderr)
        return 1

    config = load_config()
    setup_logging(config.get("LOG_LEVEL", "WARNING"), LOG_PATH)

    session = ViewerSession(config)
    try:
        session.open_path(path)
    except OSError as exc:
        print(f"Load failed: {exc}", file=sys.stderr)
        return 1

    def curses_main(stdscr):
        Orchestrator(stdscr, session, config).run()

    curses.wrapper(curses_main)
    return 0


if __name__ == "__main__":
    sys.exit(main())
