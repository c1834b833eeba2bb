import json
import logging
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "tabscope")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "tabscope.log")

# default settings
PAGE_SIZE_DEFAULT = 1000
MAX_COL_WIDTH_DEFAULT = 40
EXPORT_FORMAT_DEFAULT = "csv"
EXPORT_DIR_DEFAULT = None
LOG_LEVEL_DEFAULT = "WARNING"

_EXPORT_FORMATS = {"csv", "json", "excel"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _positive_int(value, minimum=1):
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value >= minimum else None


def load_config():
    cfg = {
        "PAGE_SIZE": PAGE_SIZE_DEFAULT,
        "MAX_COL_WIDTH": MAX_COL_WIDTH_DEFAULT,
        "EXPORT_FORMAT": EXPORT_FORMAT_DEFAULT,
        "EXPORT_DIR": EXPORT_DIR_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        logging.getLogger(__name__).warning("Ignoring unreadable config %s", CONFIG_JSON)
        return cfg
    if not isinstance(data, dict):
        return cfg

    viewer = data.get("viewer")
    if isinstance(viewer, dict):
        page_size = _positive_int(viewer.get("page_size"))
        if page_size is not None:
            cfg["PAGE_SIZE"] = page_size
        max_col_width = _positive_int(viewer.get("max_col_width"), minimum=4)
        if max_col_width is not None:
            cfg["MAX_COL_WIDTH"] = max_col_width

    export = data.get("export")
    if isinstance(export, dict):
        fmt = export.get("default_format")
        if isinstance(fmt, str) and fmt.lower() in _EXPORT_FORMATS:
            cfg["EXPORT_FORMAT"] = fmt.lower()
        directory = export.get("directory")
        if isinstance(directory, str) and directory.strip():
            cfg["EXPORT_DIR"] = directory

    level = data.get("log_level")
    if isinstance(level, str) and level.upper() in _LOG_LEVELS:
        cfg["LOG_LEVEL"] = level.upper()

    return cfg


def setup_logging(level=LOG_LEVEL_DEFAULT, path=None):
    """Send log records to a file; the terminal belongs to curses."""
    path = path or LOG_PATH
    os.makedirs(os.path.dirname(path), exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, logging.FileHandler) and existing.baseFilename == handler.baseFilename:
            root.removeHandler(existing)
            existing.close()
    root.addHandler(handler)
    root.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    return handler
