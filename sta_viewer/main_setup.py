"""
Process-wide logging and error handling for the viewer.

Each session writes logs/log/session_<ts>.log (INFO and up) and
logs/error/error_<ts>.log (ERROR and up) next to a rich console.
STA_VIEWER_LOG_DIR moves the log root, STA_VIEWER_LOG_LEVEL sets the
console level (the files keep their fixed levels).
"""

import sys
import os
import logging
from datetime import datetime

from rich.logging import RichHandler
from rich.traceback import install

from sta_viewer.core.version import VERSION_STRING

LOG_FORMAT = '%(asctime)s | %(levelname)s | [%(name)s] %(message)s'
LOG_DIR_ENV = "STA_VIEWER_LOG_DIR"
LOG_LEVEL_ENV = "STA_VIEWER_LOG_LEVEL"

# uic reports every widget and property it builds
QUIET_LOGGERS = ("PyQt6.uic",)


def _log_paths(log_root: str = None) -> dict:
    root = os.path.abspath(log_root or os.environ.get(LOG_DIR_ENV, "logs"))
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    paths = {
        "session": os.path.join(root, "log", f"session_{timestamp}.log"),
        "error": os.path.join(root, "error", f"error_{timestamp}.log"),
    }
    for path in paths.values():
        os.makedirs(os.path.dirname(path), exist_ok=True)
    return paths


def _console_level() -> int:
    name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _file_handler(path: str, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.FileHandler(path, encoding='utf-8')
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def _log_uncaught(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logging.error(f"Uncaught exception in {VERSION_STRING}", exc_info=(exc_type, exc_value, exc_traceback))


def setup_error_handling(log_root: str = None) -> dict:
    """Install rich tracebacks, the session/error log files and the console handler.

    Returns the paths of the session and error log files.
    """
    root = logging.getLogger()
    for h in root.handlers[:]:
        root.removeHandler(h)

    paths = _log_paths(log_root)
    console_level = _console_level()
    install(show_locals=True, width=120)

    root.setLevel(min(logging.INFO, console_level))
    formatter = logging.Formatter(LOG_FORMAT)
    root.addHandler(_file_handler(paths["session"], logging.INFO, formatter))
    root.addHandler(_file_handler(paths["error"], logging.ERROR, formatter))

    console = RichHandler(rich_tracebacks=True, markup=False)
    console.setFormatter(logging.Formatter('%(message)s'))
    console.setLevel(console_level)
    root.addHandler(console)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    sys.excepthook = _log_uncaught
    logging.info(f"--- {VERSION_STRING} session started (logs in {os.path.dirname(os.path.dirname(paths['session']))}) ---")
    return paths
