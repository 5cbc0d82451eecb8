# path_utils.py
import os
from pathlib import Path

# Default directory for log files when the config does not name one
LOG_DIR = Path('logs')

# File name part of a daily log: year-month-day
DATE_FORMAT = '%Y-%m-%d'

DIR_MODE = 0o755
FILE_MODE = 0o644


def ensure_directory(path):
    """Ensures the directory exists."""
    Path(path).mkdir(mode=DIR_MODE, parents=True, exist_ok=True)


def resolve_path(path_format, when):
    """Formats a strftime path template against the given datetime."""
    return Path(when.strftime(str(path_format)))


def escape_format(text):
    """Escapes literal text so strftime leaves it untouched."""
    return str(text).replace('%', '%%')


def daily_path_format(directory, suffix):
    """
    Builds the path template for a directory of daily files named
    YYYY-MM-DD<suffix>.
    """
    return os.path.join(escape_format(directory), DATE_FORMAT + escape_format(suffix))


def open_append(path):
    """
    Opens path create+append+write-only with FILE_MODE, unbuffered,
    so each write() goes straight to the descriptor.
    """
    def opener(p, flags):
        return os.open(p, os.O_CREAT | os.O_APPEND | os.O_WRONLY, FILE_MODE)

    return open(path, 'ab', buffering=0, opener=opener)
