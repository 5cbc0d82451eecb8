# logging_utils.py
import logging
import sys

from path_utils import daily_path_format
from daily_rotate_file import DailyRotateFile

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class DailyRotateHandler(logging.Handler):
    """
    logging.Handler writing records to a DailyRotateFile, so diagnostics
    end up in one file per day (YYYY-MM-DD<suffix>) next to the other logs.
    """
    def __init__(self, directory, suffix='.diag.log', level=logging.NOTSET):
        # open before the handler registers itself with logging
        self.log_file = DailyRotateFile(daily_path_format(directory, suffix))
        super().__init__(level)

    def emit(self, record):
        try:
            self.log_file.write_string(self.format(record) + '\n')
        except Exception:
            self.handleError(record)

    def close(self):
        try:
            self.log_file.close()
        finally:
            super().close()


def setup_logging(level='INFO', log_dir=None):
    """
    Configures the root logger: stderr always, plus a daily diagnostic
    file when log_dir is given. Safe to call again to reconfigure.
    """
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_dir:
        handlers.insert(0, DailyRotateHandler(log_dir))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )
    return handlers


def get_logger(name):
    """Get a logger with the specified name"""
    return logging.getLogger(name)


def set_log_level(level):
    """Set global log level"""
    logging.getLogger().setLevel(level)
