# daily_rotate_file.py
import os
import errno
import threading
from contextlib import suppress
from datetime import datetime

from path_utils import ensure_directory, resolve_path, daily_path_format, open_append


class LogFileError(Exception):
    """Base class for errors raised by log file writers."""


class FileNotOpenedError(LogFileError):
    """Raised when writing to a log file that was never opened."""

    def __init__(self, message="File not opened"):
        super().__init__(message)


class WriterClosedError(FileNotOpenedError):
    """Raised when writing to a log file after close()."""

    def __init__(self, path_format=None):
        super().__init__(f"File closed: {path_format}" if path_format else "File closed")
        self.path_format = path_format


def _to_bytes(data):
    if isinstance(data, str):
        return data.encode('utf-8')
    return bytes(data)


class DailyRotateFile:
    """
    A log file that gets rotated daily.

    path_format is a strftime pattern for the full path of the file, e.g.
    'logs/%Y/%m/%Y-%m-%d.txt'. The file for the current day is created if it
    doesn't exist and appended to if it does. On every write the current day
    is compared with the day the file was opened for; when it changed, the
    old file is closed and the file for today is opened before writing.

    All state (day, path, handle) is guarded by one lock, held for the whole
    of a write, so concurrent writes never interleave.
    """

    def __init__(self, path_format, clock=datetime.now):
        self._path_format = str(path_format)
        self._clock = clock
        self._lock = threading.Lock()
        self._closed = False

        # info about currently opened file
        self._day = 0
        self._path = None
        self._file = None

        self._open()

    @classmethod
    def for_dir(cls, directory, suffix, clock=datetime.now):
        """Opens daily files named YYYY-MM-DD<suffix> inside directory."""
        return cls(daily_path_format(directory, suffix), clock=clock)

    def __repr__(self):
        return f"DailyRotateFile({self._path_format!r}, path={str(self._path)!r})"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def path_format(self):
        return self._path_format

    @property
    def path(self):
        """Path of the currently opened file (None once closed)."""
        return self._path

    @property
    def day(self):
        """Date ordinal the open file belongs to, 0 when nothing is open."""
        return self._day

    @property
    def closed(self):
        return self._closed

    def _open(self, now=None):
        if now is None:
            now = self._clock()
        path = resolve_path(self._path_format, now)

        # we can't assume that the dir for the file already exists
        ensure_directory(path.parent)

        f = open_append(path)
        try:
            os.fstat(f.fileno())
        except OSError:
            f.close()
            raise

        self._file = f
        self._path = path
        self._day = now.date().toordinal()

    def _close(self):
        f = self._file
        self._file = None
        self._day = 0
        self._path = None
        if f is not None:
            f.close()

    def _reopen_if_needed(self):
        """Rotates to a new file when the day changed."""
        now = self._clock()
        if now.date().toordinal() == self._day:
            return
        # a failed close still releases the handle
        with suppress(OSError):
            self._close()
        self._open(now)

    def write(self, data):
        """Writes bytes (or text, encoded as UTF-8) and returns the byte count."""
        data = _to_bytes(data)
        with self._lock:
            if self._closed:
                raise WriterClosedError(self._path_format)
            self._reopen_if_needed()

            view = memoryview(data)
            written = 0
            while written < len(data):
                n = self._file.write(view[written:])
                if not n:
                    raise OSError(errno.EIO, "short write", str(self._path))
                written += n
            return written

    def write_string(self, s):
        return self.write(s.encode('utf-8'))

    def printf(self, fmt, *args):
        """Formats with % and writes to the file."""
        return self.write_string(fmt % args if args else fmt)

    def close(self):
        """Closes the file. Safe to call more than once."""
        with self._lock:
            self._closed = True
            self._close()


class UnopenedFile:
    """Stand-in for a log file that was never opened: every write fails."""

    path = None
    path_format = None
    day = 0
    closed = True

    def __repr__(self):
        return "UnopenedFile()"

    def write(self, data):
        raise FileNotOpenedError()

    def write_string(self, s):
        raise FileNotOpenedError()

    def printf(self, fmt, *args):
        raise FileNotOpenedError()

    def close(self):
        pass


UNOPENED = UnopenedFile()
