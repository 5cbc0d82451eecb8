# verbosity.py
import threading
from contextlib import contextmanager
from urllib.parse import urlsplit, parse_qs


class VerbosityCounter:
    """
    Shared verbosity level.

    Verbose logging is meant to be turned on per request: the level is
    increased when a request starts and decreased when it ends. There is no
    per-thread context, so while any scope is active every thread logs
    verbosely. Overlapping scopes add up.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._level = 0

    @property
    def value(self):
        return self._level

    def inc(self):
        with self._lock:
            self._level += 1
            return self._level

    def dec(self):
        with self._lock:
            self._level -= 1
            return self._level

    def is_verbose(self):
        """True if we're doing verbose logging."""
        return self._level > 0


@contextmanager
def verbose_scope(counter):
    """Turns on verbose logging for the duration of the with block."""
    counter.inc()
    try:
        yield counter
    finally:
        counter.dec()


def start_verbose_for_url(counter, url):
    """
    Starts verbose logging if the url has a non-empty vl= argument
    ("verbose logging"). Returns True when it did; the caller then owes a
    stop_verbose_for_url() call:

        if start_verbose_for_url(counter, url):
            try:
                ...
            finally:
                stop_verbose_for_url(counter)
    """
    query = parse_qs(urlsplit(url).query, keep_blank_values=True)
    # only the first vl= counts
    if query.get('vl', [''])[0]:
        counter.inc()
        return True
    return False


def stop_verbose_for_url(counter):
    """Name parity with start_verbose_for_url()."""
    counter.dec()
