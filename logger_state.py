# logger_state.py
import os
import sys
import threading
from enum import IntEnum

from logging_utils import get_logger
from caller_utils import caller_name
from verbosity import VerbosityCounter, verbose_scope
from daily_rotate_file import DailyRotateFile, LogFileError, UNOPENED

_state_logger = get_logger('logger_state')


class LogLevel(IntEnum):
    VERBOSE = 10
    INFO = 20
    ERROR = 40
    FATAL = 50


class LoggerState:
    """
    Process-wide log destinations: an info stream, an optional error stream,
    an echo-to-stdout flag and the verbosity counter.

    Created explicitly, opened with open()/open_error(), torn down with
    close(). Streams that are not opened are UNOPENED, so logging before
    open() or after close() is dropped rather than raised.
    """

    def __init__(self, echo_stdout=False, verbosity=None, stdout=None, exit_func=os._exit):
        self.info_file = UNOPENED
        self.error_file = UNOPENED
        self.echo_stdout = echo_stdout
        self.verbosity = verbosity if verbosity is not None else VerbosityCounter()
        self.stdout = stdout
        self.exit_func = exit_func
        # lines that couldn't be written to a log file or echoed to stdout
        self.dropped = 0
        self._dropped_lock = threading.Lock()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # --- opening / closing ---
    @staticmethod
    def _check_stream(which):
        if which not in ('info', 'error'):
            raise ValueError(f"Unknown log stream '{which}', expected 'info' or 'error'.")

    def _set_stream(self, which, log_file):
        if which == 'info':
            old, self.info_file = self.info_file, log_file
        else:
            old, self.error_file = self.error_file, log_file
        self._close_stream(old)

    def open(self, directory, suffix, which='info'):
        """Opens daily files YYYY-MM-DD<suffix> in directory for the given stream."""
        self._check_stream(which)
        log_file = DailyRotateFile.for_dir(directory, suffix)
        self._set_stream(which, log_file)
        _state_logger.info(f"Opened {which} log: {log_file.path}")
        return log_file

    def open_info(self, directory, suffix):
        return self.open(directory, suffix, 'info')

    def open_error(self, directory, suffix):
        return self.open(directory, suffix, 'error')

    def open_path_format(self, path_format, which='info'):
        """Like open() but with a full strftime path template."""
        self._check_stream(which)
        log_file = DailyRotateFile(path_format)
        self._set_stream(which, log_file)
        _state_logger.info(f"Opened {which} log: {log_file.path}")
        return log_file

    def _close_stream(self, log_file):
        try:
            log_file.close()
        except OSError as e:
            _state_logger.warning(f"Failed to close log file {log_file!r}: {e}")

    def close(self):
        """Closes all log files."""
        self._close_stream(self.info_file)
        self.info_file = UNOPENED
        self._close_stream(self.error_file)
        self.error_file = UNOPENED

    # --- verbosity ---
    def inc_verbosity(self):
        return self.verbosity.inc()

    def dec_verbosity(self):
        return self.verbosity.dec()

    def is_verbose(self):
        return self.verbosity.is_verbose()

    def verbose_scope(self):
        return verbose_scope(self.verbosity)

    # --- output ---
    def _out(self):
        return self.stdout if self.stdout is not None else sys.stdout

    def log(self, level, message, caller=None):
        """
        Writes one formatted line. Verbose lines are dropped unless verbose
        logging is on. Errors go to the error log when it is open, otherwise
        to the info log. Returns True if the line reached a log file; a
        failing write is counted in `dropped`, never raised.
        """
        level = LogLevel(level)
        if level == LogLevel.VERBOSE and not self.is_verbose():
            return False
        if caller:
            message = f"{caller}: {message}"

        if self.echo_stdout:
            try:
                self._out().write(message)
            except (OSError, ValueError) as e:
                self._drop(level, f"stdout: {e}")

        target = self.info_file
        if level >= LogLevel.ERROR and not self.error_file.closed:
            target = self.error_file

        try:
            target.write_string(message)
        except (LogFileError, OSError) as e:
            self._drop(level, e)
            ok = False
        else:
            ok = True

        if level == LogLevel.FATAL:
            self._die(message)
        return ok

    def _drop(self, level, reason):
        with self._dropped_lock:
            self.dropped += 1
        _state_logger.debug(f"Dropped {level.name} log line: {reason}")

    @staticmethod
    def _write_flush(stream, message):
        if stream is None:
            return
        try:
            stream.write(message)
            stream.flush()
        except (OSError, ValueError) as e:
            _state_logger.debug(f"Fatal line not written to {stream!r}: {e}")

    def _die(self, message):
        try:
            self._write_flush(self._out(), message)
            self._write_flush(sys.stderr, message)
        finally:
            self.exit_func(1)

    # --- convenience wrappers, prefixed with the name of the caller ---
    def fatalf(self, fmt, *args):
        """Logs like errorf() and then terminates the process."""
        return self.log(LogLevel.FATAL, fmt % args if args else fmt, caller_name(1))

    def errorf(self, fmt, *args):
        """Logs an error to the error log (if not available, to the info log)."""
        return self.log(LogLevel.ERROR, fmt % args if args else fmt, caller_name(1))

    def error(self, err):
        """Logs an exception's message as an error line."""
        return self.log(LogLevel.ERROR, f"{err}\n", caller_name(1))

    def infof(self, fmt, *args):
        """Logs non-error things."""
        return self.log(LogLevel.INFO, fmt % args if args else fmt, caller_name(1))

    def verbosef(self, fmt, *args):
        """Logs more detailed information if verbose logging is turned on."""
        if not self.is_verbose():
            return False
        return self.log(LogLevel.VERBOSE, fmt % args if args else fmt, caller_name(1))
