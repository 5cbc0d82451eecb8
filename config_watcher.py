# config_watcher.py
import os
import threading
from pathlib import Path
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from logging_utils import get_logger
from config_utils import load_settings

_watcher_logger = get_logger('config_watcher')


class ConfigReloadHandler(FileSystemEventHandler):
    """
    Re-reads the config file when it changes and applies echo_stdout and
    verbose to a running LoggerState. `verbose = true` holds one verbosity
    scope until it is switched off again. Log file locations are not
    reloaded, they only take effect on restart.
    """
    def __init__(self, config_path, logger_state):
        self.config_path = Path(config_path)
        self.logger_state = logger_state
        self.logger = _watcher_logger
        self._lock = threading.Lock()
        self._verbose_held = False

    def _is_config(self, path):
        if not path:
            return False
        return os.path.abspath(os.fsdecode(path)) == os.path.abspath(self.config_path)

    def on_modified(self, event):
        if not event.is_directory and self._is_config(event.src_path):
            self.reload()

    def on_created(self, event):
        if not event.is_directory and self._is_config(event.src_path):
            self.reload()

    def on_moved(self, event):
        # editors that save by renaming a temp file over the original
        if not event.is_directory and self._is_config(event.dest_path):
            self.reload()

    def apply(self, settings):
        """Applies the live-reloadable settings to the logger state."""
        with self._lock:
            state = self.logger_state
            if state.echo_stdout != settings.echo_stdout:
                self.logger.info(f"echo_stdout set to {settings.echo_stdout}")
            state.echo_stdout = settings.echo_stdout

            if settings.verbose and not self._verbose_held:
                state.inc_verbosity()
                self._verbose_held = True
                self.logger.info("Verbose logging turned on from config.")
            elif not settings.verbose and self._verbose_held:
                state.dec_verbosity()
                self._verbose_held = False
                self.logger.info("Verbose logging turned off from config.")

    def reload(self):
        """Loads the config file and applies it. Keeps the old settings on error."""
        try:
            settings = load_settings(self.config_path)
        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to reload config {self.config_path}: {e}")
            return False
        self.apply(settings)
        return True

    def release(self):
        """Drops the verbosity scope held on behalf of the config, if any."""
        with self._lock:
            if self._verbose_held:
                self.logger_state.dec_verbosity()
                self._verbose_held = False


def start_config_watcher(config_path, logger_state):
    """Starts an Observer on the config file's directory. Returns (observer, handler)."""
    handler = ConfigReloadHandler(config_path, logger_state)
    watch_dir = Path(config_path).resolve().parent

    observer = Observer()
    observer.daemon = True
    observer.schedule(handler, str(watch_dir), recursive=False)
    observer.start()

    _watcher_logger.info(f"Watching config file: {config_path}")
    return observer, handler
