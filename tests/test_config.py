# test_config.py
from pathlib import Path

import pytest
from watchdog.events import FileModifiedEvent, FileMovedEvent

from config_utils import LogSettings, load_config, load_settings
from config_watcher import ConfigReloadHandler
from logger_state import LoggerState


def write_config(path, **log):
    lines = ["[log]"] + [f"{k} = {v}" for k, v in log.items()]
    path.write_text("\n".join(lines) + "\n")
    return path


def test_missing_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.txt")


def test_missing_log_section(tmp_path):
    path = tmp_path / "config.txt"
    path.write_text("[other]\nx = 1\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_defaults(tmp_path):
    settings = load_settings(write_config(tmp_path / "config.txt", dir="logs"))
    assert settings == LogSettings(dir=Path("logs"))


def test_full_settings(tmp_path):
    path = tmp_path / "config.txt"
    path.write_text(
        "[log]\n"
        "dir = /var/log/app\n"
        "suffix = .100%.log   ; percent is literal\n"
        "error_suffix = .err\n"
        "echo_stdout = yes\n"
        "verbose = true\n"
        "\n"
        "[diagnostics]\n"
        "level = debug\n"
        "dir = /var/log/app/diag\n"
    )
    settings = load_settings(path)
    assert settings.dir == Path("/var/log/app")
    assert settings.suffix == ".100%.log"
    assert settings.error_suffix == ".err"
    assert settings.echo_stdout is True
    assert settings.verbose is True
    assert settings.diag_level == "DEBUG"
    assert settings.diag_dir == Path("/var/log/app/diag")


@pytest.mark.parametrize("log, extra", [
    ({"suffix": ".log"}, ""),
    ({"dir": "logs", "echo_stdout": "maybe"}, ""),
    ({"dir": "logs"}, "[diagnostics]\nlevel = loud\n"),
])
def test_invalid_settings(tmp_path, log, extra):
    path = write_config(tmp_path / "config.txt", **log)
    path.write_text(path.read_text() + extra)
    with pytest.raises(ValueError):
        load_settings(path)


@pytest.fixture
def state():
    s = LoggerState()
    yield s
    s.close()


def test_reload_applies_echo_and_verbose(tmp_path, state):
    path = write_config(tmp_path / "config.txt", dir="logs", echo_stdout="true", verbose="true")
    handler = ConfigReloadHandler(path, state)

    assert handler.reload() is True
    assert state.echo_stdout is True
    assert state.verbosity.value == 1

    # reloading the same settings doesn't stack verbosity
    handler.reload()
    assert state.verbosity.value == 1

    write_config(path, dir="logs", echo_stdout="false", verbose="false")
    handler.reload()
    assert state.echo_stdout is False
    assert state.verbosity.value == 0


def test_reload_keeps_old_settings_on_error(tmp_path, state):
    path = write_config(tmp_path / "config.txt", dir="logs", verbose="true")
    handler = ConfigReloadHandler(path, state)
    handler.reload()

    path.write_text("garbage without sections\n")
    assert handler.reload() is False
    assert state.verbosity.value == 1


def test_release_drops_held_scope(tmp_path, state):
    path = write_config(tmp_path / "config.txt", dir="logs", verbose="true")
    handler = ConfigReloadHandler(path, state)
    handler.reload()
    state.inc_verbosity()

    handler.release()
    handler.release()
    assert state.verbosity.value == 1


def test_events_for_config_file(tmp_path, state):
    path = write_config(tmp_path / "config.txt", dir="logs", echo_stdout="true")
    handler = ConfigReloadHandler(path, state)

    handler.on_modified(FileModifiedEvent(str(tmp_path / "other.txt")))
    assert state.echo_stdout is False

    handler.on_modified(FileModifiedEvent(str(path)))
    assert state.echo_stdout is True

    write_config(path, dir="logs", echo_stdout="false")
    handler.on_moved(FileMovedEvent(str(tmp_path / "config.txt.tmp"), str(path)))
    assert state.echo_stdout is False
