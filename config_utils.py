# config_utils.py
import configparser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from path_utils import LOG_DIR


def load_config(config_path='config.txt'):
    """Loads and returns the configuration from config.txt."""
    # no interpolation: '%' is legal in file names
    config = configparser.ConfigParser(interpolation=None, inline_comment_prefixes=(';', '#'))
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    try:
        config.read(path)
    except configparser.Error as e:
        raise ValueError(f"Malformed configuration file {config_path}: {e}") from e

    if 'log' not in config:
        raise ValueError("Configuration must contain a 'log' section.")

    return config


@dataclass
class LogSettings:
    """Typed view of the [log] and [diagnostics] sections."""
    dir: Path = LOG_DIR
    suffix: str = '.log'
    error_suffix: Optional[str] = None
    echo_stdout: bool = False
    verbose: bool = False
    diag_level: str = 'INFO'
    diag_dir: Optional[Path] = None

    @classmethod
    def from_config(cls, config):
        log = config['log']
        if not log.get('dir'):
            raise ValueError("[log] section must set 'dir'.")
        try:
            echo_stdout = log.getboolean('echo_stdout', fallback=False)
            verbose = log.getboolean('verbose', fallback=False)
        except ValueError as e:
            raise ValueError(f"Invalid boolean in [log] section: {e}") from e

        diag_level = config.get('diagnostics', 'level', fallback='INFO').upper()
        if diag_level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Invalid diagnostics level '{diag_level}'.")
        diag_dir = config.get('diagnostics', 'dir', fallback=None)

        return cls(
            dir=Path(log['dir']),
            suffix=log.get('suffix', '.log'),
            error_suffix=log.get('error_suffix') or None,
            echo_stdout=echo_stdout,
            verbose=verbose,
            diag_level=diag_level,
            diag_dir=Path(diag_dir) if diag_dir else None,
        )


def load_settings(config_path='config.txt'):
    """load_config() + LogSettings.from_config()."""
    return LogSettings.from_config(load_config(config_path))
