# log_tee.py
import sys
import argparse

from config_utils import load_settings
from logging_utils import get_logger, setup_logging
from logger_state import LoggerState, LogLevel
from config_watcher import ConfigReloadHandler, start_config_watcher

LEVELS = {
    'verbose': LogLevel.VERBOSE,
    'info': LogLevel.INFO,
    'error': LogLevel.ERROR,
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog='log-tee',
        description="Copies lines from stdin into daily rotated log files."
    )
    parser.add_argument('--config', default='config.txt', help="INI file with a [log] section")
    parser.add_argument('--level', choices=sorted(LEVELS), default='info')
    parser.add_argument('--tag', default=None, help="prefix every line with '<tag>: '")
    parser.add_argument('--no-watch', action='store_true', help="don't reload the config on change")
    return parser


def open_logger_state(settings):
    """Opens the info stream and, when configured, the error stream."""
    state = LoggerState(echo_stdout=settings.echo_stdout)
    state.open_info(settings.dir, settings.suffix)
    if settings.error_suffix:
        try:
            state.open_error(settings.dir, settings.error_suffix)
        except OSError:
            state.close()
            raise
    return state


def pump(state, stream, level, tag=None):
    """Logs every line of stream. Returns the number of lines read."""
    count = 0
    for line in stream:
        if not line.endswith('\n'):
            line += '\n'
        state.log(level, line, caller=tag)
        count += 1
    return count


def main(argv=None, stdin=None):
    args = build_parser().parse_args(argv)
    logger = get_logger('log_tee')

    # 1. settings and diagnostics
    try:
        settings = load_settings(args.config)
    except (OSError, ValueError) as e:
        setup_logging()
        logger.error(f"Failed to load configuration: {e}")
        return 1
    try:
        setup_logging(settings.diag_level, settings.diag_dir)
    except OSError as e:
        setup_logging(settings.diag_level)
        logger.error(f"Failed to open diagnostics log in {settings.diag_dir}: {e}")
        return 1

    # 2. log files
    try:
        state = open_logger_state(settings)
    except OSError as e:
        logger.error(f"Failed to open log files in {settings.dir}: {e}")
        return 1

    # 3. live config
    observer = None
    if args.no_watch:
        handler = ConfigReloadHandler(args.config, state)
    else:
        observer, handler = start_config_watcher(args.config, state)
    handler.apply(settings)

    # 4. main loop
    try:
        count = pump(state, stdin if stdin is not None else sys.stdin, LEVELS[args.level], args.tag)
        logger.info(f"Logged {count} lines ({state.dropped} dropped).")
    except KeyboardInterrupt:
        logger.info("Shutdown signal received")
    finally:
        if observer is not None:
            observer.stop()
            observer.join()
        handler.release()
        state.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
