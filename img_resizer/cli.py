import sys
import signal
import logging
import threading

from typing import Optional, Sequence
from img_resizer.settings import Settings
from img_resizer.watcher import DirectoryWatcher
from img_resizer import PROGRAM_NAME
from img_resizer.resizer import exit_status, resize_image
from img_resizer.utils.logger_setup import setup_logger
from img_resizer.utils.exceptions import OptionError, WatchSetupError
from img_resizer.options import (
    Configuration,
    build_parser,
    format_help,
    parse_options,
)

logger = logging.getLogger(__name__)


def _install_stop_signals(stop_event: threading.Event):
    """SIGTERM останавливает наблюдение так же, как Ctrl+C"""
    if threading.current_thread() is not threading.main_thread():
        return

    def handle_signal(signum, frame):
        stop_event.set()

    signal.signal(signal.SIGTERM, handle_signal)


def run_watch_mode(
    config: Configuration,
    settings: Settings,
    stop_event: Optional[threading.Event] = None,
) -> int:
    stop_event = stop_event or threading.Event()
    watcher = DirectoryWatcher(config, settings, stop_event)

    try:
        watcher.start()
    except WatchSetupError as e:
        logger.error(f"{PROGRAM_NAME}: {e.message}")
        return 1

    _install_stop_signals(stop_event)
    print("Press Ctrl+C to stop watching...")
    try:
        summary = watcher.run()
    except KeyboardInterrupt:
        stop_event.set()
        print("\nWatching stopped")
        summary = watcher.stop()

    return summary.exit_status


def run_single(config: Configuration) -> int:
    if not config.source_path or not config.output_path:
        logger.error(
            f"{PROGRAM_NAME}: Both --imageSource and --imageOut are required"
        )
        return 1

    outcome = resize_image(
        config.source_path, config.width, config.height, config.output_path
    )
    return exit_status([outcome])


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    # Settings уже пишет предупреждения в лог
    setup_logger()
    settings = Settings()
    setup_logger(settings.LOG_LEVEL)

    try:
        config = parse_options(argv, settings)
    except OptionError as e:
        print(f"{PROGRAM_NAME}: {e.message}", file=sys.stderr)
        print(f"Try '{PROGRAM_NAME} --help' for more information", file=sys.stderr)
        if "--help" in argv:
            print(format_help(build_parser(settings)))
        return 1

    if config.show_help:
        print(format_help(build_parser(settings)))
        return 0

    if config.watch_mode:
        return run_watch_mode(config, settings)
    return run_single(config)


def run():
    sys.exit(main())
