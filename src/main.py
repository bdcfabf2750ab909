# src/main.py - v2
"""CLI entry point: called once per arrived RAW file.

Usage:
    msatrigger [options] <file.raw>
    msatrigger -n            # send a test notification and exit
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from msatrigger.config.settings import ConfigurationError, Settings, find_config_file, load_settings
from msatrigger.logging.logger import setup_logging
from msatrigger.manifest.resolver import parse_mock_sequence
from msatrigger.notify.base_notifier import ERROR_TITLE, BaseNotifier, send_notification
from msatrigger.notify.log_notifier import LogNotifier
from msatrigger.notify.notifier_factory import create_notifier
from msatrigger.pipeline.runner import EXIT_FAILURE, EXIT_OK, run_invocation
from msatrigger.version import __version__

logger = logging.getLogger(__name__)

TEST_NOTIFICATION_TITLE = "MassSpecTrigger Testing"
TEST_NOTIFICATION_TEXT = (
    "Testing MassSpecTrigger notifications\n"
    "And a second line for the MassSpecTrigger notification"
)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.debug else "INFO", log_format="text", log_file=args.logfile)
    _log_banner(argv if argv is not None else sys.argv[1:])

    overrides: dict[str, object] = {"debug": True} if args.debug else {}
    try:
        settings = load_settings(find_config_file(args.config), **overrides)
    except ConfigurationError as exc:
        if args.notification:
            return _test_notification(LogNotifier())
        logger.error("%s. Exiting.", exc)
        send_notification(LogNotifier(), ERROR_TITLE, str(exc))
        return EXIT_FAILURE

    _configure_logging(settings, args.logfile)

    try:
        if args.notification:
            return _test_notification(create_notifier(settings))

        mock = parse_mock_sequence(args.mock) if args.mock else None
        result = run_invocation(args.raw_file, settings, mock_sequence=mock)
        return result.exit_code
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="msatrigger",
        description=(
            f"msatrigger v{__version__}: track RAW files of an acquisition "
            "sequence and relocate the batch when it is complete"
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "raw_file", nargs="?", type=Path, default=None, metavar="file_path.raw",
        help="RAW file (complete path)",
    )
    parser.add_argument(
        "-m", "--mock", default=None, metavar='"file1.raw;file2.raw;..."',
        help="Semicolon-separated list of RAW files standing in for a manifest",
    )
    parser.add_argument(
        "-l", "--logfile", default=None, metavar="LOGFILE",
        help="Complete path to log file",
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None,
        help="Configuration file (default: ./msatrigger.cfg or ./MassSpecTrigger.cfg)",
    )
    parser.add_argument(
        "-n", "--notification", action="store_true",
        help="Send a test error notification and exit",
    )
    parser.add_argument(
        "-d", "--debug", action="store_true",
        help="Enable debug output",
    )
    return parser


def _log_banner(argv: list[str]) -> None:
    logger.info("#" * 62)
    logger.info("# COMMAND: msatrigger %s", " ".join(argv))
    logger.info("#" * 62)


def _configure_logging(settings: Settings, cli_logfile: str | None) -> None:
    setup_logging(
        level=settings.effective_log_level,
        log_format=settings.log_format,
        log_file=cli_logfile or settings.log_file or None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


def _test_notification(notifier: BaseNotifier) -> int:
    send_notification(notifier, TEST_NOTIFICATION_TITLE, TEST_NOTIFICATION_TEXT)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
