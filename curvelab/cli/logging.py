"""
Logging configuration for the CurveLab CLI.

Each level gets its own handler and a message prefix:
- DEBUG: "[DEBUG] " on stderr, only with -v
- INFO: no prefix on stdout, hidden with -q
- WARNING: "! " on stdout
- ERROR/CRITICAL: "!! " on stderr
"""

import argparse
import logging
import sys
from typing import TextIO

LEVEL_PREFIXES = {
    logging.DEBUG: "[DEBUG] ",
    logging.INFO: "",
    logging.WARNING: "! ",
    logging.ERROR: "!! ",
}


class PrefixFormatter(logging.Formatter):
    """Bare message preceded by a fixed prefix."""

    def __init__(self, prefix: str = "") -> None:
        super().__init__()
        self.prefix = prefix

    def format(self, record):
        return f"{self.prefix}{record.getMessage()}"


class LevelFilter(logging.Filter):
    """Pass records of exactly one level."""

    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record):
        return record.levelno == self.level


def _level_handler(stream: TextIO, level: int, exact: bool = True) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    if exact:
        handler.addFilter(LevelFilter(level))
    handler.setFormatter(PrefixFormatter(LEVEL_PREFIXES[level]))
    return handler


def setup_logging(args: argparse.Namespace) -> None:
    """
    Configure the root logger from parsed CLI arguments.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed arguments with 'quiet' and 'verbose' attributes
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    if args.verbose >= 1:
        root_logger.addHandler(_level_handler(sys.stderr, logging.DEBUG))
    if not args.quiet:
        root_logger.addHandler(_level_handler(sys.stdout, logging.INFO))
    root_logger.addHandler(_level_handler(sys.stdout, logging.WARNING))
    # CRITICAL shares the error stream and prefix
    root_logger.addHandler(_level_handler(sys.stderr, logging.ERROR, exact=False))
