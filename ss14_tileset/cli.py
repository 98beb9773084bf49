#!/usr/bin/env python3
"""
Shared command-line plumbing for the tileset tools
"""

import argparse
import sys
from typing import Callable

from .constants import DEFAULT_LOG_LEVEL, DEFAULT_SCALE_FACTOR
from .exceptions import TilesetError, format_error_message
from .logging_config import setup_logging


def positive_int(value: str) -> int:
    """argparse type for scale factors"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def add_directory_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the required -I/-O flags."""
    parser.add_argument('-I', dest='input_dir', required=True, metavar='INPUT_DIR',
                        help='Directory holding the SS13 tileset images')
    parser.add_argument('-O', dest='output_dir', required=True, metavar='OUTPUT_DIR',
                        help='Directory to write the SS14 states into (created if missing)')


def add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--log-level', default=DEFAULT_LOG_LEVEL,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Log level (default: INFO)')
    parser.add_argument('--log-file', default=None, help='Also write logs to this file')


def add_conversion_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the options shared by every conversion command."""
    add_directory_arguments(parser)
    parser.add_argument('-s', '--scale', type=positive_int, default=DEFAULT_SCALE_FACTOR,
                        help='Integer scale factor for the output states (default: 1)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Report every file written')
    add_logging_arguments(parser)


def run_command(operation: str, args: argparse.Namespace,
                command: Callable[[argparse.Namespace], None]) -> int:
    """
    Configure logging, run a command and turn failures into an exit status.

    Returns:
        0 on success, 1 if the command raised a tool or OS error
    """
    setup_logging(args.log_level, args.log_file)
    try:
        command(args)
    except (TilesetError, OSError) as e:
        print(f"Error: {format_error_message(operation, e)}", file=sys.stderr)
        return 1
    return 0
