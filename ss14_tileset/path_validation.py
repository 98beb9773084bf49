#!/usr/bin/env python3
"""
Directory validation for conversion and sort runs
"""

import pathlib
from typing import Tuple, Union

from .exceptions import DirectoryCreationError, InvalidDirectoryError
from .logging_config import get_logger

logger = get_logger("path_validation")

PathLike = Union[str, pathlib.Path]


def validate_input_directory(directory: PathLike) -> pathlib.Path:
    """
    Validate that an input directory exists

    Args:
        directory: Directory to validate

    Returns:
        Resolved directory path

    Raises:
        InvalidDirectoryError: If the path is missing or not a directory
    """
    path = pathlib.Path(directory)
    if not path.exists():
        raise InvalidDirectoryError(f"Input directory does not exist: {directory}")
    if not path.is_dir():
        raise InvalidDirectoryError(f"'{directory}' is not a valid directory.")
    return path.resolve()


def ensure_output_directory(directory: PathLike) -> pathlib.Path:
    """
    Create an output directory (and its parents) if it is missing

    Args:
        directory: Directory to create

    Returns:
        Resolved directory path

    Raises:
        InvalidDirectoryError: If the path exists but is not a directory
        DirectoryCreationError: If the directory cannot be created
    """
    path = pathlib.Path(directory)
    if path.exists() and not path.is_dir():
        raise InvalidDirectoryError(f"Output path is not a directory: {directory}")

    if not path.is_dir():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreationError(
                f"Failed to create output directory: {directory}") from e
        logger.debug(f"Created output directory {path}")

    return path.resolve()


def ensure_distinct_directories(input_dir: PathLike, output_dir: PathLike) -> None:
    """Reject runs whose input and output resolve to the same directory."""
    if pathlib.Path(input_dir).resolve() == pathlib.Path(output_dir).resolve():
        raise InvalidDirectoryError(
            "Directories for input and output must not be the same.")


def prepare_directories(input_dir: PathLike,
                        output_dir: PathLike) -> Tuple[pathlib.Path, pathlib.Path]:
    """
    Validate the input directory, create the output directory and make
    sure the two are not the same place.

    Returns:
        (input, output) resolved paths
    """
    source = validate_input_directory(input_dir)
    target = ensure_output_directory(output_dir)
    ensure_distinct_directories(source, target)
    return source, target
