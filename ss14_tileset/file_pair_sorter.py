#!/usr/bin/env python3
"""
File Pair Sorter - Groups numbered files into subfolders

Files are expected to be named <prefix><number>.<extension> with a number
between 0 and 15. Two files with the same prefix and extension whose numbers
sum to 15 form a pair and are moved into a subfolder named after the prefix.
Numbered files without a partner go into 'unpaired'; anything else is left
where it is.

Usage:
    python -m ss14_tileset.file_pair_sorter <directory_to_sort>
"""

import argparse
import pathlib
import re
import sys
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .cli import add_logging_arguments, run_command
from .constants import MAX_PAIR_NUMBER, MIN_PAIR_NUMBER, PAIR_SUM, UNPAIRED_FOLDER
from .exceptions import DirectoryCreationError, FileMoveError, InvalidDirectoryError
from .logging_config import get_logger

logger = get_logger("file_pair_sorter")

# Lazy prefix: the number is the longest digit run that leaves a non-empty prefix
_NUMBERED_STEM_RE = re.compile(r"(.+?)(\d+)", re.ASCII)


def split_numbered_name(filename: str) -> Optional[Tuple[str, int, str]]:
    """
    Split 'wall15.png' into ('wall', 15, 'png').

    Returns:
        (prefix, number, extension), or None for names without an extension
        or without trailing digits
    """
    if "." not in filename:
        return None
    stem, extension = filename.rsplit(".", 1)
    match = _NUMBERED_STEM_RE.fullmatch(stem)
    if not match:
        return None
    return match.group(1), int(match.group(2)), extension


def classify_files(filenames: Iterable[str]) -> Dict[str, List[str]]:
    """
    Group file names into pairs keyed by prefix, plus an 'unpaired' group.

    Files are visited in the given order; a file joins at most one group.
    """
    names = list(filenames)
    available = set(names)
    consumed = set()
    groups: Dict[str, List[str]] = {}

    for name in names:
        parts = split_numbered_name(name)
        if parts is None:
            continue
        prefix, number, extension = parts
        if not MIN_PAIR_NUMBER <= number <= MAX_PAIR_NUMBER:
            continue

        partner = f"{prefix}{PAIR_SUM - number}.{extension}"
        # "." and ".." would name the directory itself or its parent
        pairable = prefix not in (".", "..")
        if pairable and partner in available and partner not in consumed and name not in consumed:
            groups.setdefault(prefix, []).extend([name, partner])
            consumed.update((name, partner))
        elif name not in consumed:
            groups.setdefault(UNPAIRED_FOLDER, []).append(name)
            consumed.add(name)

    return groups


def sort_files_into_pairs(directory: Union[str, pathlib.Path]) -> Dict[str, List[str]]:
    """
    Sort the files of a directory into pair subfolders.

    Args:
        directory: Directory whose top-level files are sorted

    Returns:
        Mapping of subfolder name to the files moved into it

    Raises:
        InvalidDirectoryError: If directory is not an existing directory
        DirectoryCreationError: If a subfolder cannot be created
        FileMoveError: If a file cannot be moved
    """
    root = pathlib.Path(directory)
    if not root.is_dir():
        raise InvalidDirectoryError(f"'{directory}' is not a valid directory.")

    filenames = sorted(entry.name for entry in root.iterdir() if entry.is_file())
    groups = classify_files(filenames)

    for folder, files in groups.items():
        subfolder = root / folder
        if not subfolder.is_dir():
            try:
                subfolder.mkdir()
            except OSError as e:
                raise DirectoryCreationError(f"Failed to create folder: {subfolder}") from e

        for name in files:
            try:
                (root / name).rename(subfolder / name)
            except OSError as e:
                raise FileMoveError(f"Failed to move '{name}' to '{folder}' folder: {e}") from e
            logger.info(f"Moved '{name}' to '{folder}' folder.")

    logger.info("Finished sorting files.")
    return groups


def _sort(args: argparse.Namespace) -> None:
    sort_files_into_pairs(args.directory)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Move files whose numeric suffixes sum to 15 into paired subfolders')
    parser.add_argument('directory', help='Directory to sort')
    add_logging_arguments(parser)
    args = parser.parse_args(argv)
    return run_command("sort files", args, _sort)


if __name__ == "__main__":
    sys.exit(main())
