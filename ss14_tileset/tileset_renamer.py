#!/usr/bin/env python3
"""
Recursive SS13 -> SS14 tileset conversion

Walks an input tree, converts every tileset found (any '<name>0.png' whose
name has no other digits) and writes the result to the same relative
location under the output root.

Usage:
    python -m ss14_tileset.tileset_renamer -I <input_dir> -O <output_dir> [-s SCALE] [-v]
"""

import argparse
import pathlib
import sys
from typing import List, Optional, Tuple, Union

from .cli import add_conversion_arguments, run_command
from .exceptions import InvalidDirectoryError
from .logging_config import get_logger
from .path_validation import ensure_output_directory, prepare_directories
from .tileset_converter import TilesetConverter, match_base_name

logger = get_logger("tileset_renamer")

PathLike = Union[str, pathlib.Path]


def find_base_files(directory: PathLike) -> List[pathlib.Path]:
    """
    Recursively find '<name>0.png' files.

    Args:
        directory: Root directory to search

    Returns:
        Matching file paths, sorted
    """
    return sorted(
        path for path in pathlib.Path(directory).rglob("*0.png")
        if path.is_file() and match_base_name(path.name) is not None
    )


class TilesetRenamer:
    """Converts every tileset under an input tree into a mirrored output tree"""

    def __init__(self, input_dir: PathLike, output_dir: PathLike,
                 verbose: bool = False, scale_factor: int = 1):
        self.input_dir, self.output_dir = prepare_directories(input_dir, output_dir)
        self.verbose = verbose
        self.scale_factor = scale_factor

    def run(self) -> List[Tuple[str, pathlib.Path]]:
        """
        Convert all tilesets found.

        Returns:
            (base name, output directory) for every conversion, in order

        Raises:
            InvalidDirectoryError: If no base file exists anywhere in the tree
        """
        base_files = find_base_files(self.input_dir)
        if not base_files:
            raise InvalidDirectoryError(
                "Base file matching *0.png not found in input directory or its subdirectories.")

        converted = []
        for base_file in base_files:
            relative = base_file.parent.relative_to(self.input_dir)
            current_output_dir = ensure_output_directory(self.output_dir / relative)
            base = match_base_name(base_file.name)

            logger.debug(f"Converting {base_file} into {current_output_dir}")
            TilesetConverter(base, base_file.parent, current_output_dir,
                             self.verbose, self.scale_factor).run()
            converted.append((base, current_output_dir))

        return converted


def _rename(args: argparse.Namespace) -> None:
    converted = TilesetRenamer(args.input_dir, args.output_dir,
                               args.verbose, args.scale).run()
    logger.info(f"Converted {len(converted)} tileset(s) into {args.output_dir}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Convert every SS13 tileset under a directory tree into SS14 states')
    add_conversion_arguments(parser)
    args = parser.parse_args(argv)
    return run_command("convert tilesets", args, _rename)


if __name__ == "__main__":
    sys.exit(main())
