#!/usr/bin/env python3
"""
SS13 -> SS14 Tileset Converter
Builds the eight directional SS14 wall states from three SS13 smoothing tiles

Usage:
    python -m ss14_tileset.tileset_converter -I <input_dir> -O <output_dir> [options]

Options:
    -b, --base <name>   Base file name (default: every <name>0.png in INPUT_DIR;
                        several tilesets go to OUTPUT_DIR/<name>/)
    -s, --scale <int>   Scale factor for the output states (default: 1)
    -v, --verbose       Report every file written

Input files:
    <base>0.png, <base>7.png, <base>15.png

Output files:
    full.png, <base>0.png .. <base>7.png, meta.json
"""

import argparse
import pathlib
import re
import shutil
import sys
from contextlib import ExitStack
from typing import List, NamedTuple, Optional, Tuple, Union

from PIL import Image

from .cli import add_conversion_arguments, run_command
from .constants import (
    BASE_FILE_PATTERN, DIMENSION_DIVISOR, FULL_IMAGE_NAME, IMAGE_MODE,
    PNG_EXTENSION, SOURCE_SUFFIXES
)
from .exceptions import DimensionValidationError, ImageLoadError, InvalidDirectoryError
from .logging_config import get_logger, log_written
from .metadata_generator import generate_metadata
from .path_validation import ensure_output_directory, prepare_directories
from .quadrant_transformer import Placement, transform

logger = get_logger("tileset_converter")

PathLike = Union[str, pathlib.Path]


class OutputGroup(NamedTuple):
    """One composed image and the state files it is saved as"""

    source: str
    mapping: Tuple[Placement, ...]
    outputs: Tuple[int, ...]


# Game asset constants. Each table fills the four cells of the 2x4 quadrant
# grid; (quadrant, dest_x, dest_y, flip_x, flip_y, quarter_turns).
OUTPUT_GROUPS = (
    OutputGroup("0", (
        Placement(1, 1, 0, 0, 0, 0),
        Placement(4, 0, 1, 0, 0, 0),
        Placement(2, 0, 2, 0, 0, 0),
        Placement(3, 1, 3, 0, 0, 0),
    ), (0, 2)),
    OutputGroup("7", (
        Placement(1, 1, 0, 0, 0, 1),
        Placement(1, 0, 1, 0, 0, 3),
        Placement(1, 0, 2, 0, 0, 2),
        Placement(1, 1, 3, 1, 0, 2),
    ), (1, 3)),
    OutputGroup("7", (
        Placement(1, 1, 0, 0, 0, 0),
        Placement(1, 0, 1, 0, 0, 2),
        Placement(1, 0, 2, 0, 0, 1),
        Placement(1, 1, 3, 0, 0, 3),
    ), (4, 6)),
    OutputGroup("7", (
        Placement(2, 1, 0, 1, 0, 0),
        Placement(4, 0, 1, 0, 0, 0),
        Placement(2, 0, 2, 0, 0, 0),
        Placement(4, 1, 3, 1, 0, 0),
    ), (5,)),
    OutputGroup("15", (
        Placement(1, 1, 0, 1, 0, 0),
        Placement(1, 0, 1, 0, 0, 0),
        Placement(1, 0, 2, 0, 0, 0),
        Placement(1, 1, 3, 1, 0, 0),
    ), (7,)),
)

_BASE_FILE_RE = re.compile(BASE_FILE_PATTERN)


def match_base_name(filename: str) -> Optional[str]:
    """Return the base name of a '<name>0.png' file, or None."""
    match = _BASE_FILE_RE.match(filename)
    return match.group(1) if match else None


def find_base_names(directory: PathLike) -> List[str]:
    """Base names of the tilesets sitting directly in a directory"""
    names = []
    for path in sorted(pathlib.Path(directory).iterdir()):
        base = match_base_name(path.name)
        if base is not None and path.is_file():
            names.append(base)
    return names


def source_path(input_dir: PathLike, base_file_name: str, suffix: str) -> pathlib.Path:
    return pathlib.Path(input_dir) / f"{base_file_name}{suffix}{PNG_EXTENSION}"


def load_source(path: pathlib.Path) -> Image.Image:
    """
    Open and decode a source PNG as RGBA.

    Raises:
        ImageLoadError: If the file is missing or not a readable image
    """
    try:
        image = Image.open(path)
    except OSError as e:
        raise ImageLoadError(f"Failed to load image: {path}") from e

    try:
        image.load()
        if image.mode != IMAGE_MODE:
            converted = image.convert(IMAGE_MODE)
            image.close()
            image = converted
    except (OSError, SyntaxError) as e:
        image.close()
        raise ImageLoadError(f"Failed to load image: {path}") from e
    return image


def validate_dimensions(width: int, height: int) -> None:
    """Both sides must split into equal quadrants of whole pixels."""
    if width <= 0 or height <= 0:
        raise DimensionValidationError(f"Invalid image dimensions {width}x{height}")
    if width % DIMENSION_DIVISOR or height % DIMENSION_DIVISOR:
        raise DimensionValidationError(
            f"Image dimensions must be divisible by {DIMENSION_DIVISOR}, got {width}x{height}")


def output_geometry(width: int, scale_factor: int) -> Tuple[int, int, int]:
    """
    Get (quad_size, final_width, final_height) for a source width.

    A 32px wide source gives 16px quadrants and a 32x64 state before padding.
    """
    quad_size = width // 2
    return quad_size, quad_size * 2 * scale_factor, quad_size * 4 * scale_factor


def write_image(image: Image.Image, output_dir: pathlib.Path, verbose: bool,
                *names: str) -> List[str]:
    """Save one image under every given name inside output_dir."""
    for name in names:
        image.save(output_dir / name, format="PNG")
        log_written(logger, f"Image saved as: {name}", verbose)
    return list(names)


def convert_tileset(base_file_name: str, input_dir: PathLike, output_dir: PathLike,
                    verbose: bool = False, scale_factor: int = 1) -> List[str]:
    """
    Convert one SS13 tileset into SS14 directional states.

    Args:
        base_file_name: Shared prefix of the three source images
        input_dir: Directory holding <base>0.png, <base>7.png and <base>15.png
        output_dir: Existing directory to write the states into
        verbose: Report every file written at INFO level (shown once
            setup_logging() or another handler is configured)
        scale_factor: Integer scale factor for the output states

    Returns:
        Names of the files written, full.png first

    Raises:
        ImageLoadError: If a source image is missing or unreadable
        DimensionValidationError: If the 0 source is not a multiple of 4 wide and high
        ValueError: If scale_factor is not a positive integer
    """
    if not isinstance(scale_factor, int) or scale_factor < 1:
        raise ValueError(f"Scale factor must be a positive integer, got {scale_factor!r}")

    output_dir = pathlib.Path(output_dir)
    written = []

    with ExitStack() as stack:
        sources = {}
        for suffix in SOURCE_SUFFIXES:
            image = load_source(source_path(input_dir, base_file_name, suffix))
            stack.callback(image.close)
            sources[suffix] = image

        width, height = sources["0"].size
        validate_dimensions(width, height)
        quad_size, final_width, final_height = output_geometry(width, scale_factor)
        logger.debug(f"{base_file_name}: {width}x{height} source, {quad_size}px quadrants")

        shutil.copyfile(source_path(input_dir, base_file_name, "0"),
                        output_dir / FULL_IMAGE_NAME)
        log_written(logger, f"Image saved as: {FULL_IMAGE_NAME}", verbose)
        written.append(FULL_IMAGE_NAME)

        for group in OUTPUT_GROUPS:
            # States are padded by their own width, centring the quadrants
            output = transform(sources[group.source], group.mapping, quad_size,
                               final_width, final_height, scale_factor,
                               padded_width=final_width)
            try:
                written.extend(write_image(
                    output, output_dir, verbose,
                    *(f"{base_file_name}{n}{PNG_EXTENSION}" for n in group.outputs)))
            finally:
                output.close()

    return written


class TilesetConverter:
    """Converts one tileset and writes its meta.json"""

    def __init__(self, base_file_name: str, input_dir: PathLike, output_dir: PathLike,
                 verbose: bool = False, scale_factor: int = 1):
        self.base_file_name = base_file_name
        self.input_dir = pathlib.Path(input_dir)
        self.output_dir = pathlib.Path(output_dir)
        self.verbose = verbose
        self.scale_factor = scale_factor

    def run(self) -> List[str]:
        """Convert the images, then generate metadata for them."""
        written = convert_tileset(self.base_file_name, self.input_dir, self.output_dir,
                                  self.verbose, self.scale_factor)
        generate_metadata(self.base_file_name, self.output_dir, self.verbose)
        logger.info(f"Conversion complete: {self.base_file_name} in "
                    f"{self.input_dir} to {self.output_dir}")
        return written


def _convert(args: argparse.Namespace) -> None:
    input_dir, output_dir = prepare_directories(args.input_dir, args.output_dir)

    bases = [args.base] if args.base else find_base_names(input_dir)
    if not bases:
        raise InvalidDirectoryError(
            f"Base file matching *0.png not found in input directory: {input_dir}")

    # Several tilesets in one directory each get their own output folder,
    # since every conversion writes full.png and meta.json
    separate = len(bases) > 1
    for base in bases:
        target = ensure_output_directory(output_dir / base) if separate else output_dir
        TilesetConverter(base, input_dir, target, args.verbose, args.scale).run()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Convert SS13 smoothing tiles into SS14 directional states')
    add_conversion_arguments(parser)
    parser.add_argument('-b', '--base', default=None,
                        help='Base file name (default: every <name>0.png in INPUT_DIR, '
                             'each into OUTPUT_DIR/<name>/ when there are several)')
    args = parser.parse_args(argv)
    return run_command("convert tileset", args, _convert)


if __name__ == "__main__":
    sys.exit(main())
