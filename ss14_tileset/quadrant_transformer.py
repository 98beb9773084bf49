#!/usr/bin/env python3
"""
Quadrant Transformer - Recomposes a tile from its four corner quadrants

A source tile is cut into four equal squares (1 = top-left, 2 = top-right,
3 = bottom-left, 4 = bottom-right). Each placement instruction copies one of
them onto a transparent canvas, optionally mirrored and rotated, at a
position measured in quadrant-sized cells.
"""

from typing import Iterable, List, NamedTuple, Sequence, Tuple

from PIL import Image

from .constants import IMAGE_MODE, QUADRANTS, QUADRANTS_PER_ROW, TRANSPARENT
from .exceptions import MappingValidationError
from .logging_config import get_logger

logger = get_logger("quadrant_transformer")

# Counter-clockwise quarter turns
ROTATIONS = {
    1: Image.Transpose.ROTATE_90,
    2: Image.Transpose.ROTATE_180,
    3: Image.Transpose.ROTATE_270,
}


class Placement(NamedTuple):
    """Where and how one quadrant is copied into an output canvas"""

    quadrant: int
    dest_x: int
    dest_y: int
    flip_x: bool = False
    flip_y: bool = False
    rotate: int = 0


Box = Tuple[int, int, int, int]


def quadrant_box(index: int, quad_size: int) -> Box:
    """
    Get the source rectangle of a quadrant.

    Args:
        index: Quadrant number (1-4)
        quad_size: Side of a quadrant in pixels

    Returns:
        (left, upper, right, lower) box for Image.crop

    Raises:
        MappingValidationError: If index is outside 1-4
    """
    if not isinstance(index, int) or not 1 <= index <= QUADRANTS:
        raise MappingValidationError(
            f"Quadrant index must be 1-{QUADRANTS}, got {index!r}")

    left = ((index - 1) % QUADRANTS_PER_ROW) * quad_size
    upper = ((index - 1) // QUADRANTS_PER_ROW) * quad_size
    return left, upper, left + quad_size, upper + quad_size


def as_placements(mapping: Iterable[Sequence]) -> List[Placement]:
    """Normalise raw instruction tuples into Placement records."""
    placements = []
    for instruction in mapping:
        if isinstance(instruction, Placement):
            placements.append(instruction)
            continue
        if len(instruction) != len(Placement._fields):
            raise MappingValidationError(
                f"Placement needs {len(Placement._fields)} values, got {instruction!r}")
        placements.append(Placement(*instruction))
    return placements


def _destination(placement: Placement, cell_size: int, padded_width: int) -> Tuple[int, int]:
    return (placement.dest_x * cell_size + padded_width // 2,
            placement.dest_y * cell_size)


def validate_mapping(mapping: Sequence[Placement], quad_size: int,
                     canvas_width: int, canvas_height: int,
                     scale_factor: int = 1, padded_width: int = 0) -> None:
    """
    Check a mapping table before anything is composited.

    Args:
        mapping: Placement instructions
        quad_size: Side of a source quadrant in pixels
        canvas_width: Output canvas width, padding included
        canvas_height: Output canvas height
        scale_factor: Quadrant scale factor
        padded_width: Horizontal padding split across both sides

    Raises:
        MappingValidationError: On a bad quadrant index, an out-of-canvas
            destination, a non-integer rotation, or two instructions
            sharing a destination cell
    """
    cell_size = quad_size * scale_factor
    used_cells = set()

    for placement in mapping:
        quadrant_box(placement.quadrant, quad_size)

        if not isinstance(placement.rotate, int):
            raise MappingValidationError(
                f"Rotation must be a whole number of quarter turns, got {placement.rotate!r}")

        if not isinstance(placement.dest_x, int) or not isinstance(placement.dest_y, int):
            raise MappingValidationError(
                f"Destination must be whole cells, got ({placement.dest_x!r}, {placement.dest_y!r})")

        if placement.dest_x < 0 or placement.dest_y < 0:
            raise MappingValidationError(
                f"Negative destination ({placement.dest_x}, {placement.dest_y})")

        x, y = _destination(placement, cell_size, padded_width)
        if x + cell_size > canvas_width or y + cell_size > canvas_height:
            raise MappingValidationError(
                f"Destination ({placement.dest_x}, {placement.dest_y}) falls outside "
                f"the {canvas_width}x{canvas_height} canvas")

        cell = (placement.dest_x, placement.dest_y)
        if cell in used_cells:
            raise MappingValidationError(
                f"Destination ({placement.dest_x}, {placement.dest_y}) is used twice")
        used_cells.add(cell)


def _transposed(image: Image.Image, method: Image.Transpose) -> Image.Image:
    result = image.transpose(method)
    image.close()
    return result


def render_quadrant(source: Image.Image, placement: Placement,
                    quad_size: int, scale_factor: int = 1) -> Image.Image:
    """
    Cut, scale, flip and rotate a single quadrant.

    Flips are applied before the rotation. The caller owns (and must close)
    the returned image.
    """
    cell_size = quad_size * scale_factor

    quad = source.crop(quadrant_box(placement.quadrant, quad_size))
    try:
        scratch = quad.resize((cell_size, cell_size), Image.Resampling.NEAREST)
    finally:
        quad.close()

    try:
        if placement.flip_x:
            scratch = _transposed(scratch, Image.Transpose.FLIP_LEFT_RIGHT)
        if placement.flip_y:
            scratch = _transposed(scratch, Image.Transpose.FLIP_TOP_BOTTOM)

        turns = placement.rotate % 4
        if turns:
            scratch = _transposed(scratch, ROTATIONS[turns])
    except Exception:
        scratch.close()
        raise

    return scratch


def transform(source: Image.Image, mapping: Iterable[Sequence], quad_size: int,
              final_width: int, final_height: int, scale_factor: int = 1,
              padded_width: int = 0) -> Image.Image:
    """
    Compose a new image from quadrants of a source image.

    Args:
        source: Source tile (read only)
        mapping: Placement instructions, applied in order
        quad_size: Side of a source quadrant in pixels
        final_width: Output width before padding
        final_height: Output height
        scale_factor: Quadrant scale factor
        padded_width: Extra canvas width, half of it offsets every placement

    Returns:
        New RGBA image; pixels not covered by a placement are transparent

    Raises:
        MappingValidationError: If the mapping cannot be composited
    """
    placements = as_placements(mapping)
    canvas_width = final_width + padded_width
    validate_mapping(placements, quad_size, canvas_width, final_height,
                     scale_factor, padded_width)

    cell_size = quad_size * scale_factor
    rgba = source if source.mode == IMAGE_MODE else source.convert(IMAGE_MODE)
    canvas = Image.new(IMAGE_MODE, (canvas_width, final_height), TRANSPARENT)

    try:
        for placement in placements:
            scratch = render_quadrant(rgba, placement, quad_size, scale_factor)
            try:
                # Direct copy, alpha included; no blending with the canvas
                canvas.paste(scratch, _destination(placement, cell_size, padded_width))
            finally:
                scratch.close()
    except Exception:
        canvas.close()
        raise
    finally:
        if rgba is not source:
            rgba.close()

    logger.debug(f"Composed {canvas_width}x{final_height} image from {len(placements)} quadrants")
    return canvas
