"""
SS13 -> SS14 Tileset Tools
Converts SS13 smoothing tilesets into SS14 directional states and sorts
numbered tile files into pairs
"""

from .file_pair_sorter import sort_files_into_pairs
from .metadata_generator import generate_metadata
from .quadrant_transformer import Placement, transform
from .tileset_converter import TilesetConverter, convert_tileset
from .tileset_renamer import TilesetRenamer

__version__ = "1.0.0"
__all__ = [
    "Placement",
    "TilesetConverter",
    "TilesetRenamer",
    "convert_tileset",
    "generate_metadata",
    "sort_files_into_pairs",
    "transform",
]
