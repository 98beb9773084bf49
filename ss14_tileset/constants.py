#!/usr/bin/env python3
"""
Constants for the SS13 -> SS14 tileset tools
All magic numbers and asset names in one place
"""

# Source tileset naming (<base>0.png, <base>7.png, <base>15.png)
SOURCE_SUFFIXES = ("0", "7", "15")
PNG_EXTENSION = ".png"

# Output files
FULL_IMAGE_NAME = "full.png"
META_FILE_NAME = "meta.json"
STATE_SUFFIXES = tuple(range(8))  # <base>0 .. <base>7

# Image geometry
DIMENSION_DIVISOR = 4  # width and height must be multiples of this
QUADRANTS = 4
QUADRANTS_PER_ROW = 2
DEFAULT_SCALE_FACTOR = 1

# RGBA fill for every canvas and scratch image
TRANSPARENT = (0, 0, 0, 0)
IMAGE_MODE = "RGBA"

# meta.json (size is fixed, not derived from the output images)
META_VERSION = 1
META_LICENSE = "CC-BY-SA-3.0"
META_COPYRIGHT = "Created by Valithor for Space Station 14"
META_SIZE = {"x": 32, "y": 32}
DIRECTIONS_PER_STATE = 4
FULL_STATE_NAME = "full"
JSON_INDENT = 4

# File pair sorter
PAIR_SUM = 15
MIN_PAIR_NUMBER = 0
MAX_PAIR_NUMBER = 15
UNPAIRED_FOLDER = "unpaired"

# Logging
LOGGER_NAME = "ss14_tileset"
DEFAULT_LOG_LEVEL = "INFO"

# <non-digit prefix>0.png marks the first image of a tileset
BASE_FILE_PATTERN = r"^([^0-9]+)0\.png$"
