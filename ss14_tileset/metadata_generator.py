#!/usr/bin/env python3
"""
Writes the meta.json sidecar describing a converted tile set
"""

import json
import pathlib
from typing import Any, Dict, Union

from .constants import (
    DIRECTIONS_PER_STATE, FULL_STATE_NAME, JSON_INDENT, META_COPYRIGHT,
    META_FILE_NAME, META_LICENSE, META_SIZE, META_VERSION, STATE_SUFFIXES
)
from .logging_config import get_logger, log_written

logger = get_logger("metadata_generator")


def build_metadata(base_file_name: str, license: str = META_LICENSE,
                   copyright: str = META_COPYRIGHT) -> Dict[str, Any]:
    """
    Build the metadata document for a tile set.

    The base name goes into the state names verbatim. Size is a fixed
    32x32 regardless of the produced images.
    """
    states = [{"name": FULL_STATE_NAME}]
    states.extend(
        {"name": f"{base_file_name}{suffix}", "directions": DIRECTIONS_PER_STATE}
        for suffix in STATE_SUFFIXES
    )
    return {
        "version": META_VERSION,
        "license": license,
        "copyright": copyright,
        "size": dict(META_SIZE),
        "states": states,
    }


def generate_metadata(base_file_name: str, output_dir: Union[str, pathlib.Path],
                      verbose: bool = False, **overrides: str) -> str:
    """
    Write meta.json into the output directory.

    Args:
        base_file_name: Shared prefix of the tile states
        output_dir: Directory to write meta.json into
        verbose: Report the written file at INFO level (needs logging
            configured, see setup_logging)
        **overrides: Optional ``license`` / ``copyright`` replacements

    Returns:
        The JSON text that was written
    """
    text = json.dumps(build_metadata(base_file_name, **overrides), indent=JSON_INDENT)
    path = pathlib.Path(output_dir) / META_FILE_NAME
    path.write_text(text, encoding="utf-8")
    log_written(logger, f"Meta file saved as: {META_FILE_NAME}", verbose)
    return text
