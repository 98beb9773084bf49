#!/usr/bin/env python3
"""
Custom exceptions for the tileset tools.

Every failure a conversion or sort run can hit maps to one class here, so
the command-line entry points can turn it into a single readable line.
"""


class TilesetError(Exception):
    """Base exception for all tileset tool errors"""
    pass


class InvalidDirectoryError(TilesetError):
    """Raised when a directory is missing, not a directory, or reused"""
    pass


class DirectoryCreationError(TilesetError):
    """Raised when an output directory or subfolder cannot be created"""
    pass


class ImageLoadError(TilesetError):
    """Raised when a source PNG is missing or unreadable"""
    pass


class DimensionValidationError(TilesetError):
    """Raised when source dimensions are not multiples of 4"""
    pass


class MappingValidationError(TilesetError):
    """Raised for placement instructions that cannot be composited"""
    pass


class FileMoveError(TilesetError):
    """Raised when the sorter cannot relocate a file"""
    pass


def format_error_message(operation: str, error: Exception) -> str:
    """
    Format an error message for terminal output.

    Args:
        operation: Description of the operation that failed
        error: The exception that was raised

    Returns:
        User-friendly error message
    """
    if isinstance(error, TilesetError):
        return str(error)
    elif isinstance(error, FileNotFoundError):
        return f"File not found during {operation}: {error.filename}"
    elif isinstance(error, PermissionError):
        return f"Permission denied during {operation}: {error.filename}"
    elif isinstance(error, OSError) and error.errno == 28:  # No space left
        return f"Disk full - cannot complete {operation}"
    else:
        return f"Failed to {operation}: {error}"
