# ============================================================================
# Utility Functions
# ============================================================================

from typing import Optional, Tuple


def format_size(size_bytes: float) -> str:
    """Format bytes to human-readable size."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} PB"


def percent_reduced(original_size: int, compressed_size: int) -> float:
    """
    Percentage of ``original_size`` saved, rounded to one decimal.

    An empty original reports ``0.0``. A result larger than the original
    gives a negative value.
    """
    if original_size <= 0:
        return 0.0
    return round(((original_size - compressed_size) / original_size) * 100, 1)


def format_dimensions(dimensions: Optional[Tuple[int, int]]) -> str:
    """Format ``(width, height)`` as ``"WIDTHxHEIGHT"``."""
    if dimensions is None:
        return "unknown"
    width, height = dimensions
    return f"{width}x{height}"
