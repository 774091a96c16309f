"""
Test data and file fixtures.
"""

from pathlib import Path
from typing import List


def create_test_image_file(directory: Path, name: str = "test_image.png", size: int = 512) -> Path:
    """Create a file with an image extension and ``size`` bytes of filler content."""
    image_path = directory / name
    image_path.parent.mkdir(parents=True, exist_ok=True)
    with open(image_path, "wb") as f:
        f.write(b"0" * size)
    return image_path


def create_test_directory_structure(base_dir: Path, structure: List[str]) -> None:
    """Create a directory structure for testing.

    Args:
        base_dir: Base directory to create structure in
        structure: List of relative paths (files or directories)
    """
    for item in structure:
        path = base_dir / item
        if item.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
