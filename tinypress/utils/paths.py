"""
Output path computation and reporting.

The output of a compression is reported in up to three forms: absolute,
relative to the working directory the caller used, and relative to the
enclosing project root.
"""

import os
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from tinypress.core.config import ReturnPath


PROJECT_ROOT_MARKERS = ("tinify.yml", "pyproject.toml", "setup.py", ".git")

PathLike = Union[str, "os.PathLike[str]"]
ReportedPath = Union[None, str, Dict[str, Optional[str]]]


def output_path_for(source: Path, overwrite: bool, suffix: str) -> Path:
    """
    Compute where the compressed image is written.

    Args:
        source: Absolute path of the source image
        overwrite: Replace the source file in place
        suffix: Text inserted before the extension when not overwriting

    Returns:
        ``source`` itself, or ``{stem}{suffix}{ext}`` beside it
    """
    if overwrite:
        return source
    return source.with_name(f"{source.stem}{suffix}{source.suffix}")


def find_project_root(start: PathLike, markers: Iterable[str] = PROJECT_ROOT_MARKERS) -> Optional[Path]:
    """Return the closest directory at or above ``start`` holding one of ``markers``."""
    markers = tuple(markers)
    current = Path(start).resolve()
    if current.is_file() or not current.exists():
        current = current.parent

    for directory in (current, *current.parents):
        if any((directory / marker).exists() for marker in markers):
            return directory
    return None


def absolute_path(output: Path) -> str:
    return str(Path(output).resolve())


def relative_path(original: PathLike, output: Path) -> str:
    """Output file name joined onto the directory part of the path the caller passed."""
    return os.path.join(os.path.dirname(os.fspath(original)), Path(output).name)


def project_path(output: Path, markers: Iterable[str] = PROJECT_ROOT_MARKERS) -> Optional[str]:
    """Output path relative to its project root, or ``None`` if there is no project."""
    output = Path(output).resolve()
    root = find_project_root(output.parent, markers)
    if root is None:
        return None
    return str(output.relative_to(root))


def report_paths(
    return_path: Optional[ReturnPath],
    original: PathLike,
    output: Path,
    markers: Iterable[str] = PROJECT_ROOT_MARKERS,
) -> ReportedPath:
    """
    Build the value returned to the caller for ``return_path``.

    Returns:
        ``None`` when no path was requested, a string for a single form, or
        a dict with ``project``, ``relative`` and ``absolute`` keys for
        :attr:`ReturnPath.ALL`. A missing project root yields ``None``.
    """
    if return_path is None:
        return None
    if return_path is ReturnPath.ABSOLUTE:
        return absolute_path(output)
    if return_path is ReturnPath.RELATIVE:
        return relative_path(original, output)
    if return_path is ReturnPath.PROJECT:
        return project_path(output, markers)
    return {
        "project": project_path(output, markers),
        "relative": relative_path(original, output),
        "absolute": absolute_path(output),
    }
