"""
Public functions for shrinking images with the TinyPNG API.

Example::

    from tinypress import tinify, tinify_defaults, tinify_key

    tinify_key("YOUR-API-KEY")
    tinify_defaults(suffix="_small", quiet=True)

    tinify("plots/example.png")                      # writes plots/example_small.png
    tinify("photo.jpg", overwrite=True)              # shrinks in place
    tinify("example.png", return_path="all")         # {"project": ..., "relative": ..., "absolute": ...}
    tinify("example.png", resize={"method": "fit", "width": 300, "height": 150})
"""

from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

import requests

from tinypress.core.config import UNSET, resolve_options
from tinypress.core.defaults import TinifyDefaults, default_session
from tinypress.core.image_compressor import CompressionResult, ImageCompressor
from tinypress.utils.paths import ReportedPath


def compress_file(
    file: Union[str, Path],
    overwrite: Any = UNSET,
    suffix: Any = UNSET,
    quiet: Any = UNSET,
    return_path: Any = UNSET,
    resize: Any = UNSET,
    key: Optional[str] = None,
    defaults: Optional[TinifyDefaults] = None,
    session: Optional[requests.Session] = None,
) -> CompressionResult:
    """Like :func:`tinify` but return the full :class:`CompressionResult`."""
    defaults = defaults if defaults is not None else default_session()
    options = resolve_options(
        {
            "overwrite": overwrite,
            "suffix": suffix,
            "quiet": quiet,
            "return_path": return_path,
            "resize": resize,
        },
        defaults.as_dict(),
    )
    return ImageCompressor(options, session=session).compress(file, key=key, defaults=defaults)


def tinify(
    file: Union[str, Path],
    overwrite: Any = UNSET,
    suffix: Any = UNSET,
    quiet: Any = UNSET,
    return_path: Any = UNSET,
    resize: Any = UNSET,
    key: Optional[str] = None,
    defaults: Optional[TinifyDefaults] = None,
    session: Optional[requests.Session] = None,
) -> ReportedPath:
    """
    Shrink a PNG or JPEG file with the TinyPNG API.

    Every option left out falls back to the session defaults set with
    :func:`tinify_defaults`, then to the built-in defaults.

    Args:
        file: Path to the image, including its .png/.jpg/.jpeg extension
        overwrite: Replace the original file instead of writing a new one (default False)
        suffix: Suffix for the new file name when not overwriting (default "_tiny")
        quiet: Suppress the summary message (default False)
        return_path: "absolute", "relative", "project", "all" or None (default None)
        resize: Mapping with "method" ("scale", "fit", "cover", "thumb") and
            "width" and/or "height", or None (default None)
        key: API key for this call only
        defaults: Session defaults to use instead of the shared session
        session: HTTP session to send requests with

    Returns:
        The requested path form(s) of the shrunk file, or None
    """
    return compress_file(
        file,
        overwrite=overwrite,
        suffix=suffix,
        quiet=quiet,
        return_path=return_path,
        resize=resize,
        key=key,
        defaults=defaults,
        session=session,
    ).paths


def tinify_many(files: Iterable[Union[str, Path]], **kwargs: Any) -> List[ReportedPath]:
    """Shrink several files one after another, stopping at the first failure."""
    return [tinify(file, **kwargs) for file in files]


def tinify_defaults(defaults: Optional[TinifyDefaults] = None, **fields: Any) -> Optional[List[str]]:
    """
    Set session defaults for :func:`tinify`, or show them.

    Called without fields, returns (and logs) the current defaults. Pass
    ``None`` for a field to restore its built-in value.
    """
    defaults = defaults if defaults is not None else default_session()
    if not fields:
        return defaults.describe()
    defaults.set(**fields)
    return None


def tinify_key(key: str, defaults: Optional[TinifyDefaults] = None) -> None:
    """Store an API key so it does not need to be passed to every :func:`tinify` call."""
    defaults = defaults if defaults is not None else default_session()
    defaults.set_key(key)


def load_project_defaults(
    start: Optional[Union[str, Path]] = None, defaults: Optional[TinifyDefaults] = None
) -> List[str]:
    """Load ``tinify.yml`` from the enclosing project into the session defaults, if there is one."""
    defaults = defaults if defaults is not None else default_session()
    return defaults.load_project_file(Path(start) if start is not None else None)
