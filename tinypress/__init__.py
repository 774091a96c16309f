"""
tinypress - Shrink PNG and JPEG images with the TinyPNG API.
"""

__version__ = "0.1.0"

# Package-level exports for convenience
from tinypress.api import (
    compress_file,
    load_project_defaults,
    tinify,
    tinify_defaults,
    tinify_key,
    tinify_many,
)
from tinypress.core.config import UNSET, ResizeMethod, ResizeSpec, ReturnPath, TinifyOptions, resolve_options
from tinypress.core.defaults import TinifyDefaults, default_session, reset_default_session, resolve_api_key
from tinypress.core.exceptions import (
    AuthenticationError,
    InvalidCredentialError,
    MissingCredentialError,
    NotFoundError,
    RemoteError,
    TinifyError,
    UnsupportedFormatError,
    ValidationError,
)
from tinypress.core.image_compressor import CompressionResult, ImageCompressor
from tinypress.core.tinify_client import TinifyClient


__all__ = [
    "tinify",
    "tinify_many",
    "tinify_defaults",
    "tinify_key",
    "compress_file",
    "load_project_defaults",
    "UNSET",
    "ResizeMethod",
    "ResizeSpec",
    "ReturnPath",
    "TinifyOptions",
    "resolve_options",
    "TinifyDefaults",
    "default_session",
    "reset_default_session",
    "resolve_api_key",
    "ImageCompressor",
    "CompressionResult",
    "TinifyClient",
    "TinifyError",
    "ValidationError",
    "NotFoundError",
    "UnsupportedFormatError",
    "MissingCredentialError",
    "InvalidCredentialError",
    "RemoteError",
    "AuthenticationError",
]
