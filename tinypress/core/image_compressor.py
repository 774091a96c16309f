from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import requests
from PIL import Image

from tinypress.core.config import ResizeSpec, TinifyOptions
from tinypress.core.defaults import TinifyDefaults, resolve_api_key
from tinypress.core.exceptions import NotFoundError, RemoteError, UnsupportedFormatError
from tinypress.core.tinify_client import TinifyClient
from tinypress.services.statistics import format_summary
from tinypress.utils.file_processor import FileProcessor
from tinypress.utils.format import percent_reduced
from tinypress.utils.logger import get_logger
from tinypress.utils.paths import PROJECT_ROOT_MARKERS, ReportedPath, output_path_for, report_paths


Dimensions = Tuple[int, int]


# ============================================================================
# Compression Result
# ============================================================================


@dataclass
class CompressionResult:
    """Outcome of compressing one image."""

    source_path: Path
    output_path: Path
    original_size: int
    compressed_size: int
    location: str
    compression_count: Optional[int] = None
    resized: bool = False
    original_dimensions: Optional[Dimensions] = None
    output_dimensions: Optional[Dimensions] = None
    paths: ReportedPath = None

    @property
    def space_saved(self) -> int:
        return self.original_size - self.compressed_size

    @property
    def percent_reduced(self) -> float:
        return percent_reduced(self.original_size, self.compressed_size)


# ============================================================================
# Image Compressor
# ============================================================================


class ImageCompressor:
    """Compresses (and optionally resizes) one image through the Tinify API."""

    def __init__(
        self,
        options: TinifyOptions,
        session: Optional[requests.Session] = None,
        project_markers: Tuple[str, ...] = PROJECT_ROOT_MARKERS,
    ):
        """
        Initialize image compressor.

        Args:
            options: Resolved options for this compression
            session: HTTP session to reuse. A fresh one is opened per call if omitted.
            project_markers: File names marking a project root for path reporting
        """
        self.options = options
        self.session = session
        self.project_markers = project_markers
        self.file_processor = FileProcessor()
        self.logger = get_logger()
        self.logger.debug(
            f"ImageCompressor initialized: overwrite={options.overwrite}, suffix={options.suffix!r}, "
            f"resize={options.resize.describe() if options.resize else None}, return_path={options.return_path}"
        )

    def compress(
        self,
        file: Union[str, Path],
        key: Optional[str] = None,
        defaults: Optional[TinifyDefaults] = None,
    ) -> CompressionResult:
        """
        Compress an image file.

        The source is validated and the API key resolved before any request
        is made. The output is written to a temporary file and only moved
        over its destination once the remote exchange has succeeded.

        Args:
            file: Path to a .png, .jpg or .jpeg file
            key: API key for this call, overriding the session key and ``TINY_API``
            defaults: Session holding a stored API key

        Returns:
            The compression result, with ``paths`` filled in per ``return_path``
        """
        source = self._validate_source(file)
        mime_type = self.file_processor.mime_type(source)
        api_key = resolve_api_key(key, defaults)

        original_size = source.stat().st_size
        original_dimensions = self._dimensions(source) if self._report_dimensions else None

        with TinifyClient(api_key, session=self.session) as client:
            shrunk = client.shrink(source, mime_type)
            output_path = output_path_for(source, self.options.overwrite, self.options.suffix)
            self.logger.debug(f"Writing {source.name} -> {output_path.name}")

            with self.file_processor.atomic_output(output_path) as temp_path:
                if self.options.resize is not None:
                    self._write_resized(client, shrunk.location, self.options.resize, temp_path, output_path)
                else:
                    client.download(shrunk.location, temp_path)

        result = CompressionResult(
            source_path=source,
            output_path=output_path,
            original_size=original_size,
            compressed_size=output_path.stat().st_size,
            location=shrunk.location,
            compression_count=shrunk.compression_count,
            resized=self.options.resize is not None,
            original_dimensions=original_dimensions,
            output_dimensions=self._dimensions(output_path) if self._report_dimensions else None,
        )

        if not self.options.quiet:
            self.logger.notice(format_summary(result))

        result.paths = report_paths(self.options.return_path, file, output_path, self.project_markers)
        return result

    @property
    def _report_dimensions(self) -> bool:
        return self.options.resize is not None and not self.options.quiet

    @staticmethod
    def _validate_source(file: Union[str, Path]) -> Path:
        path = Path(file)
        if not path.is_file():
            raise NotFoundError(f"File '{file}' does not exist")
        if FileProcessor.mime_type(path) is None:
            raise UnsupportedFormatError(f"TinyPNG can only handle .png or .jpg/.jpeg files, got '{path.name}'")
        return path.resolve()

    def _write_resized(
        self, client: TinifyClient, location: str, spec: ResizeSpec, temp_path: Path, output_path: Path
    ) -> None:
        data = client.resize(location, spec)
        try:
            self.file_processor.reencode_image(data, temp_path, output_path.suffix)
        except (OSError, Image.DecompressionBombError) as e:
            raise RemoteError(f"Tinify API returned an unreadable image: {e}") from e

    def _dimensions(self, path: Path) -> Optional[Dimensions]:
        try:
            return self.file_processor.image_dimensions(path)
        except OSError as e:
            self.logger.debug(f"Could not read dimensions of {path.name}: {e}")
            return None
