import io
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

from PIL import Image


# ============================================================================
# File Processor
# ============================================================================

MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}

PIL_FORMATS = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
}


class FileProcessor:
    """File helpers: type detection, dimensions and atomic replacement."""

    @staticmethod
    def mime_type(path: Path) -> Optional[str]:
        """MIME type for a supported image extension, ``None`` otherwise."""
        return MIME_TYPES.get(path.suffix.lower())

    @staticmethod
    def image_dimensions(path: Path) -> Tuple[int, int]:
        """Read ``(width, height)`` of an image without decoding its pixels."""
        with Image.open(path) as img:
            return img.size

    @staticmethod
    @contextmanager
    def atomic_output(destination: Path) -> Iterator[Path]:
        """
        Yield a temporary path beside ``destination`` and move it into place on success.

        The temporary file is removed if the block raises, so ``destination``
        keeps its previous content (or stays absent). The result keeps the
        permissions of the file it replaces, or gets the umask default for a
        new file.
        """
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{destination.stem}.", suffix=f"{destination.suffix}.part", dir=destination.parent
        )
        os.close(fd)
        temp_path = Path(tmp_name)
        try:
            yield temp_path
            FileProcessor._apply_mode(temp_path, destination)
            os.replace(temp_path, destination)
        finally:
            if temp_path.exists():
                temp_path.unlink()

    @staticmethod
    def _apply_mode(temp_path: Path, destination: Path) -> None:
        if destination.exists():
            shutil.copymode(destination, temp_path)
            return
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(temp_path, 0o666 & ~umask)

    @staticmethod
    def reencode_image(data: bytes, destination: Path, extension: str) -> None:
        """Decode image bytes and save them to ``destination`` in the format for ``extension``."""
        image_format = PIL_FORMATS[extension.lower()]
        with Image.open(io.BytesIO(data)) as img:
            if image_format == "JPEG" and img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            img.save(destination, format=image_format)
