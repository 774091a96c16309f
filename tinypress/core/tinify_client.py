from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

import requests

from tinypress.core.config import ResizeSpec
from tinypress.core.exceptions import AuthenticationError, RemoteError
from tinypress.utils.logger import get_logger


# ============================================================================
# Tinify Client
# ============================================================================

API_BASE = "https://api.tinify.com"
SHRINK_URL = f"{API_BASE}/shrink"
OUTPUT_URL = API_BASE + "/output/{result_id}"

DEFAULT_TIMEOUT = 60
CHUNK_SIZE = 64 * 1024


@dataclass
class ShrinkResponse:
    """Result of a successful upload to the shrink endpoint."""

    location: str
    compression_count: Optional[int]


def result_id_from_location(location: str) -> str:
    """Extract the result identifier (last path segment) from a result URL."""
    result_id = urlparse(location).path.rstrip("/").rsplit("/", 1)[-1]
    if not result_id:
        raise RemoteError(f"Cannot find a result id in location '{location}'")
    return result_id


class TinifyClient:
    """Talks to the Tinify HTTP API with basic authentication."""

    def __init__(self, api_key: str, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the client.

        Args:
            api_key: Tinify API key, sent as the basic-auth password for user "api"
            session: Session to send requests with. A new one is created if omitted.
            timeout: Seconds to wait for each request
        """
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.auth = ("api", api_key)
        self.timeout = timeout
        self.logger = get_logger()

    def shrink(self, path: Path, mime_type: str) -> ShrinkResponse:
        """
        Upload an image for compression.

        Args:
            path: Image file to upload
            mime_type: Content type of the image

        Returns:
            Location of the compressed result and the monthly compression count

        Raises:
            AuthenticationError: The API key was rejected
            RemoteError: Any other failure
        """
        self.logger.debug(f"Uploading {path.name} ({mime_type}) to {SHRINK_URL}")
        with open(path, "rb") as fh:
            response = self._send("post", SHRINK_URL, data=fh, headers={"Content-Type": mime_type})
        with response:
            self._raise_on_error(response, auth_check=True)

            location = response.headers.get("Location")
            if not location:
                raise RemoteError("Tinify API response has no Location header", response.status_code)
            count = self._compression_count(response.headers.get("Compression-Count"))

        self.logger.debug(f"Compressed result for {path.name} at {location} (compression count {count})")
        return ShrinkResponse(location=location, compression_count=count)

    def resize(self, location: str, spec: ResizeSpec) -> bytes:
        """Ask the API for a resized version of a compressed result and return the image bytes."""
        url = OUTPUT_URL.format(result_id=result_id_from_location(location))
        self.logger.debug(f"Requesting resize {spec.describe()} from {url}")
        response = self._send("post", url, json=spec.to_payload())
        with response:
            self._raise_on_error(response)
            return response.content

    def download(self, location: str, destination: Path) -> None:
        """Stream a compressed result to ``destination`` byte for byte."""
        self.logger.debug(f"Downloading {location} to {destination}")
        response = self._send("get", location, stream=True)
        with response:
            self._raise_on_error(response)
            try:
                with open(destination, "wb") as fh:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
            except requests.RequestException as e:
                raise RemoteError(f"Download of {location} failed: {e}") from e

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "TinifyClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self.session.request(method.upper(), url, auth=self.auth, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise RemoteError(f"Request to {url} failed: {e}") from e

    @staticmethod
    def _compression_count(value: Optional[str]) -> Optional[int]:
        try:
            return int(value) if value is not None else None
        except ValueError:
            return None

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        reason = response.reason or "HTTP error"
        try:
            body = response.json()
        except ValueError:
            return reason
        if isinstance(body, dict) and body.get("message"):
            return f"{reason}: {body['message']}"
        return reason

    @classmethod
    def _raise_on_error(cls, response: requests.Response, auth_check: bool = False) -> None:
        if response.ok:
            return
        message = cls._error_message(response)
        if auth_check and response.status_code == 401:
            raise AuthenticationError(
                f"{message} - Please make sure your API key is correct", response.status_code
            )
        raise RemoteError(message, response.status_code)
