"""
Tests for tinypress.core.tinify_client module.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from tests.test_utils.mocks import RESULT_LOCATION, FakeTinifySession, mock_response
from tinypress.core.config import ResizeSpec
from tinypress.core.exceptions import AuthenticationError, RemoteError
from tinypress.core.tinify_client import (
    DEFAULT_TIMEOUT,
    OUTPUT_URL,
    SHRINK_URL,
    TinifyClient,
    result_id_from_location,
)


@pytest.mark.unit
class TestResultId:
    """Tests for result_id_from_location."""

    def test_last_path_segment(self):
        assert result_id_from_location("https://api.tinify.com/output/abc123") == "abc123"

    def test_trailing_slash(self):
        assert result_id_from_location("https://api.tinify.com/output/abc123/") == "abc123"

    def test_no_identifier(self):
        with pytest.raises(RemoteError, match="result id"):
            result_id_from_location("https://api.tinify.com/")


@pytest.mark.unit
class TestTinifyClient:
    """Tests for TinifyClient."""

    def test_sends_basic_auth_per_request(self, fake_session, sample_png):
        client = TinifyClient("secret", session=fake_session)

        client.shrink(sample_png, "image/png")
        client.download(RESULT_LOCATION, sample_png.with_name("out.png"))

        assert fake_session.auths == [("api", "secret"), ("api", "secret")]

    def test_leaves_session_auth_untouched(self):
        session = requests.Session()
        session.auth = ("someone", "else")

        TinifyClient("secret", session=session)

        assert session.auth == ("someone", "else")
        session.close()

    def test_creates_session_when_not_given(self):
        with patch("tinypress.core.tinify_client.requests.Session") as mock_session_class:
            client = TinifyClient("secret")
            client.close()

        assert client.session is mock_session_class.return_value
        mock_session_class.return_value.close.assert_called_once()

    def test_does_not_close_injected_session(self, fake_session):
        with TinifyClient("secret", session=fake_session):
            pass
        assert fake_session.closed is False

    def test_shrink_uploads_file(self, fake_session, sample_png):
        client = TinifyClient("secret", session=fake_session)

        response = client.shrink(sample_png, "image/png")

        assert response.location == RESULT_LOCATION
        assert response.compression_count == 7
        method, url, kwargs = fake_session.calls[0]
        assert (method, url) == ("POST", SHRINK_URL)
        assert kwargs["headers"] == {"Content-Type": "image/png"}
        assert kwargs["timeout"] == DEFAULT_TIMEOUT
        assert fake_session.uploaded == sample_png.read_bytes()

    def test_shrink_closes_file_after_upload(self, fake_session, sample_png):
        TinifyClient("secret", session=fake_session).shrink(sample_png, "image/png")
        assert fake_session.calls[0][2]["data"].closed

    def test_shrink_without_compression_count(self, sample_png):
        session = FakeTinifySession(shrink_response=mock_response(201, headers={"Location": RESULT_LOCATION}))

        response = TinifyClient("secret", session=session).shrink(sample_png, "image/png")

        assert response.compression_count is None

    def test_shrink_unauthorized(self, sample_png):
        session = FakeTinifySession(
            shrink_response=mock_response(
                401,
                reason="Unauthorized",
                json_body={"error": "Unauthorized", "message": "Credentials are invalid."},
            )
        )
        client = TinifyClient("wrong-key", session=session)

        with pytest.raises(AuthenticationError, match="API key is correct") as exc_info:
            client.shrink(sample_png, "image/png")

        assert exc_info.value.status_code == 401
        assert "Credentials are invalid." in str(exc_info.value)

    def test_shrink_server_error(self, sample_png):
        session = FakeTinifySession(shrink_response=mock_response(500, reason="Internal Server Error"))

        with pytest.raises(RemoteError) as exc_info:
            TinifyClient("secret", session=session).shrink(sample_png, "image/png")

        assert not isinstance(exc_info.value, AuthenticationError)
        assert exc_info.value.status_code == 500
        assert str(exc_info.value) == "500 Internal Server Error"

    def test_shrink_without_location(self, sample_png):
        session = FakeTinifySession(shrink_response=mock_response(201, headers={}))

        with pytest.raises(RemoteError, match="Location"):
            TinifyClient("secret", session=session).shrink(sample_png, "image/png")

    def test_transport_error_is_remote_error(self, sample_png):
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(RemoteError, match="connection refused") as exc_info:
            TinifyClient("secret", session=session).shrink(sample_png, "image/png")

        assert exc_info.value.status_code is None

    def test_resize_posts_json(self, fake_session):
        client = TinifyClient("secret", session=fake_session)
        spec = ResizeSpec(method="fit", width=300, height=150)

        data = client.resize(RESULT_LOCATION, spec)

        method, url, kwargs = fake_session.calls[0]
        assert (method, url) == ("POST", OUTPUT_URL.format(result_id="abc123result"))
        assert kwargs["json"] == {"resize": {"method": "fit", "width": 300, "height": 150}}
        assert data == fake_session.resize_response.content

    def test_resize_error(self):
        session = FakeTinifySession(
            resize_response=mock_response(400, reason="Bad Request", json_body={"message": "Bad resize"})
        )

        with pytest.raises(RemoteError, match="Bad resize") as exc_info:
            TinifyClient("secret", session=session).resize(RESULT_LOCATION, ResizeSpec("scale", width=5))

        assert exc_info.value.status_code == 400

    def test_resize_401_is_plain_remote_error(self):
        session = FakeTinifySession(resize_response=mock_response(401, reason="Unauthorized"))

        with pytest.raises(RemoteError) as exc_info:
            TinifyClient("secret", session=session).resize(RESULT_LOCATION, ResizeSpec("scale", width=5))

        assert not isinstance(exc_info.value, AuthenticationError)

    def test_download_writes_bytes(self, temp_dir):
        session = FakeTinifySession(compressed=b"compressed-image-bytes")
        destination = temp_dir / "out.png"

        TinifyClient("secret", session=session).download(RESULT_LOCATION, destination)

        assert destination.read_bytes() == b"compressed-image-bytes"
        method, url, kwargs = session.calls[0]
        assert (method, url) == ("GET", RESULT_LOCATION)
        assert kwargs["stream"] is True

    def test_download_error_does_not_create_file(self, temp_dir):
        session = FakeTinifySession(download_response=mock_response(404, reason="Not Found"))
        destination = temp_dir / "out.png"

        with pytest.raises(RemoteError):
            TinifyClient("secret", session=session).download(RESULT_LOCATION, destination)

        assert not destination.exists()

    @pytest.mark.parametrize(
        "error",
        [requests.exceptions.ChunkedEncodingError("connection broken"), requests.ConnectionError("reset by peer")],
    )
    def test_download_interrupted_mid_stream(self, temp_dir, error):
        response = mock_response(200, content=b"partial")
        response.iter_content.side_effect = error
        session = FakeTinifySession(download_response=response)

        with pytest.raises(RemoteError, match="Download of .* failed") as exc_info:
            TinifyClient("secret", session=session).download(RESULT_LOCATION, temp_dir / "out.png")

        assert exc_info.value.__cause__ is error
