"""
Shared pytest fixtures and configuration.
"""

import shutil
import tempfile
from pathlib import Path

import pytest
from PIL import Image

from tests.test_utils.mocks import FakeTinifySession
from tinypress.core.defaults import API_KEY_ENV, TinifyDefaults, reset_default_session
from tinypress.utils.logger import get_logger


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Start every test without an API key, session defaults or log output."""
    monkeypatch.delenv(API_KEY_ENV, raising=False)
    reset_default_session()
    get_logger().configure(enable_console=False, enable_file=False)
    yield
    reset_default_session()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    if temp_path.exists():
        shutil.rmtree(temp_path)


@pytest.fixture
def sample_png(temp_dir):
    """A real 800x600 PNG image."""
    path = temp_dir / "example.png"
    Image.new("RGB", (800, 600), color=(200, 30, 30)).save(path, format="PNG")
    return path


@pytest.fixture
def sample_jpg(temp_dir):
    """A real 640x480 JPEG image."""
    path = temp_dir / "photo.jpg"
    Image.new("RGB", (640, 480), color=(30, 30, 200)).save(path, format="JPEG")
    return path


@pytest.fixture
def defaults():
    """A fresh session with an API key set."""
    session = TinifyDefaults()
    session.set_key("test-key")
    return session


@pytest.fixture
def fake_session():
    """A stand-in for requests.Session answering like the Tinify API."""
    return FakeTinifySession()
