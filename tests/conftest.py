"""Shared pytest fixtures for PromptCanvas tests."""

import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from promptcanvas.api.main import create_app
from promptcanvas.core.config import PromptCanvasConfig
from promptcanvas.core.generator import ImageGenerator
from promptcanvas.core.image_store import ImageStore
from promptcanvas.core.inference_client import InferenceClient

TEST_API_KEY = "hf_test_key"
TEST_INFERENCE_URL = "https://inference.test/models/test-model"

# PNG signature followed by every byte value, so encoding bugs show up.
SAMPLE_IMAGE_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove API key variables so tests never pick up a real credential."""
    for name in ("HUGGING_FACE_API_KEY", "PROMPTCANVAS_HUGGING_FACE_API_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def workdir(temp_dir: Path, monkeypatch) -> Path:
    """Run the test with the temporary directory as the working directory.

    Returned file paths are relative to the CWD, so this keeps them short
    (``images/image_...png``) and resolvable.
    """
    monkeypatch.chdir(temp_dir)
    return temp_dir


@pytest.fixture
def images_dir(workdir: Path) -> Path:
    """Images directory inside the working directory (not yet created)."""
    return workdir / "images"


@pytest.fixture
def test_config(images_dir: Path) -> PromptCanvasConfig:
    """Create a test configuration with a fake key and temporary storage."""
    return PromptCanvasConfig(
        hugging_face_api_key=TEST_API_KEY,
        inference_url=TEST_INFERENCE_URL,
        images_dir=images_dir,
        _env_file=None,
    )


@pytest.fixture
def keyless_config(images_dir: Path) -> PromptCanvasConfig:
    """Create a configuration with no API key."""
    return PromptCanvasConfig(
        inference_url=TEST_INFERENCE_URL,
        images_dir=images_dir,
        _env_file=None,
    )


class RecordingHandler:
    """``httpx.MockTransport`` handler that records requests.

    Attributes:
        requests: Every request received, in order.
        status_code: Status of every response.
        response_kwargs: Keyword arguments for each new ``httpx.Response``.
    """

    def __init__(self, status_code: int, **response_kwargs) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.response_kwargs = response_kwargs

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, **self.response_kwargs)


@pytest.fixture
def make_handler() -> Callable[..., RecordingHandler]:
    """Factory for recording handlers.

    Returns:
        Callable taking ``status_code`` plus ``content`` or ``text`` and
        returning a :class:`RecordingHandler`.
    """

    def _make(status_code: int = 200, **kwargs) -> RecordingHandler:
        if not kwargs:
            kwargs = {"content": SAMPLE_IMAGE_BYTES, "headers": {"content-type": "image/png"}}
        return RecordingHandler(status_code, **kwargs)

    return _make


@pytest.fixture
def success_handler(make_handler) -> RecordingHandler:
    """Handler answering 200 with :data:`SAMPLE_IMAGE_BYTES`."""
    return make_handler()


def build_test_generator(
    config: PromptCanvasConfig, handler: Callable[[httpx.Request], httpx.Response]
) -> ImageGenerator:
    """Build a real generator whose HTTP traffic goes to ``handler``."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ImageGenerator(
        InferenceClient(config, http_client=http_client),
        ImageStore(config.images_dir),
    )


@pytest.fixture
def make_test_client(test_config: PromptCanvasConfig):
    """Factory for ``TestClient`` instances backed by a mocked upstream.

    Yields:
        Callable taking a handler (and optionally a config) and returning an
        entered :class:`TestClient`.

    Cleanup:
        Every client created is closed after the test.
    """
    clients: list[TestClient] = []

    def _make(handler=None, config: PromptCanvasConfig | None = None) -> TestClient:
        config = config or test_config
        app = create_app(config)
        if handler is not None:
            app.state.generator = build_test_generator(config, handler)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def test_client(make_test_client, success_handler) -> TestClient:
    """``TestClient`` whose upstream always returns :data:`SAMPLE_IMAGE_BYTES`."""
    return make_test_client(success_handler)


@pytest.fixture
def sample_image_bytes() -> bytes:
    """Bytes the mocked upstream returns on success."""
    return SAMPLE_IMAGE_BYTES


@pytest.fixture
def make_generator(test_config: PromptCanvasConfig):
    """Factory for generators backed by a mocked upstream.

    Returns:
        Callable taking a handler (and optionally a config).
    """

    def _make(handler, config: PromptCanvasConfig | None = None) -> ImageGenerator:
        return build_test_generator(config or test_config, handler)

    return _make
