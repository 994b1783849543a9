"""Prompt-to-image orchestration.

:class:`ImageGenerator` ties the inference client and the image store into
the one operation the service exposes::

    result = await generator.run("a goblin workshop")
    result.file_path   # 'images/image_1718000000000_a_goblin_workshop.png'
    result.data_url    # 'data:image/png;base64,iVBORw0KGgo...'

The steps always run in this order: validate the prompt, call the inference
service, write the file, encode the data URL.  A result is only returned once
the file is on disk.  Errors from either collaborator propagate unchanged.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass

from starlette.concurrency import run_in_threadpool

from promptcanvas.core.errors import PromptValidationError
from promptcanvas.core.image_store import ImageStore
from promptcanvas.core.inference_client import InferenceClient

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one successful generation.

    Attributes:
        file_path: Path of the stored PNG, relative to the working directory.
        data_url: The same bytes as a ``data:image/png;base64,...`` URL.
    """

    file_path: str
    data_url: str


def build_data_url(image_bytes: bytes, mime_type: str = IMAGE_MIME_TYPE) -> str:
    """Encode image bytes as a base64 data URL."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def validate_prompt(prompt: object) -> str:
    """Return ``prompt`` unchanged if it is a non-blank string.

    Raises:
        PromptValidationError: The prompt is missing, not a string, or
            contains only whitespace.
    """
    if prompt is None:
        raise PromptValidationError("prompt is required")
    if not isinstance(prompt, str):
        raise PromptValidationError("prompt must be a string")
    if not prompt.strip():
        raise PromptValidationError("prompt must not be empty")
    return prompt


class ImageGenerator:
    """Runs the full generation pipeline for a single prompt."""

    def __init__(self, client: InferenceClient, store: ImageStore) -> None:
        self._client = client
        self._store = store

    async def run(self, prompt: str) -> GenerationResult:
        """Generate, persist and encode an image.

        Args:
            prompt: User prompt, forwarded verbatim once validated.

        Returns:
            The stored file path and the data URL of the image.

        Raises:
            PromptValidationError: Blank or missing prompt.
            ConfigurationError: No API key configured.
            UpstreamError: The inference service failed.
            PersistenceError: The image could not be written.
        """
        prompt = validate_prompt(prompt)
        logger.info(f"Generating image for prompt: {prompt[:80]!r}")

        try:
            image_bytes = await self._client.generate(prompt)
            file_path = await run_in_threadpool(self._store.save, image_bytes, prompt)
        except Exception as e:
            logger.error(f"Error generating image: {e}")
            raise

        return GenerationResult(file_path=file_path, data_url=build_data_url(image_bytes))
