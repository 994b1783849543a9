"""Hugging Face Inference API client for text-to-image generation.

:class:`InferenceClient` sends a prompt to a hosted diffusion model and hands
back the raw bytes of the encoded image.  It does not look inside those bytes;
whatever the upstream returns on a 2xx status is passed through.

Request
-------
::

    POST <inference_url>
    Authorization: Bearer <hugging_face_api_key>
    Content-Type: application/json

    {"inputs": "<prompt>", "options": {"wait_for_model": true}}

``wait_for_model`` makes the service hold the request while a cold model
loads instead of answering ``503 Model is currently loading``.

Failure modes
-------------
- No API key configured: :class:`ConfigurationError`, raised before any
  request is built.
- Non-2xx response: :class:`UpstreamError` with the status code, reason
  phrase and body text.
- Transport failure (DNS, refused connection, timeout): :class:`UpstreamError`
  with ``status_code=None``.

Nothing is retried.

Usage
-----
::

    client = InferenceClient(config)
    try:
        png = await client.generate("a lighthouse at dusk")
    finally:
        await client.aclose()
"""

from __future__ import annotations

import logging

import httpx

from promptcanvas.core.config import PromptCanvasConfig
from promptcanvas.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class InferenceClient:
    """Async client for a single text-to-image model endpoint.

    Attributes:
        _config (PromptCanvasConfig):
            Source of the API key, endpoint URL and request options.
        _http (httpx.AsyncClient):
            Pooled HTTP client shared by all requests.
        _owns_http (bool):
            ``True`` when the client was created here and must be closed by
            :meth:`aclose`.
    """

    def __init__(
        self,
        config: PromptCanvasConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client.

        Args:
            config: Application configuration.
            http_client: Optional pre-built client.  Tests pass one backed by
                :class:`httpx.MockTransport`; the caller keeps ownership.
        """
        self._config = config
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.request_timeout)

    def build_payload(self, prompt: str) -> dict:
        """Return the JSON body sent to the inference service."""
        return {
            "inputs": prompt,
            "options": {"wait_for_model": self._config.wait_for_model},
        }

    def _auth_headers(self) -> dict[str, str]:
        if not self._config.has_api_key:
            raise ConfigurationError("Hugging Face API key not found in environment variables")

        api_key = self._config.hugging_face_api_key.get_secret_value()
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def generate(self, prompt: str) -> bytes:
        """Generate an image for ``prompt``.

        Args:
            prompt: Text forwarded verbatim as ``inputs``.

        Returns:
            The response body bytes (an encoded PNG on a healthy upstream).

        Raises:
            ConfigurationError: No API key is configured.
            UpstreamError: Non-2xx status or transport failure.
        """
        headers = self._auth_headers()
        url = self._config.inference_url

        logger.info(f"Requesting image from {url}")
        try:
            response = await self._http.post(url, json=self.build_payload(prompt), headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Inference request failed: {e}", exc_info=True)
            raise UpstreamError(f"API request failed: {e}") from e

        if not response.is_success:
            body = response.text
            logger.error(f"Full error response: {body}")
            raise UpstreamError(
                f"API request failed: {response.status_code} {response.reason_phrase} - {body}",
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=body,
            )

        image_bytes = response.content
        logger.info(f"Received {len(image_bytes)} bytes from inference service")
        return image_bytes

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()
