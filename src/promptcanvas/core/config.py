"""Configuration management for PromptCanvas.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PROMPTCANVAS_
prefix, allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PROMPTCANVAS_* prefix)
2. .env file in the working directory
3. Default values defined in PromptCanvasConfig

The Hugging Face credential is additionally accepted under its bare name
``HUGGING_FACE_API_KEY`` so existing ``.env`` files keep working.

Example .env file:
    HUGGING_FACE_API_KEY=hf_xxxxxxxxxxxxxxxxx
    PROMPTCANVAS_IMAGES_DIR=images
    PROMPTCANVAS_SERVER_PORT=3000

Injection, not globals
----------------------
Components never read the environment themselves.  The inference client, the
image store and the generator all receive a :class:`PromptCanvasConfig` (or
values taken from it) through their constructors, so tests can build a config
with a fake key without touching ``os.environ``.  :func:`get_config` caches the
process-wide instance used by the application factory.

Missing credentials
-------------------
A missing API key is *not* a startup error.  The server starts, ``GET /`` and
``GET /health`` work, and every generation attempt fails with a
:class:`~promptcanvas.core.errors.ConfigurationError` before any network call.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INFERENCE_URL = (
    "https://api-inference.huggingface.co/models/stabilityai/stable-diffusion-xl-base-1.0"
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class PromptCanvasConfig(BaseSettings):
    """Main configuration for PromptCanvas.

    Attributes
    ----------
    Inference Settings:
        hugging_face_api_key : SecretStr | None
            Bearer credential for the Hugging Face Inference API
        inference_url : str
            Full URL of the text-to-image model endpoint
        wait_for_model : bool
            Ask the upstream to wait for a cold model instead of answering 503
        request_timeout : float | None
            Outbound timeout in seconds (None waits indefinitely)

    Storage:
        images_dir : Path
            Directory that receives one PNG per successful generation

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root log level applied by the entry points

    Examples
    --------
    Build a configuration for tests:

        >>> cfg = PromptCanvasConfig(
        ...     hugging_face_api_key="hf_test",
        ...     images_dir="/tmp/images",
        ...     _env_file=None,
        ... )
        >>> cfg.has_api_key
        True
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROMPTCANVAS_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Inference settings
    hugging_face_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "hugging_face_api_key",
            "PROMPTCANVAS_HUGGING_FACE_API_KEY",
            "HUGGING_FACE_API_KEY",
        ),
        description="API key for the Hugging Face Inference API",
    )
    inference_url: str = Field(
        default=DEFAULT_INFERENCE_URL,
        description="Text-to-image model endpoint",
    )
    wait_for_model: bool = Field(
        default=True,
        description="Ask the upstream to wait for the model to load",
    )
    request_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Outbound request timeout in seconds (None = no timeout)",
    )

    # Paths
    images_dir: Path = Field(
        default=Path("images"),
        description="Directory to save generated images",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3000,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level applied by the CLI entry points",
    )

    @property
    def has_api_key(self) -> bool:
        """Whether a non-empty API key is configured."""
        if self.hugging_face_api_key is None:
            return False
        return bool(self.hugging_face_api_key.get_secret_value().strip())


@lru_cache
def get_config() -> PromptCanvasConfig:
    """Return the cached process-wide configuration."""
    return PromptCanvasConfig()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the CLI entry points."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
