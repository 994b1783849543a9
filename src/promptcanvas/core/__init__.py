"""Core functionality for prompt-to-image generation.

This package holds everything the HTTP layer delegates to:

- **Configuration** (config.py): ``PromptCanvasConfig`` loaded with Pydantic
  Settings from ``PROMPTCANVAS_*`` environment variables and ``.env``.
- **Errors** (errors.py): the ``GenerationError`` hierarchy and the HTTP
  status each kind maps to.
- **Inference client** (inference_client.py): async Hugging Face Inference
  API client returning raw image bytes.
- **Image store** (image_store.py): flat-file PNG persistence with
  prompt-derived filenames.
- **Generator** (generator.py): the validate → infer → persist → encode
  pipeline.

Usage Example
-------------
::

    from promptcanvas.core import ImageGenerator, ImageStore, InferenceClient, get_config

    config = get_config()
    generator = ImageGenerator(InferenceClient(config), ImageStore(config.images_dir))
    result = await generator.run("a beautiful landscape")
"""

from promptcanvas.core.config import PromptCanvasConfig, get_config
from promptcanvas.core.errors import (
    ConfigurationError,
    GenerationError,
    PersistenceError,
    PromptValidationError,
    UpstreamError,
)
from promptcanvas.core.generator import GenerationResult, ImageGenerator, build_data_url
from promptcanvas.core.image_store import ImageStore
from promptcanvas.core.inference_client import InferenceClient

__all__ = [
    "ConfigurationError",
    "GenerationError",
    "GenerationResult",
    "ImageGenerator",
    "ImageStore",
    "InferenceClient",
    "PersistenceError",
    "PromptCanvasConfig",
    "PromptValidationError",
    "UpstreamError",
    "build_data_url",
    "get_config",
]
