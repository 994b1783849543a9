"""PromptCanvas - text-to-image generation over the Hugging Face Inference API."""

__version__ = "0.1.0"

from promptcanvas.core.config import PromptCanvasConfig, get_config

__all__ = [
    "PromptCanvasConfig",
    "get_config",
]
