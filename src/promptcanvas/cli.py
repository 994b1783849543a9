"""One-shot image generation from the terminal.

Runs a single prompt through the same pipeline the HTTP API uses and prints
where the image was saved.  Useful for checking an API key and the upstream
model without starting the server::

    promptcanvas-generate "A lighthouse at dusk, oil painting"

Exit status is 0 on success and 1 when generation fails.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from promptcanvas.core.config import PromptCanvasConfig, configure_logging, get_config
from promptcanvas.core.errors import GenerationError
from promptcanvas.core.generator import GenerationResult, ImageGenerator
from promptcanvas.core.image_store import ImageStore
from promptcanvas.core.inference_client import InferenceClient

DEFAULT_PROMPT = "A beautiful sunset over mountains with vibrant colors"
PREVIEW_LENGTH = 100


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promptcanvas-generate",
        description="Generate one image and save it to the images directory.",
    )
    parser.add_argument("prompt", nargs="?", default=DEFAULT_PROMPT, help="text prompt")
    parser.add_argument(
        "--images-dir",
        default=None,
        help="override PROMPTCANVAS_IMAGES_DIR for this run",
    )
    return parser


async def generate_once(config: PromptCanvasConfig, prompt: str) -> GenerationResult:
    """Run the pipeline once with a short-lived HTTP client."""
    client = InferenceClient(config)
    try:
        generator = ImageGenerator(client, ImageStore(config.images_dir))
        return await generator.run(prompt)
    finally:
        await client.aclose()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = get_config()
    if args.images_dir:
        config = config.model_copy(update={"images_dir": Path(args.images_dir)})
    configure_logging(config.log_level)

    print(f'Generating image with prompt: "{args.prompt}"...')
    try:
        result = asyncio.run(generate_once(config, args.prompt))
    except GenerationError as e:
        print(f"Error in generation: {e}", file=sys.stderr)
        return 1

    print("Image generated successfully!")
    print(f"Saved to: {result.file_path}")
    print(f"Image data preview: {result.data_url[:PREVIEW_LENGTH]}...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
