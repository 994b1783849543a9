"""Flat-file image storage for generated PNGs.

Every successful generation is written to a single directory as
``image_<unixMillis>_<sanitizedPrompt>.png``.  The sanitized prompt keeps the
directory browsable by humans: every character outside ``[A-Za-z0-9]`` becomes
``_`` and the result is cut to 50 characters.

Files are created with exclusive mode (``"xb"``) so an existing image is never
overwritten.  When two identical prompts land in the same millisecond, the
second file gets a ``_1`` suffix (then ``_2``, ...) before the extension.

The store never updates or deletes images; cleanup is left to operators.
"""

from __future__ import annotations

import logging
import os
import re
import time
from pathlib import Path

from promptcanvas.core.errors import PersistenceError

logger = logging.getLogger(__name__)

SANITIZED_PROMPT_LENGTH = 50
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")

# Upper bound on collision suffixes tried for one timestamp/prompt pair.
_MAX_DISAMBIGUATORS = 1000


def sanitize_prompt(prompt: str, max_length: int = SANITIZED_PROMPT_LENGTH) -> str:
    """Make a prompt safe for use inside a filename.

    Args:
        prompt: Raw user prompt.
        max_length: Number of characters kept after substitution.

    Returns:
        The prompt with every non-alphanumeric character replaced by ``_``,
        truncated to ``max_length`` characters.
    """
    return _UNSAFE_CHARS.sub("_", prompt)[:max_length]


def build_filename(prompt: str, timestamp_ms: int, disambiguator: int = 0) -> str:
    """Build the on-disk filename for an image.

    Args:
        prompt: Raw user prompt.
        timestamp_ms: Creation time in Unix milliseconds.
        disambiguator: Collision counter.  ``0`` yields the plain name.

    Returns:
        ``image_<timestamp>_<sanitized>.png`` or, for a non-zero
        disambiguator, ``image_<timestamp>_<sanitized>_<n>.png``.
    """
    stem = f"image_{timestamp_ms}_{sanitize_prompt(prompt)}"
    if disambiguator:
        stem = f"{stem}_{disambiguator}"
    return f"{stem}.png"


class ImageStore:
    """Writes image bytes to ``images_dir`` and reports relative paths.

    Attributes:
        images_dir: Target directory, created on first save.
        base_dir: Directory the returned paths are relative to.  ``None``
            means the process working directory at save time.
    """

    def __init__(self, images_dir: Path | str, base_dir: Path | str | None = None) -> None:
        self.images_dir = Path(images_dir)
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def save(self, image_bytes: bytes, prompt: str) -> str:
        """Persist an image and return its path.

        Args:
            image_bytes: Encoded image exactly as received from upstream.
            prompt: Prompt used to name the file.

        Returns:
            Path of the new file relative to :attr:`base_dir`.

        Raises:
            PersistenceError: Directory creation or the write failed.
        """
        try:
            self.images_dir.mkdir(parents=True, exist_ok=True)
            filepath = self._write_exclusive(image_bytes, prompt, int(time.time() * 1000))
        except OSError as e:
            logger.error(f"Error saving image: {e}", exc_info=True)
            raise PersistenceError(f"Failed to save image: {e}") from e

        base_dir = self.base_dir if self.base_dir is not None else Path.cwd()
        relative_path = os.path.relpath(filepath, base_dir)
        logger.info(f"Saved {len(image_bytes)} bytes to {relative_path}")
        return relative_path

    def _write_exclusive(self, image_bytes: bytes, prompt: str, timestamp_ms: int) -> Path:
        for disambiguator in range(_MAX_DISAMBIGUATORS):
            filepath = self.images_dir / build_filename(prompt, timestamp_ms, disambiguator)
            try:
                with open(filepath, "xb") as handle:
                    handle.write(image_bytes)
            except FileExistsError:
                logger.debug(f"Filename taken, trying next suffix: {filepath.name}")
                continue
            return filepath

        raise FileExistsError(
            f"No free filename for timestamp {timestamp_ms} after {_MAX_DISAMBIGUATORS} attempts"
        )
