"""Error taxonomy for the image generation pipeline.

Every failure a caller can observe is one of four kinds.  Each class carries
the HTTP status and the short ``error_type`` tag the API layer uses when it
turns the exception into a JSON error body, so the mapping lives next to the
errors rather than in the route handlers.

========================  ======  =======================================
Exception                 Status  Raised by
========================  ======  =======================================
PromptValidationError     400     ImageGenerator (empty / missing prompt)
ConfigurationError        500     InferenceClient (no API key)
UpstreamError             502     InferenceClient (non-2xx or transport)
PersistenceError          500     ImageStore (filesystem failure)
========================  ======  =======================================
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for all pipeline failures."""

    http_status: int = 500
    error_type: str = "generation_error"


class PromptValidationError(GenerationError):
    """The prompt is missing, not a string, or blank."""

    http_status = 400
    error_type = "validation_error"


class ConfigurationError(GenerationError):
    """A required setting (the API key) is missing."""

    http_status = 500
    error_type = "configuration_error"


class UpstreamError(GenerationError):
    """The inference service failed or could not be reached.

    Attributes:
        status_code: HTTP status returned by the upstream, or ``None`` when
            the request never produced a response (DNS, connection reset).
        reason: HTTP reason phrase, e.g. ``"Service Unavailable"``.
        body: Raw response body text, kept for diagnostics.
    """

    http_status = 502
    error_type = "upstream_error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str = "",
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class PersistenceError(GenerationError):
    """Writing the image to disk failed."""

    http_status = 500
    error_type = "persistence_error"
