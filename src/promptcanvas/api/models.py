"""Pydantic request and response models for the PromptCanvas API.

These models define the JSON schema for every API endpoint.  FastAPI uses
them for request parsing, response serialisation, and OpenAPI documentation
generation.

Response fields use the camelCase names existing clients expect
(``filePath``, ``dataUrl``) while the Python attributes stay snake_case.

Models
------
GenerationRequest
    Payload for ``POST /api/image-generator``.
GenerationResultModel / GenerationResponse
    Successful generation envelope: ``{"result": {"filePath", "dataUrl"}}``.
ErrorDetail / ErrorResponse
    Structured error body returned by the error boundary.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from promptcanvas.core.generator import GenerationResult


class GenerationRequest(BaseModel):
    """Request body for the ``POST /api/image-generator`` endpoint.

    ``prompt`` is optional at the schema level so that a missing prompt
    reaches the generator and is rejected with the same 400 error body as an
    empty one.

    Attributes:
        prompt: Text description of the desired image.
    """

    prompt: str | None = Field(
        default=None,
        description="Text description of the image to generate.",
    )


class GenerationResultModel(BaseModel):
    """A stored image and its inline data URL."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file_path: str = Field(
        ...,
        alias="filePath",
        description="Path of the saved PNG, relative to the server working directory.",
    )
    data_url: str = Field(
        ...,
        alias="dataUrl",
        description="The image as a data:image/png;base64 URL.",
    )

    @classmethod
    def from_result(cls, result: GenerationResult) -> GenerationResultModel:
        return cls(file_path=result.file_path, data_url=result.data_url)


class GenerationResponse(BaseModel):
    """Response body for a successful ``POST /api/image-generator``."""

    result: GenerationResultModel


class ErrorDetail(BaseModel):
    """Machine-readable description of a failed generation.

    Attributes:
        type: Error kind, e.g. ``"upstream_error"``.
        message: Human-readable description.
        status: Upstream HTTP status, present only for upstream errors.
    """

    type: str
    message: str
    status: int | None = None


class ErrorResponse(BaseModel):
    """Error envelope: ``{"error": {...}}``."""

    error: ErrorDetail
