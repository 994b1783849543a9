"""PromptCanvas: FastAPI Application.

This module is the single entry point for the web service.  It defines the
application factory, the module-level ``app`` instance served by uvicorn,
all REST API routes, the error boundary, and the ``main()`` CLI function.

Architecture
------------
- **Configuration** comes from :class:`~promptcanvas.core.config.PromptCanvasConfig`
  and is injected into :func:`create_app`.
- **Image generation** is delegated to
  :class:`~promptcanvas.core.generator.ImageGenerator`, built once per
  application in the lifespan handler and stored on ``app.state``.
- **Errors** raised by the pipeline are translated into JSON error bodies by
  a single exception handler, so no route needs its own ``try``/``except``.

Endpoints
---------
========  ==========================  ====================================
Method    Path                        Purpose
========  ==========================  ====================================
GET       ``/``                       Static greeting
GET       ``/health``                 Service and configuration status
POST      ``/api/image-generator``    Generate, store and return an image
========  ==========================  ====================================

Usage
-----
CLI (installed entry point)::

    promptcanvas

Direct invocation::

    python -m promptcanvas.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promptcanvas import __version__
from promptcanvas.api.models import (
    ErrorDetail,
    ErrorResponse,
    GenerationRequest,
    GenerationResponse,
    GenerationResultModel,
)
from promptcanvas.core.config import PromptCanvasConfig, configure_logging, get_config
from promptcanvas.core.errors import GenerationError, UpstreamError
from promptcanvas.core.generator import ImageGenerator
from promptcanvas.core.image_store import ImageStore
from promptcanvas.core.inference_client import InferenceClient

logger = logging.getLogger(__name__)


def build_generator(config: PromptCanvasConfig, http_client: httpx.AsyncClient) -> ImageGenerator:
    """Wire the inference client and image store into a generator."""
    return ImageGenerator(
        InferenceClient(config, http_client=http_client),
        ImageStore(config.images_dir),
    )


# ---------------------------------------------------------------------------
# Error boundary.
# ---------------------------------------------------------------------------


async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    """Translate a pipeline error into a structured JSON response.

    Validation errors are the caller's fault and logged at warning level;
    everything else is logged as an error.

    Args:
        request: The request that failed.
        exc: The pipeline error.

    Returns:
        ``JSONResponse`` with the error's HTTP status and an
        :class:`ErrorResponse` body.
    """
    if exc.http_status < 500:
        logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")
    else:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")

    detail = ErrorDetail(type=exc.error_type, message=str(exc))
    if isinstance(exc, UpstreamError) and exc.status_code is not None:
        detail.status = exc.status_code

    body = ErrorResponse(error=detail)
    return JSONResponse(status_code=exc.http_status, content=body.model_dump(exclude_none=True))


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(config: PromptCanvasConfig | None = None) -> FastAPI:
    """Build a configured FastAPI application.

    Args:
        config: Configuration to use.  Defaults to the cached process-wide
            instance from :func:`get_config`.

    Returns:
        The FastAPI application with routes, middleware and the error
        boundary registered.
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the shared HTTP client and generator; close them on shutdown.

        A generator already present on ``app.state`` (injected by tests) is
        left in place.
        """
        # --- Startup -------------------------------------------------------
        http_client = httpx.AsyncClient(timeout=config.request_timeout)
        if getattr(app.state, "generator", None) is None:
            app.state.generator = build_generator(config, http_client)
        if not config.has_api_key:
            logger.warning("No Hugging Face API key configured; generation requests will fail.")
        logger.info(f"Image generator ready (images_dir={config.images_dir}).")

        yield  # Application runs here.

        # --- Shutdown ------------------------------------------------------
        await http_client.aclose()
        logger.info("HTTP client closed on shutdown.")

    app = FastAPI(
        title="PromptCanvas",
        description="Text-to-image generation backed by the Hugging Face Inference API.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.generator = None

    # Allow cross-origin requests so a frontend served from another port can
    # call the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GenerationError, generation_error_handler)

    # -----------------------------------------------------------------------
    # Routes.
    # -----------------------------------------------------------------------

    @app.get("/")
    async def index() -> dict:
        """Return a static greeting."""
        return {"message": "hello world"}

    @app.get("/health")
    async def health() -> dict:
        """Report service version and whether generation is configured.

        The API key itself is never included.
        """
        return {
            "status": "ok",
            "version": __version__,
            "model_url": config.inference_url,
            "api_key_configured": config.has_api_key,
        }

    @app.post(
        "/api/image-generator",
        response_model=GenerationResponse,
        responses={
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            502: {"model": ErrorResponse},
        },
    )
    async def generate_image(req: GenerationRequest, request: Request) -> GenerationResponse:
        """Generate an image from ``prompt``, save it and return it.

        Args:
            req: Validated :class:`GenerationRequest` payload.
            request: Incoming request, used to reach ``app.state``.

        Returns:
            ``{"result": {"filePath": ..., "dataUrl": ...}}``.

        Raises:
            GenerationError: Any pipeline failure; turned into a JSON error
                response by :func:`generation_error_handler`.
        """
        generator: ImageGenerator = request.app.state.generator
        result = await generator.run(req.prompt)
        return GenerationResponse(result=GenerationResultModel.from_result(result))

    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from the configuration (``PROMPTCANVAS_SERVER_HOST``,
    ``PROMPTCANVAS_SERVER_PORT``, ``PROMPTCANVAS_LOG_LEVEL``).  Defaults to
    ``0.0.0.0:3000``.

    This function is registered as the ``promptcanvas`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    config = get_config()
    configure_logging(config.log_level)

    uvicorn.run(
        "promptcanvas.api.main:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
