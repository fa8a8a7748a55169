# -*- coding: utf-8 -*-
"""
FastAPI API for the text preparation service.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .logging_config import setup_logging
from .middleware import RequestIDMiddleware
from .models import ErrorResponse, HealthResponse, PrepareRequest, PrepareResult
from .pipeline import prepare_pipeline

# Setup structured logging
setup_logging()
logger = logging.getLogger(__name__)

INVALID_PAYLOAD = "Invalid request payload"


# noinspection PyUnusedLocal
@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifecycle management."""
    logger.info("Starting Text Prep service", extra={"version": __version__})
    yield
    logger.info("Shutting down Text Prep service")


app = FastAPI(
    title="Text Prep Service",
    description="Normalizes pasted HTML and plain text into canonical Markdown with an outline",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.DOCS_ENABLED else None,
    redoc_url="/redoc" if settings.DOCS_ENABLED else None,
)

# Middleware stack (order matters: last added = first executed)
app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MIN_SIZE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)


# noinspection PyUnusedLocal
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON and schema violations both map to a plain 400."""
    logger.warning(
        "Rejected invalid payload",
        extra={"path": request.url.path, "error_count": len(exc.errors())},
    )
    return JSONResponse(status_code=400, content=ErrorResponse(error=INVALID_PAYLOAD).model_dump())


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Service health endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@app.post(
    "/api/prepare-text",
    response_model=PrepareResult,
    responses={400: {"model": ErrorResponse}},
)
def prepare_text(request: PrepareRequest) -> JSONResponse:
    """
    Prepare pasted content.

    - **text**: Raw pasted content, HTML or plain text
    - **options**: Optional normalization options (camelCase keys)
    """
    logger.info("Prepare request received", extra={"input_chars": len(request.text)})

    try:
        result = prepare_pipeline.process(request.text, request.options)
    except Exception as e:
        logger.exception("Text preparation failed")
        return JSONResponse(status_code=400, content=ErrorResponse(error=str(e)).model_dump())

    logger.info(
        "Prepare request completed",
        extra={
            "chars": result.stats.chars,
            "outline_entries": len(result.outline),
            "warnings": len(result.warnings),
        },
    )
    return JSONResponse(content=result.model_dump(by_alias=True))
