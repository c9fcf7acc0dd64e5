"""
TRANSFORMBOT MAIN API
=====================

This module defines the FastAPI application and its HTTP endpoints. The
server is stateless: every request is handled on its own and nothing is
written to disk.

ENDPOINTS:
  GET  /          - Returns API name and list of endpoints.
  GET  /health    - Returns whether the completion service is ready.
  POST /complete  - Body {"prompt": str}. Sends the prompt, with the fixed
                    system instruction, to the language model and returns
                    {"output_text": str}.

ERRORS:
  400 {"error": "Body is required"}         - no JSON object in the body.
  400 {"error": "Prompt is required"}       - prompt missing, not a string, or blank.
  500 {"error": "Failed to get completion"} - model call failed or returned no text.
  Upstream details are logged, never returned to the caller.

STARTUP:
  create_app() builds the app. Unless services are injected (tests), the
  lifespan function loads settings, creates the Groq chat model and the
  CompletionService. A missing GROQ_API_KEY aborts startup.
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
import uvicorn

from transformbot.config import Settings, load_settings, mask_secret
from transformbot.errors import (
    GENERIC_FAILURE_MESSAGE,
    ConfigError,
    MalformedRequestError,
    TransformBotError,
)
from transformbot.models import CompletionRequest, CompletionResponse
from transformbot.services.completion_service import CompletionService, build_chat_model


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

logger = logging.getLogger("transformbot")


def configure_logging(level: str = "INFO"):
    """Configure the root logger once for the server process."""
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)


# -------------------------------------------------------------------------
# LIFESPAN (STARTUP / SHUTDOWN)
# -------------------------------------------------------------------------

def _make_lifespan(settings: Optional[Settings]):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Build the completion service on startup if none was injected.

        Settings are loaded (and validated) here when create_app() was not
        given any, so a missing API key stops the server before it accepts
        requests.
        """
        if app.state.completion_service is None:
            try:
                resolved = settings or load_settings()
                logger.info("Initializing completion service (model=%s, key=%s)...",
                            resolved.model, mask_secret(resolved.api_key))
                app.state.completion_service = CompletionService(build_chat_model(resolved))
                logger.info("Completion service initialized successfully")
            except Exception as e:
                logger.error(f"Fatal error during startup: {e}", exc_info=True)
                raise

        logger.info("Transformation chatbot backend is online")
        yield
        logger.info("Shutting down transformation chatbot backend")

    return lifespan


# -------------------------------------------------------------------------
# ERROR HANDLERS
# -------------------------------------------------------------------------

async def handle_transformbot_error(request: Request, exc: TransformBotError):
    """Translate service errors into {"error": ...} with the mapped status code."""
    if exc.status_code >= 500:
        logger.error(f"Error processing {request.url.path}: {exc}")
    else:
        logger.warning(f"Rejected request to {request.url.path}: {exc.public_message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def handle_unexpected_error(request: Request, exc: Exception):
    """Anything not translated above still answers with the generic failure body."""
    logger.error(f"Unexpected error processing {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE_MESSAGE})


# -------------------------------------------------------------------------
# REQUEST PARSING
# -------------------------------------------------------------------------

async def parse_completion_request(request: Request) -> CompletionRequest:
    """Read and validate the /complete body without calling anything upstream."""
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        raise MalformedRequestError("Body is required")

    try:
        return CompletionRequest.model_validate(body)
    except ValidationError:
        raise MalformedRequestError("Prompt is required")


# -------------------------------------------------------------------------
# FASTAPI APP
# -------------------------------------------------------------------------

def create_app(
    settings: Optional[Settings] = None,
    completion_service: Optional[CompletionService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Pass completion_service to skip building the real Groq client (tests do
    this with a fake chat model).
    """
    app = FastAPI(
        title="Transformation Chatbot API",
        description="Generates record transformation helpers with a hosted language model",
        lifespan=_make_lifespan(settings),
    )
    app.state.completion_service = completion_service

    origins = list(settings.cors_origins) if settings else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TransformBotError, handle_transformbot_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # =========================================================================
    # API ENDPOINTS
    # =========================================================================

    @app.get("/")
    async def root():
        """Return the API name and a short description of each endpoint."""
        return {
            "message": "Transformation Chatbot API",
            "endpoints": {
                "/complete": "Generate a transformation helper from a prompt",
                "/health": "System health check",
            },
        }

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "completion_service": app.state.completion_service is not None,
        }

    @app.post("/complete", response_model=CompletionResponse)
    async def complete(request: Request):
        """
        Generate a transformation helper for the given prompt.

        REQUEST BODY:
        {
            "prompt": "remove the sku attribute"
        }

        RESPONSE:
        {
            "output_text": "function removeSku(record) { ... }"
        }
        """
        payload = await parse_completion_request(request)
        service: CompletionService = app.state.completion_service
        # The model client is synchronous; keep the event loop free while it runs.
        output_text = await run_in_threadpool(service.complete, payload.prompt)
        return CompletionResponse(output_text=output_text)

    return app


# -------------------------------------------------------------------------
# STANDALONE RUN (python -m transformbot.main)
# -------------------------------------------------------------------------
def run():
    """Validate settings, then start uvicorn on the configured host and port."""
    try:
        settings = load_settings()
    except ConfigError as e:
        configure_logging()
        logger.error(f"Error: {e}")
        raise SystemExit(1)

    configure_logging(settings.log_level)
    logger.info(f"Server running at http://localhost:{settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
