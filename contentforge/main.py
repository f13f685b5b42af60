"""FastAPI application entrypoint for article generation."""

from functools import lru_cache
import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from contentforge.config import Settings, get_settings
from contentforge.errors import ConfigurationError, GenerationError
from contentforge.generator import ArticleGenerator
from contentforge.inference import HuggingFaceClient
from contentforge.schemas import ErrorResponse, GenerateRequest, GenerateResponse

logger = logging.getLogger(__name__)

BODY_TOO_LARGE = "Request body too large."


@lru_cache(maxsize=1)
def build_client(settings: Settings) -> HuggingFaceClient:
    """Return a cached client so connections are reused across requests."""
    return HuggingFaceClient(settings)


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_client(settings: Settings = Depends(get_app_settings)):
    return build_client(settings)


def require_credential(settings: Settings = Depends(get_app_settings)) -> Settings:
    # Runs before body validation, so a misconfigured server answers 500 first.
    if not settings.api_key:
        raise ConfigurationError("Server not configured with HF_API_KEY.")
    return settings


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


class BodySizeLimitMiddleware:
    """Reject request bodies larger than `max_body_bytes`.

    The declared Content-Length is checked up front; chunked bodies are
    counted as they are read.
    """

    def __init__(self, app, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = dict(scope["headers"]).get(b"content-length", b"")
        if length.isdigit() and int(length) > self.max_body_bytes:
            await _error(413, BODY_TOO_LARGE)(scope, receive, send)
            return

        received = 0

        async def limited_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    raise HTTPException(status_code=413, detail=BODY_TOO_LARGE)
            return message

        await self.app(scope, limited_receive, send)


def _register_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        topic_invalid = any("topic" in err.get("loc", ()) for err in exc.errors())
        return _error(400, "Invalid topic." if topic_invalid else "Invalid request.")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(ConfigurationError)
    async def configuration_error(request: Request, exc: ConfigurationError):
        return _error(500, str(exc))

    @app.exception_handler(GenerationError)
    async def generation_error(request: Request, exc: GenerationError):
        return _error(500, str(exc))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Generation error")
        return _error(500, str(exc) or "Server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around `settings` (read from the environment if omitted)."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.api_key:
        logger.warning("HF_API_KEY not set. The server will return an error when used.")

    app = FastAPI(title="ContentForge", version="1.0.0")
    app.state.settings = settings

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    _register_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "ContentForge backend is running. POST /generate"

    @app.get("/health")
    def health_check(current: Settings = Depends(get_app_settings)):
        """Return service liveness and the configured model."""
        return {"status": "ok", "model": current.model}

    @app.post(
        "/generate",
        response_model=GenerateResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
        dependencies=[Depends(require_credential)],
    )
    def generate_article(payload: GenerateRequest, client=Depends(get_client)):
        """Generate a long-form article on the requested topic."""
        result = ArticleGenerator(client).generate(
            topic=payload.topic,
            target_words=payload.target_words,
            sources=payload.sources,
            style=payload.style,
        )
        return GenerateResponse(
            content=result.content,
            word_count=result.word_count,
            note=result.note,
        )

    return app


app = create_app()
