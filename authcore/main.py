"""
ASGI application for authcore.

Run locally with ``uvicorn authcore.main:app`` or ``python -m authcore.main``.
"""

from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Any, AsyncGenerator

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from authcore.api.deps import DbSession
from authcore.api.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from authcore.api.v1 import router as api_v1_router
from authcore.config import get_settings
from authcore.database import close_db, init_db
from authcore.logging_config import configure_logging, get_logger
from authcore.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )
    logger.info("Starting %s v%s (%s)", settings.project_name, settings.version, settings.environment)
    for name in settings.default_secrets():
        logger.warning(
            "%s is set to the built-in default; override it outside development",
            name.upper(),
        )

    await init_db()
    yield
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="Credential verification and session token issuance.",
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Added last so CORS runs outermost
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(request: Request, status_code: int, content: dict[str, Any]) -> JSONResponse:
    """JSON error carrying the request id in both header and body."""
    request_id = getattr(request.state, "request_id", None)
    headers = {}
    if request_id:
        headers[REQUEST_ID_HEADER] = request_id
        content.setdefault("request_id", request_id)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(request, exc.status_code, {"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Flatten pydantic errors into field/message/type triples."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return _error_response(
        request,
        HTTPStatus.UNPROCESSABLE_ENTITY,
        {"detail": "Validation error", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    content: dict[str, Any] = {"detail": "Internal server error"}
    if settings.debug:
        content.update(detail=str(exc), type=type(exc).__name__)
    return _error_response(request, HTTPStatus.INTERNAL_SERVER_ERROR, content)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(db: DbSession):
    """Liveness plus a SELECT 1 against the credential store."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        await db.rollback()
        return HealthResponse(status="degraded", version=settings.version, database="unavailable")
    return HealthResponse(version=settings.version)


app.include_router(api_v1_router, prefix=settings.api_v1_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("authcore.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
