"""FastAPI application serving demo Pub/Sub push endpoints."""

from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pubsub_interceptor.config import get_settings
from pubsub_interceptor.logging import configure_logging
from pubsub_interceptor.models.responses import BadRequestBody

from .routes.demo import router as demo_router
from .routes.health import router as health_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Apply logging settings at startup."""
    settings = get_settings()
    configure_logging(json_output=settings.LOG_JSON, log_level=settings.LOG_LEVEL)

    logger.info("lifespan.startup", header_prefix=settings.HEADER_PREFIX)
    yield
    logger.info("lifespan.shutdown")


app = FastAPI(
    title="pubsub-interceptor",
    description="Pub/Sub push consumer that unwraps base64 envelopes before handlers run",
    lifespan=lifespan,
)


def describe_validation_error(error: dict[str, Any]) -> str:
    """Render one pydantic error as '<field>: <msg>', dropping the 'body' location."""
    field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{field}: {error['msg']}" if field else error["msg"]


# Decoded payloads that fail a handler's model get the same 400 shape as bad envelopes
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = BadRequestBody(message=[describe_validation_error(e) for e in exc.errors()])
    logger.info(
        "request.invalid_payload",
        path=request.url.path,
        violation_count=len(body.message),
    )
    return JSONResponse(status_code=400, content=body.model_dump(by_alias=True))


app.include_router(health_router)
app.include_router(demo_router)
