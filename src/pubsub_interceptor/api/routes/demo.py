"""Push endpoints that exercise the decoding interceptor end to end."""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from pubsub_interceptor.models.responses import BadRequestBody
from pubsub_interceptor.routing import PubSubRoute

router = APIRouter(
    route_class=PubSubRoute,
    responses={400: {"model": BadRequestBody, "description": "Malformed push envelope"}},
)


class SomeDto(BaseModel):
    someString: str
    someNumber: int | float


@router.post("/", status_code=201, response_class=PlainTextResponse)
async def root(some_object: SomeDto) -> str:
    """Receive a decoded SomeDto and echo its string field."""
    return some_object.someString


@router.post("/headers", status_code=201)
async def headers(request: Request) -> dict[str, str]:
    """Echo the request headers, including propagated x-pubsub-* attributes."""
    return dict(request.headers)
