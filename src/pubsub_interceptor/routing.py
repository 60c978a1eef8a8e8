"""
FastAPI integration: run the decoding interceptor around route handlers.

Usage:
    router = APIRouter(route_class=PubSubRoute)

    @router.post("/orders")
    async def create_order(order: OrderDto, request: Request):
        request.headers.get("x-pubsub-origin")
"""

import json
from typing import Any, Callable, Coroutine

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.datastructures import MutableHeaders
from starlette.types import Message

from .config import get_settings
from .interceptor import MessageDecodingInterceptor


class StarletteRequestContext:
    """
    RequestContext over a Starlette request.

    Works on a copy of the ASGI scope, so the incoming request is left
    untouched; build_request() returns the rewritten request for the handler.
    """

    def __init__(self, request: Request):
        self._request = request
        self.scope = dict(request.scope)
        # MutableHeaders(scope=...) copies the raw header list into the scope it writes to
        self.headers = MutableHeaders(scope=self.scope)
        self.status_code: int | None = None
        self._body: bytes | None = None

    async def get_body(self) -> bytes:
        return await self._request.body()

    def set_body(self, payload: Any) -> None:
        self._body = json.dumps(payload).encode('utf-8')
        self.headers['content-type'] = 'application/json'
        self.headers['content-length'] = str(len(self._body))

    def set_status(self, status_code: int) -> None:
        self.status_code = status_code

    def build_request(self) -> Request:
        """Request carrying the replaced body and the propagated headers."""
        body = self._body if self._body is not None else b''
        body_sent = False

        async def receive() -> Message:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {'type': 'http.request', 'body': body, 'more_body': False}
            return await self._request.receive()

        return Request(self.scope, receive)


class PubSubRoute(APIRoute):
    """
    APIRoute that unwraps Pub/Sub push envelopes before the endpoint runs.

    The interceptor defaults to one built from get_settings(); use
    pubsub_route_class() to bind a specific one.
    """

    interceptor: MessageDecodingInterceptor | None = None

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()
        interceptor = self.interceptor or MessageDecodingInterceptor.from_settings(get_settings())

        async def pubsub_route_handler(request: Request) -> Response:
            context = StarletteRequestContext(request)

            async def call_next() -> Response:
                return await original_route_handler(context.build_request())

            result = await interceptor.intercept(context, call_next)
            if context.status_code is not None:
                return JSONResponse(status_code=context.status_code, content=result)
            return result

        return pubsub_route_handler


def pubsub_route_class(interceptor: MessageDecodingInterceptor) -> type[PubSubRoute]:
    """Build a PubSubRoute subclass bound to the given interceptor."""
    return type('PubSubRoute', (PubSubRoute,), {'interceptor': interceptor})
