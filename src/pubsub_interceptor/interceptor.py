"""
Message decoding interceptor: the per-request pipeline step.

Runs between "request received" and "handler invoked":

    extraction -> decoding -> attribute propagation -> body replacement -> handler

On a recognized validation failure the handler is never called; the
response status is set to 400 and a structured error body is returned
instead. Any other exception propagates to the web framework.
"""

from collections.abc import MutableMapping
from typing import Any, Awaitable, Callable, Protocol, TypeVar

import structlog

from .attributes import DEFAULT_HEADER_PREFIX, propagate_attributes
from .config import Settings
from .decoder import EnvelopeDecoder
from .errors import EnvelopeValidationError
from .logging import PipelineTimer, logging_context
from .models.envelope import DecodeFailure
from .models.responses import BadRequestBody

logger = structlog.get_logger(__name__)

T = TypeVar('T')

BAD_REQUEST = 400


class RequestContext(Protocol):
    """What the interceptor needs from the host framework's request/response."""

    headers: MutableMapping[str, str]

    async def get_body(self) -> bytes: ...

    def set_body(self, payload: Any) -> None: ...

    def set_status(self, status_code: int) -> None: ...


def format_validation_error(error: EnvelopeValidationError) -> dict[str, Any]:
    """Build the 400 response body for a recognized validation failure."""
    body = BadRequestBody(status_code=BAD_REQUEST, message=error.messages())
    return body.model_dump(by_alias=True)


class MessageDecodingInterceptor:
    """
    Unwraps a push envelope so the downstream handler sees the plain payload.

    Stateless apart from configuration; safe to share across requests.
    """

    def __init__(
        self,
        decoder: EnvelopeDecoder | None = None,
        header_prefix: str = DEFAULT_HEADER_PREFIX,
    ):
        self.decoder = decoder or EnvelopeDecoder()
        self.header_prefix = header_prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> 'MessageDecodingInterceptor':
        return cls(
            decoder=EnvelopeDecoder(parse_json=settings.PARSE_JSON_PAYLOAD),
            header_prefix=settings.HEADER_PREFIX,
        )

    async def intercept(
        self,
        context: RequestContext,
        call_next: Callable[[], Awaitable[T]],
    ) -> T | dict[str, Any]:
        """
        Decode the envelope in context, then hand off to call_next.

        Returns the downstream result unchanged on success, or the error body
        (with the status set to 400 on context) on a validation failure.
        """
        timer = PipelineTimer()
        body = await context.get_body()
        result = self.decoder.decode(body, timer=timer)

        if isinstance(result, DecodeFailure):
            logger.info(
                'interceptor.rejected',
                kind=result.kind,
                error=result.error.message,
                violation_count=len(result.messages),
            )
            context.set_status(BAD_REQUEST)
            return format_validation_error(result.error)

        with logging_context(
            message_id=result.message.message_id,
            subscription=result.subscription,
        ):
            with timer.stage('propagation'):
                propagate_attributes(result.attributes, context.headers, self.header_prefix)
            context.set_body(result.payload)

            logger.debug(
                'interceptor.decoded',
                payload_type=type(result.payload).__name__,
                publish_time=result.message.publish_time,
                ordering_key=result.message.ordering_key,
                extra_fields=sorted(result.message.extras),
                **timer.summary(),
            )
            return await call_next()
