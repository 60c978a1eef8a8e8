"""
Push envelope models and the tagged result of decoding one envelope.

Push body format:
{
    "subscription": "projects/<project>/subscriptions/<name>",
    "message": {
        "data": "<base64>",
        "attributes": {"key": "value"},
        "messageId": "...",
        "publishTime": "..."
    }
}
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from ..errors import EnvelopeValidationError, StructuralError


def _first_present(message: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = message.get(key)
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class PubSubMessage:
    """
    The validated `message` object of a push envelope.

    Only `data` is guaranteed; `attributes` is passed through as received
    (a mapping, None, or whatever the publisher sent).
    """

    data: str
    attributes: Any = None
    message_id: str | None = None
    publish_time: str | None = None
    ordering_key: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS = frozenset(
        {
            'data',
            'attributes',
            'messageId',
            'message_id',
            'publishTime',
            'publish_time',
            'orderingKey',
            'ordering_key',
        }
    )

    @classmethod
    def from_dict(cls, message: Mapping[str, Any]) -> 'PubSubMessage':
        """Build from a message mapping that already passed field validation."""
        message_id = _first_present(message, 'messageId', 'message_id')
        publish_time = _first_present(message, 'publishTime', 'publish_time')
        return cls(
            data=message['data'],
            attributes=message.get('attributes'),
            message_id=str(message_id) if message_id is not None else None,
            publish_time=str(publish_time) if publish_time is not None else None,
            ordering_key=_first_present(message, 'orderingKey', 'ordering_key'),
            extras={k: v for k, v in message.items() if k not in cls._KNOWN_KEYS},
        )


@dataclass
class DecodedEnvelope:
    """Successful decode: the new request body plus the message it came from."""

    payload: Any
    message: PubSubMessage
    subscription: str | None = None

    @property
    def attributes(self) -> Any:
        return self.message.attributes


@dataclass
class DecodeFailure:
    """Failed decode: the recognized validation error that stopped the pipeline."""

    error: EnvelopeValidationError

    @property
    def kind(self) -> str:
        """'structural' for a malformed envelope, 'schema' for field violations."""
        return 'structural' if isinstance(self.error, StructuralError) else 'schema'

    @property
    def messages(self) -> list[str]:
        return self.error.messages()


DecodeResult = Union[DecodedEnvelope, DecodeFailure]
