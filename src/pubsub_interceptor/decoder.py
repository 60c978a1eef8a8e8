"""
Envelope decoder: push body bytes -> validated message -> decoded payload.

The decoder has three steps, run strictly in order:
1. Extraction: parse the body and locate the `message` object
2. Validation: run the message rule table, collecting every violation
3. Decoding: base64 -> UTF-8 text -> JSON value (or the text itself)

`decode()` returns a DecodedEnvelope or a DecodeFailure. Only the two
recognized validation errors become failures; any other exception
propagates to the caller untouched.
"""

import base64
import json
from typing import Any, Mapping, Sequence

import structlog

from .errors import EnvelopeValidationError, SchemaValidationError, StructuralError
from .logging import PipelineTimer
from .models.envelope import DecodedEnvelope, DecodeFailure, DecodeResult, PubSubMessage
from .schema import MESSAGE_RULES, FieldRule, describe_value, validate_fields

logger = structlog.get_logger(__name__)

MISSING_MESSAGE = 'Missing message field in request body'
INVALID_MESSAGE = 'The message field has value: "{value}". This is not a valid object'


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_body(body: bytes | str | Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Parse a raw request body into the envelope mapping.

    Empty, unparseable and non-object bodies all yield an empty envelope, so
    they surface as a missing message field.
    """
    if body is None:
        return {}
    if isinstance(body, Mapping):
        return dict(body)
    if isinstance(body, bytes):
        if not body.strip():
            return {}
        try:
            body = body.decode('utf-8')
        except UnicodeDecodeError:
            logger.debug('decoder.body_not_utf8')
            return {}
    if not body.strip():
        return {}
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.debug('decoder.body_not_json', error=str(e))
        return {}
    if not isinstance(parsed, dict):
        logger.debug('decoder.body_not_object', body_type=type(parsed).__name__)
        return {}
    return parsed


def extract_message(envelope: Mapping[str, Any]) -> dict[str, Any]:
    """
    Locate the `message` object in the envelope.

    Raises:
        StructuralError: message is absent or is not an object
    """
    if 'message' not in envelope:
        raise StructuralError(MISSING_MESSAGE)

    message = envelope['message']
    if not isinstance(message, Mapping):
        raise StructuralError(
            INVALID_MESSAGE.format(value=describe_value(message)),
            context={'value_type': type(message).__name__},
        )
    return dict(message)


def validate_message(
    message: Mapping[str, Any],
    rules: Sequence[FieldRule] = MESSAGE_RULES,
) -> PubSubMessage:
    """
    Check the message against the rule table.

    Raises:
        SchemaValidationError: with every violation found, never just the first
    """
    violations = validate_fields(message, rules)
    if violations:
        raise SchemaValidationError(violations)
    return PubSubMessage.from_dict(message)


def decode_data(data: str, parse_json: bool = True) -> Any:
    """
    Decode validated base64 data into the handler payload.

    The decoded bytes are read as UTF-8 text, then parsed as JSON. Text
    that is not JSON, including JSON nested too deeply to parse, is
    returned as-is; this is not an error.
    """
    text = base64.b64decode(data).decode('utf-8', errors='replace')
    if not parse_json:
        return text
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return text


class EnvelopeDecoder:
    """
    Validates a push envelope and decodes its message payload.

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(
        self,
        rules: Sequence[FieldRule] = MESSAGE_RULES,
        parse_json: bool = True,
    ):
        self.rules = tuple(rules)
        self.parse_json = parse_json

    def decode(
        self,
        body: bytes | str | Mapping[str, Any] | None,
        timer: PipelineTimer | None = None,
    ) -> DecodeResult:
        """Run extraction, validation and decoding for one request body."""
        timer = timer or PipelineTimer()
        try:
            with timer.stage('extraction'):
                envelope = parse_body(body)
                message = validate_message(extract_message(envelope), self.rules)
        except EnvelopeValidationError as e:
            return DecodeFailure(error=e)

        with timer.stage('decoding'):
            payload = decode_data(message.data, parse_json=self.parse_json)

        subscription = envelope.get('subscription')
        return DecodedEnvelope(
            payload=payload,
            message=message,
            subscription=subscription if isinstance(subscription, str) else None,
        )
