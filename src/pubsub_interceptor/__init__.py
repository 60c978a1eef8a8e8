"""
Pub/Sub Message Decoding Interceptor

Unwraps Pub/Sub push envelopes in front of FastAPI handlers: validates the
envelope, base64-decodes and JSON-parses message.data into the request
body, and copies message attributes into x-pubsub-* request headers.
"""

__version__ = '0.1.0'

# Re-export key classes for convenience
from .decoder import (
    EnvelopeDecoder,
    decode_data,
    extract_message,
    parse_body,
    validate_message,
)
from .attributes import propagate_attributes
from .interceptor import (
    MessageDecodingInterceptor,
    RequestContext,
    format_validation_error,
)
from .routing import PubSubRoute, StarletteRequestContext, pubsub_route_class
from .models import (
    PubSubMessage,
    DecodedEnvelope,
    DecodeFailure,
    DecodeResult,
    BadRequestBody,
)
from .schema import FieldRule, SchemaViolation, MESSAGE_RULES, is_base64
from .config import Settings, get_settings
from .logging import (
    configure_logging,
    logging_context,
    PipelineTimer,
)
from .errors import (
    PubSubInterceptorError,
    EnvelopeValidationError,
    StructuralError,
    SchemaValidationError,
)

__all__ = [
    # Version
    '__version__',
    # Decoding
    'EnvelopeDecoder',
    'decode_data',
    'extract_message',
    'parse_body',
    'validate_message',
    'propagate_attributes',
    # Interceptor
    'MessageDecodingInterceptor',
    'RequestContext',
    'format_validation_error',
    # FastAPI integration
    'PubSubRoute',
    'StarletteRequestContext',
    'pubsub_route_class',
    # Models
    'PubSubMessage',
    'DecodedEnvelope',
    'DecodeFailure',
    'DecodeResult',
    'BadRequestBody',
    # Schema
    'FieldRule',
    'SchemaViolation',
    'MESSAGE_RULES',
    'is_base64',
    # Config
    'Settings',
    'get_settings',
    # Logging
    'configure_logging',
    'logging_context',
    'PipelineTimer',
    # Errors
    'PubSubInterceptorError',
    'EnvelopeValidationError',
    'StructuralError',
    'SchemaValidationError',
]
