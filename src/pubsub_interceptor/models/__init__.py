"""
Data models for the Pub/Sub message decoding interceptor.
"""

from .envelope import PubSubMessage, DecodedEnvelope, DecodeFailure, DecodeResult
from .responses import BadRequestBody

__all__ = [
    'PubSubMessage',
    'DecodedEnvelope',
    'DecodeFailure',
    'DecodeResult',
    'BadRequestBody',
]
