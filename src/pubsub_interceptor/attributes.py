"""Copy Pub/Sub message attributes into request headers."""

from collections.abc import Mapping, MutableMapping
from typing import Any

import structlog

from .schema import describe_value

logger = structlog.get_logger(__name__)

DEFAULT_HEADER_PREFIX = 'x-pubsub-'


def attribute_header_name(key: str, prefix: str = DEFAULT_HEADER_PREFIX) -> str:
    return f"{prefix}{key}"


def propagate_attributes(
    attributes: Any,
    headers: MutableMapping[str, str],
    prefix: str = DEFAULT_HEADER_PREFIX,
) -> None:
    """
    Set one `<prefix><key>` header per attribute.

    Missing, null and empty attributes are a no-op. Existing headers with the
    same name are overwritten. Keys are not sanitized; the header sink
    decides what names and values it accepts.
    """
    if attributes is None:
        return
    if not isinstance(attributes, Mapping):
        logger.warning(
            'attributes.skipped',
            reason='not_a_mapping',
            attributes_type=type(attributes).__name__,
        )
        return

    for key, value in attributes.items():
        headers[attribute_header_name(str(key), prefix)] = describe_value(value)
