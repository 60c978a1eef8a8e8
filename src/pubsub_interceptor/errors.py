"""
Custom exceptions for the Pub/Sub message decoding interceptor.

Provides:
- Typed exception hierarchy for envelope validation failures
- Error context preservation for debugging

Only EnvelopeValidationError subclasses are turned into 400 responses;
anything else raised while decoding is left to the web framework.
"""

from typing import Any

from .schema import SchemaViolation


class PubSubInterceptorError(Exception):
    """Base exception for all interceptor errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


# =============================================================================
# Envelope Validation Errors
# =============================================================================


class EnvelopeValidationError(PubSubInterceptorError):
    """Base class for recognized, client-caused envelope failures."""

    def messages(self) -> list[str]:
        """One diagnostic string per violation, as reported to the client."""
        return [self.message]


class StructuralError(EnvelopeValidationError):
    """The envelope's top-level shape is wrong (missing or non-object message)."""

    pass


class SchemaValidationError(EnvelopeValidationError):
    """One or more message fields failed their declared constraints."""

    def __init__(
        self,
        violations: list[SchemaViolation],
        context: dict[str, Any] | None = None,
    ):
        fields = ', '.join(v.property for v in violations)
        super().__init__(f"Message failed validation on: {fields}", context=context)
        self.violations = violations

    def messages(self) -> list[str]:
        return [violation.to_json() for violation in self.violations]
