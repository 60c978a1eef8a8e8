"""
Tests for the errors module.
"""

from pubsub_interceptor.errors import (
    EnvelopeValidationError,
    PubSubInterceptorError,
    SchemaValidationError,
    StructuralError,
)
from pubsub_interceptor.schema import validate_fields


class TestErrorHierarchy:
    """Test error class hierarchy."""

    def test_base_error_with_context(self):
        error = PubSubInterceptorError("Something went wrong", context={"value_type": "str"})

        assert error.message == "Something went wrong"
        assert error.context == {"value_type": "str"}
        assert str(error) == "Something went wrong | context={'value_type': 'str'}"

    def test_base_error_without_context(self):
        error = PubSubInterceptorError("Simple error")

        assert error.context == {}
        assert str(error) == "Simple error"

    def test_error_inheritance(self):
        assert issubclass(StructuralError, EnvelopeValidationError)
        assert issubclass(SchemaValidationError, EnvelopeValidationError)
        assert issubclass(EnvelopeValidationError, PubSubInterceptorError)
        assert not issubclass(StructuralError, SchemaValidationError)


class TestErrorMessages:
    def test_structural_error_has_single_message(self):
        error = StructuralError("Missing message field in request body")

        assert error.messages() == ["Missing message field in request body"]

    def test_schema_error_keeps_all_violations(self):
        violations = validate_fields({"messageId": "1"}) + validate_fields({"data": "%%%%"})

        error = SchemaValidationError(violations)

        assert error.violations == violations
        assert len(error.messages()) == 2
        assert error.message == "Message failed validation on: data, data"
