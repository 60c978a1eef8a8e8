"""
Declarative field rules for the Pub/Sub message object.

Each rule names a field, a constraint, a predicate and a message template.
Rules are evaluated exhaustively so every violation on a message is
reported together rather than only the first one.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

_NOT_BASE64 = re.compile(r'[^A-Z0-9+/=]', re.IGNORECASE)

# Sentinel for "field not present", distinct from an explicit null
MISSING = object()


def is_base64(value: Any) -> bool:
    """
    Check that value is a standard-alphabet, padded base64 string.

    The length must be a multiple of four and padding may only appear as the
    last one or two characters. The empty string is accepted.
    """
    if not isinstance(value, str):
        return False
    length = len(value)
    if length % 4 != 0 or _NOT_BASE64.search(value):
        return False
    first_padding = value.find('=')
    return (
        first_padding == -1
        or first_padding == length - 1
        or (first_padding == length - 2 and value[-1] == '=')
    )


def to_json(value: Any) -> str:
    """Compact JSON rendering used in error bodies."""
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=str)


def describe_value(value: Any) -> str:
    """Render a value for a diagnostic message: strings verbatim, anything else as JSON."""
    if isinstance(value, str):
        return value
    return to_json(value)


@dataclass(frozen=True)
class FieldRule:
    """A single (field, constraint) check on the message object."""

    field: str
    constraint: str
    predicate: Callable[[Any], bool]
    message: str

    def describe(self) -> str:
        return self.message.format(field=self.field)


@dataclass
class SchemaViolation:
    """
    One field that failed one or more constraints.

    `target` is a snapshot of the whole object that was validated, and
    `value` is MISSING when the field was absent.
    """

    target: dict[str, Any]
    property: str
    constraints: dict[str, str]
    value: Any = MISSING
    children: list['SchemaViolation'] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with keys in target, value, property, children, constraints order."""
        data: dict[str, Any] = {'target': self.target}
        if self.value is not MISSING:
            data['value'] = self.value
        data['property'] = self.property
        data['children'] = [child.to_dict() for child in self.children]
        data['constraints'] = self.constraints
        return data

    def to_json(self) -> str:
        return to_json(self.to_dict())


MESSAGE_RULES: tuple[FieldRule, ...] = (
    FieldRule(
        field='data',
        constraint='isBase64',
        predicate=is_base64,
        message='{field} must be base64 encoded',
    ),
)


def validate_fields(
    obj: Mapping[str, Any],
    rules: Sequence[FieldRule] = MESSAGE_RULES,
) -> list[SchemaViolation]:
    """
    Evaluate every rule against obj and collect the violations.

    Failed constraints on the same field are grouped into one violation,
    in rule order.
    """
    target = dict(obj)
    violations: dict[str, SchemaViolation] = {}

    for rule in rules:
        value = obj.get(rule.field, MISSING)
        if value is not MISSING and rule.predicate(value):
            continue
        violation = violations.get(rule.field)
        if violation is None:
            violation = SchemaViolation(
                target=target,
                property=rule.field,
                constraints={},
                value=value,
            )
            violations[rule.field] = violation
        violation.constraints[rule.constraint] = rule.describe()

    return list(violations.values())
