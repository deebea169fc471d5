"""Operator catalog: which operators are legal for which field type.

The catalog is the single source of truth for operator identifiers. The
``Comparator`` implements every operator ``for_type()`` can return for a
given type, and treats anything else as a non-match.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class FieldType(str, Enum):
    """Closed set of field types the comparator knows how to dispatch on.

    Condition definitions may carry any type string; ``FieldType.parse()``
    maps unrecognized tags to ``TEXT``.
    """

    TEXT = "text"
    TEXT_UNIT = "text_unit"
    NUMBER = "number"
    NUMBER_UNIT = "number_unit"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    TAGS = "tags"
    SELECT = "select"
    POST = "post"
    TERM = "term"
    USER = "user"
    AJAX = "ajax"
    IP = "ip"
    EMAIL = "email"

    @classmethod
    def parse(cls, value: str | FieldType) -> FieldType:
        """Return the matching member, falling back to ``TEXT``."""
        try:
            return cls(value)
        except ValueError:
            return cls.TEXT


COLLECTION_TYPES = frozenset({FieldType.POST, FieldType.TERM, FieldType.USER, FieldType.AJAX})


class Operator(NamedTuple):
    """An operator identifier with its display label."""

    id: str
    label: str


OperatorSet = tuple[Operator, ...]


def _ops(*pairs: tuple[str, str]) -> OperatorSet:
    return tuple(Operator(op_id, label) for op_id, label in pairs)


EQUALITY = _ops(("==", "Is"), ("!=", "Is not"))

NUMERIC = _ops(
    ("==", "Equal to"),
    ("!=", "Not equal to"),
    (">", "Greater than"),
    ("<", "Less than"),
    (">=", "Greater than or equal to"),
    ("<=", "Less than or equal to"),
)

BOOLEAN = _ops(("yes", "Yes"), ("no", "No"))

TEXT = _ops(
    ("==", "Equals"),
    ("!=", "Does not equal"),
    ("contains", "Contains"),
    ("not_contains", "Does not contain"),
    ("starts_with", "Starts with"),
    ("ends_with", "Ends with"),
    ("empty", "Is empty"),
    ("not_empty", "Is not empty"),
)

TEXT_ADVANCED = TEXT + _ops(("regex", "Matches pattern"))

COLLECTION = _ops(("any", "Is any of"), ("none", "Is none of"), ("all", "Is all of"))

COLLECTION_BASIC = COLLECTION[:2]

DATE = _ops(
    ("==", "Is"),
    ("!=", "Is not"),
    (">", "Is after"),
    ("<", "Is before"),
    (">=", "Is on or after"),
    ("<=", "Is on or before"),
)

# The time comparator only implements these three.
TIME = _ops(("==", "Is"), ("!=", "Is not"), (">", "Is after"))

IP = _ops(("ip_match", "Matches"), ("ip_not_match", "Does not match"))

EMAIL = _ops(("email_match", "Matches"), ("email_not_match", "Does not match"))

TAGS = _ops(
    ("any_exact", "Is any of"),
    ("none_exact", "Is none of"),
    ("any_contains", "Contains any of"),
    ("none_contains", "Contains none of"),
    ("any_starts", "Starts with any of"),
    ("none_starts", "Starts with none of"),
    ("any_ends", "Ends with any of"),
    ("none_ends", "Ends with none of"),
)

TAGS_ENDS = _ops(("any_ends", "Ends with any of"), ("none_ends", "Ends with none of"))

CONTAINS = _ops(("==", "Contains"), ("!=", "Does not contain"))

_BY_TYPE: dict[FieldType, OperatorSet] = {
    FieldType.NUMBER: NUMERIC,
    FieldType.NUMBER_UNIT: NUMERIC,
    FieldType.TEXT: TEXT,
    FieldType.TEXT_UNIT: TEXT,
    FieldType.BOOLEAN: BOOLEAN,
    FieldType.DATE: DATE,
    FieldType.TIME: TIME,
    FieldType.IP: IP,
    FieldType.EMAIL: EMAIL,
    FieldType.TAGS: TAGS,
    FieldType.POST: COLLECTION,
    FieldType.TERM: COLLECTION,
    FieldType.USER: COLLECTION,
    FieldType.AJAX: COLLECTION,
}


def for_type(field_type: str | FieldType, multiple: bool = False) -> OperatorSet:
    """Return the ordered operator set for a field type.

    Args:
        field_type: A field type tag. Unknown tags get the ``text`` set.
        multiple: Only consulted for ``select``, which switches from
            equality (``==``/``!=``) to collection operators.

    Returns:
        A tuple of ``Operator(id, label)`` in display order.

    Examples:
        >>> [op.id for op in for_type("select", multiple=True)]
        ['any', 'none', 'all']
        >>> for_type("no-such-type") == for_type("text")
        True
    """
    kind = FieldType.parse(field_type)
    if kind is FieldType.SELECT:
        return COLLECTION if multiple else EQUALITY
    return _BY_TYPE.get(kind, TEXT)


def operator_ids(operators: OperatorSet) -> tuple[str, ...]:
    return tuple(op.id for op in operators)


def get_all() -> dict[str, dict[str, str]]:
    """Return every named operator group as ``{group: {operator_id: label}}``.

    Used by UI and configuration layers that need the full catalog at once.
    """
    groups = {
        "text": TEXT,
        "text_advanced": TEXT_ADVANCED,
        "text_unit": TEXT,
        "number": NUMERIC,
        "number_unit": NUMERIC,
        "boolean": BOOLEAN,
        "date": DATE,
        "time": TIME,
        "ip": IP,
        "email": EMAIL,
        "tags": TAGS,
        "tags_ends": TAGS_ENDS,
        "equality": EQUALITY,
        "contains": CONTAINS,
        "collection": COLLECTION,
        "collection_basic": COLLECTION_BASIC,
    }
    return {name: dict(ops) for name, ops in groups.items()}
