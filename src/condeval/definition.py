from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from . import operators as catalog
from .comparator import Comparator
from .errors import ConditionConfigError
from .operators import FieldType, Operator, OperatorSet
from .values import deep_get

logger = structlog.get_logger(__name__)

Resolver = Callable[[Mapping[str, Any], Any], Any]
"""Type alias for compare-value resolvers.

A resolver takes the evaluation context and the user-configured value and
returns the run-time value to compare against.
"""


@dataclass(frozen=True)
class ConditionDefinition:
    """Describes one evaluable predicate.

    Definitions are created at registration time and are read-only
    afterwards; evaluation never mutates them, so one instance can be shared
    across threads.

    Attributes:
        name: Unique identifier (uniqueness is enforced by the registry).
        label: Display label. Defaults to the title-cased ``name``.
        group: Display group for pickers. Defaults to ``"General"``.
        field_type: Field type tag (``text``, ``number``, ``select``, ...).
            The set is open; unknown tags compare as text.
        multiple: Whether several values can be selected. Switches
            ``select`` from equality to set semantics.
        context_key: Context key the compare value is read from when no
            ``resolver`` is given. Dotted paths reach into nested mappings.
        required_context_keys: Keys that must be present in the context for
            the condition to be evaluable.
        operators: Operator override. When ``None`` the catalog set for
            ``field_type``/``multiple`` is used.
        options: Choices for ``select``-style pickers, or a callable
            returning them. Not consulted during comparison.
        units: Units for ``number_unit``/``text_unit`` pickers, or a
            callable returning them.
        resolver: Computes the compare value from ``(context, user_value)``.
    """

    name: str
    label: str = ""
    group: str = "General"
    field_type: str = FieldType.TEXT.value
    multiple: bool = False
    context_key: str | None = None
    required_context_keys: tuple[str, ...] = ()
    operators: OperatorSet | None = None
    options: Any = field(default=(), compare=False)
    units: Any = field(default=(), compare=False)
    resolver: Resolver | None = field(default=None, compare=False, repr=False)
    _comparator: Comparator = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConditionConfigError("condition requires non-empty 'name'")
        if isinstance(self.required_context_keys, str) or not all(
            isinstance(key, str) for key in self.required_context_keys
        ):
            raise ConditionConfigError(f"condition '{self.name}': 'required_context_keys' must be a list of strings")
        if self.resolver is not None and not callable(self.resolver):
            raise ConditionConfigError(f"condition '{self.name}': 'resolver' must be callable")

        # Frozen dataclass: normalize through object.__setattr__.
        object.__setattr__(self, "field_type", str(getattr(self.field_type, "value", self.field_type)))
        object.__setattr__(self, "required_context_keys", tuple(self.required_context_keys))
        if not self.label:
            object.__setattr__(self, "label", self.name.replace("_", " ").replace("-", " ").title())
        if self.operators is not None:
            object.__setattr__(self, "operators", _normalize_operators(self.name, self.operators))
        object.__setattr__(self, "_comparator", Comparator(self.field_type, self.multiple))

    @classmethod
    def from_config(cls, name: str, config: Mapping[str, Any]) -> ConditionDefinition:
        """Build a definition from a plain configuration mapping.

        Recognized keys mirror the attributes; ``type`` is accepted as an
        alias of ``field_type``, ``arg`` of ``context_key``, ``required_args``
        of ``required_context_keys`` and ``compare_value`` of ``resolver``.
        Unknown keys are ignored.

        Raises:
            ConditionConfigError: If the configuration is invalid.
        """
        if not isinstance(config, Mapping):
            raise ConditionConfigError(f"condition '{name}': config must be a mapping")
        operators = config.get("operators")
        return cls(
            name=config.get("name") or name,
            label=config.get("label") or "",
            group=config.get("group") or "General",
            field_type=config.get("field_type") or config.get("type") or FieldType.TEXT.value,
            multiple=bool(config.get("multiple", False)),
            context_key=config.get("context_key") or config.get("arg"),
            required_context_keys=config.get("required_context_keys") or config.get("required_args") or (),
            operators=operators if operators else None,
            options=config.get("options") or (),
            units=config.get("units") or (),
            resolver=config.get("resolver") or config.get("compare_value"),
        )

    @property
    def has_units(self) -> bool:
        return bool(self.units)

    def get_operators(self) -> OperatorSet:
        """Return the operators this condition accepts, in display order."""
        if self.operators is not None:
            return self.operators
        return catalog.for_type(self.field_type, self.multiple)

    def operator_ids(self) -> tuple[str, ...]:
        return catalog.operator_ids(self.get_operators())

    def supports(self, operator: str) -> bool:
        return operator in self.operator_ids()

    def get_options(self) -> list[Any]:
        return list(self.options() if callable(self.options) else self.options)

    def get_units(self) -> list[Any]:
        return list(self.units() if callable(self.units) else self.units)

    def resolve(self, context: Mapping[str, Any], user_value: Any = None) -> Any:
        """Extract the value to compare from the evaluation context.

        Args:
            context: Run-time values assembled by the host application.
            user_value: The rule author's configured value, passed through
                to resolvers that need it.

        Returns:
            The compare value, or ``None`` if there is no resolver and
            ``context_key`` is unset or missing. A resolver that raises is
            logged and resolves to ``None``.
        """
        if self.resolver is not None:
            try:
                return self.resolver(context, user_value)
            except Exception:  # noqa: BLE001
                logger.warning("resolver_failed", condition=self.name, exc_info=True)
                return None

        if not self.context_key or not isinstance(context, Mapping):
            return None
        if self.context_key in context:
            return context[self.context_key]
        return deep_get(context, self.context_key, default=None)

    def validate(self, context: Mapping[str, Any]) -> bool:
        """Return whether every required key is present in ``context``.

        Only presence is checked; a key mapped to ``None`` counts.
        """
        if not isinstance(context, Mapping):
            return not self.required_context_keys
        return all(key in context for key in self.required_context_keys)

    def compare(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """Delegate to a ``Comparator`` for this definition's field type."""
        return self._comparator.compare(operator, user_value, compare_value)

    def unpack_user_value(self, user_value: Any) -> tuple[Any, dict[str, Any]]:
        """Split a unit-carrying user value into its comparable part.

        ``number_unit`` values of the form ``{"number": 30, "unit": "day"}``
        compare the number and expose ``_number``/``_unit`` to the resolver;
        ``text_unit`` values ``{"text": ..., "unit": ...}`` compare the text
        and expose ``_text``/``_unit``. Other values pass through unchanged.

        Returns:
            ``(value_to_compare, extra_context)``.
        """
        kind = FieldType.parse(self.field_type)
        if not isinstance(user_value, Mapping):
            return user_value, {}
        if kind is FieldType.NUMBER_UNIT:
            number = user_value.get("number")
            return number, {"_unit": user_value.get("unit"), "_number": number}
        if kind is FieldType.TEXT_UNIT:
            text = user_value.get("text")
            return text, {"_unit": user_value.get("unit"), "_text": text}
        return user_value, {}

    def evaluate(self, operator: str, user_value: Any, context: Mapping[str, Any]) -> bool | None:
        """Evaluate this single condition against a context.

        Args:
            operator: Operator identifier.
            user_value: The rule author's configured value.
            context: Run-time values assembled by the host application.

        Returns:
            ``True``/``False`` for the comparison outcome, or ``None`` when
            the context is not a mapping or lacks a required key, so the
            condition cannot be evaluated. Combining several outcomes is left to the caller.
        """
        if not isinstance(context, Mapping) or not self.validate(context):
            logger.debug("condition_not_evaluable", condition=self.name, required=list(self.required_context_keys))
            return None
        value, extra = self.unpack_user_value(user_value)
        scope = {**context, **extra} if extra else context
        compare_value = self.resolve(scope, value)
        return self.compare(operator, value, compare_value)

    def to_dict(self) -> dict[str, Any]:
        """Describe the condition for UI and configuration layers."""
        return {
            "name": self.name,
            "label": self.label,
            "group": self.group,
            "type": self.field_type,
            "multiple": self.multiple,
            "context_key": self.context_key,
            "required_context_keys": list(self.required_context_keys),
            "operators": dict(self.get_operators()),
            "options": self.get_options(),
            "units": self.get_units(),
        }


def _normalize_operators(name: str, operators: Any) -> OperatorSet:
    """Accept ``{id: label}`` mappings, ``Operator`` tuples or bare ids."""
    if isinstance(operators, Mapping):
        return tuple(Operator(str(op_id), str(label)) for op_id, label in operators.items())
    if isinstance(operators, str):
        raise ConditionConfigError(f"condition '{name}': 'operators' must be a mapping or list")
    result = []
    for item in operators:
        if isinstance(item, str):
            result.append(Operator(item, item))
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            result.append(Operator(str(item[0]), str(item[1])))
        else:
            raise ConditionConfigError(f"condition '{name}': invalid operator entry {item!r}")
    return tuple(result)
