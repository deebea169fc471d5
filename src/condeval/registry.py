from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

import structlog

from .definition import ConditionDefinition
from .errors import DuplicateConditionError, UnknownConditionError

logger = structlog.get_logger(__name__)


class ConditionRegistry:
    """Registry mapping condition names to their definitions.

    The registry is the place where condition name uniqueness is enforced.
    Registries are plain instances; create one per condition set rather
    than sharing a process-wide default.

    Example:
        >>> registry = ConditionRegistry()
        >>> registry.register_config("cart_total", {"type": "number", "arg": "cart_total"})
        >>> registry.require("cart_total").evaluate(">=", "50", {"cart_total": 75})
        True
    """

    def __init__(self) -> None:
        """Create an empty condition registry."""
        self._definitions: dict[str, ConditionDefinition] = {}

    def register(self, definition: ConditionDefinition, *, replace: bool = False) -> None:
        """Register a condition definition under its name.

        Args:
            definition: The definition to register.
            replace: Overwrite an existing definition with the same name
                instead of raising.

        Raises:
            DuplicateConditionError: If the name is already registered and
                ``replace`` is false.
        """
        if definition.name in self._definitions and not replace:
            raise DuplicateConditionError(definition.name)
        self._definitions[definition.name] = definition
        logger.debug("condition_registered", condition=definition.name, field_type=definition.field_type)

    def register_config(self, name: str, config: Mapping[str, Any], *, replace: bool = False) -> None:
        """Build a definition with ``ConditionDefinition.from_config()`` and register it.

        Raises:
            ConditionConfigError: If the configuration is invalid.
            DuplicateConditionError: If the name is already registered.
        """
        self.register(ConditionDefinition.from_config(name, config), replace=replace)

    def unregister(self, name: str) -> None:
        """Remove a condition from the registry.

        Notes:
            Does nothing if the name is not registered.
        """
        self._definitions.pop(name, None)

    def get(self, name: str) -> ConditionDefinition | None:
        return self._definitions.get(name)

    def require(self, name: str) -> ConditionDefinition:
        """Return the definition for ``name``.

        Raises:
            UnknownConditionError: If the name is not registered.
        """
        try:
            return self._definitions[name]
        except KeyError:
            raise UnknownConditionError(name) from None

    def names(self) -> list[str]:
        return list(self._definitions)

    def describe(self) -> dict[str, dict[str, Any]]:
        """Return ``to_dict()`` for every registered condition, keyed by name."""
        return {name: d.to_dict() for name, d in self._definitions.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[ConditionDefinition]:
        return iter(self._definitions.values())
