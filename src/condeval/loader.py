from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from .definition import ConditionDefinition
from .errors import ConditionConfigError, ConditionLoadError, DuplicateConditionError
from .registry import ConditionRegistry

logger = structlog.get_logger(__name__)


def load_conditions(
    source: Any,
    registry: ConditionRegistry | None = None,
    *,
    base_dir: str | None = None,
) -> list[ConditionDefinition]:
    """Load and validate condition definitions from a dict, JSON string, or file path.

    Both shapes are accepted for ``conditions``:

    - a mapping of name to config:
      ``{"conditions": {"cart_total": {"type": "number", "arg": "cart_total"}}}``
    - a list of configs carrying their own ``name``:
      ``{"conditions": [{"name": "cart_total", "type": "number"}]}``

    Args:
        source: Condition source. Can be:
            - A ``dict`` with a ``conditions`` key
            - A JSON string (detected by leading ``{`` after stripping whitespace)
            - A file path (``str`` or ``Path``) to a JSON file
        registry: Optional registry. When given, every loaded definition is
            registered in it (duplicate names are rejected).
        base_dir: Base directory for resolving relative file paths. Only
            used when ``source`` is a relative path string.

    Returns:
        The loaded definitions, in source order.

    Raises:
        ConditionLoadError: If the source cannot be loaded, parsed, or fails
            validation. Wraps underlying ``json.JSONDecodeError``,
            ``OSError``, or ``ConditionConfigError`` exceptions.

    Examples:
        >>> [d.name for d in load_conditions({"conditions": {"country": {"type": "select"}}})]
        ['country']

        >>> load_conditions("conditions/checkout.json", base_dir="/app/config")
        [ConditionDefinition(...)]
    """
    try:
        if isinstance(source, (str, Path)):
            text = str(source)
            if text.strip().startswith("{"):
                data = json.loads(text)
            else:
                path = Path(text)
                if not path.is_absolute() and base_dir:
                    path = Path(base_dir) / path
                data = json.loads(path.read_text(encoding="utf-8"))
        elif isinstance(source, Mapping):
            data = source
        else:
            raise ConditionLoadError(f"Unsupported condition source type: {type(source).__name__}")

        if not isinstance(data, Mapping):
            raise ConditionLoadError("condition source must be a JSON object")
        entries = data.get("conditions") or {}

        definitions: list[ConditionDefinition] = []
        if isinstance(entries, Mapping):
            for name, config in entries.items():
                definitions.append(ConditionDefinition.from_config(name, config))
        elif isinstance(entries, list):
            for config in entries:
                if not isinstance(config, Mapping):
                    raise ConditionConfigError("condition entry must be an object")
                definitions.append(ConditionDefinition.from_config(config.get("name") or "", config))
        else:
            raise ConditionLoadError("'conditions' must be an object or a list")

        if registry is not None:
            # Check every name first so a failed load leaves the registry untouched.
            seen: set[str] = set()
            for definition in definitions:
                if definition.name in registry or definition.name in seen:
                    raise DuplicateConditionError(definition.name)
                seen.add(definition.name)
            for definition in definitions:
                registry.register(definition)
    except (json.JSONDecodeError, OSError, ConditionConfigError) as exc:
        raise ConditionLoadError(str(exc)) from exc

    logger.debug("conditions_loaded", count=len(definitions))
    return definitions
