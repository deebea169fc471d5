"""condeval - A condition evaluation engine for rule-driven gating.

condeval decides whether a single condition holds: given a condition
definition, an operator, the value a rule author configured, and a context of
run-time values, it resolves the value to test and compares the two. It is
the evaluation core behind access-control, discount-eligibility and
fraud-screening rules; combining several conditions into a rule is left to
the caller.

Quick Start:
    >>> from condeval import ConditionDefinition, MatchResult, MatchResultCollection
    >>> cart_total = ConditionDefinition("cart_total", field_type="number", context_key="cart.total")
    >>> cart_total.evaluate(">=", "50", {"cart": {"total": 75}})
    True
    >>> results = MatchResultCollection([MatchResult(rule_id=7, rule_title="Free shipping")])
    >>> results.all_rule_titles()
    ['Free shipping']

Main Components:
    - ConditionDefinition: One evaluable predicate (type, operators, resolver)
    - Comparator: Operator semantics per field type; never raises
    - operators.for_type(): Legal operators for a field type
    - ConditionRegistry / load_conditions(): Register definitions from code or JSON
    - MatchResult / MatchResultCollection: Ordered outcomes of matched rules

Exceptions (configuration time only; evaluation never raises):
    - ConditionConfigError: Invalid condition definition
    - DuplicateConditionError: Condition name registered twice
    - UnknownConditionError: Condition name not registered
    - ConditionLoadError: Condition source could not be loaded
"""

from . import operators
from .comparator import Comparator
from .definition import ConditionDefinition
from .errors import (
    CondEvalError,
    ConditionConfigError,
    ConditionLoadError,
    DuplicateConditionError,
    UnknownConditionError,
)
from .loader import load_conditions
from .log import configure_logging
from .operators import FieldType, Operator
from .registry import ConditionRegistry
from .results import MatchResult, MatchResultCollection
from .settings import CondEvalSettings, get_settings

__all__ = [
    "Comparator",
    "CondEvalError",
    "CondEvalSettings",
    "ConditionConfigError",
    "ConditionDefinition",
    "ConditionLoadError",
    "ConditionRegistry",
    "DuplicateConditionError",
    "FieldType",
    "MatchResult",
    "MatchResultCollection",
    "Operator",
    "UnknownConditionError",
    "configure_logging",
    "get_settings",
    "load_conditions",
    "operators",
]
