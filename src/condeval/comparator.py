from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import tzinfo
from functools import lru_cache
from operator import eq, ge, gt, le, lt, ne
from typing import Any

import structlog

from .dates import parse_date, parse_time
from .network import EmailAddress, ip_matches, normalize_patterns
from .operators import COLLECTION_TYPES, FieldType
from .settings import default_timezone
from .values import (
    is_empty,
    loose_equal,
    parse_bool,
    to_float,
    to_str,
    to_str_list,
)

logger = structlog.get_logger(__name__)

_RELATIONS: dict[str, Callable[[Any, Any], bool]] = {
    "==": eq,
    "!=": ne,
    ">": gt,
    "<": lt,
    ">=": ge,
    "<=": le,
}

_TIME_RELATIONS = {op: _RELATIONS[op] for op in ("==", "!=", ">")}

_TAG_TESTS: dict[str, Callable[[str, str], bool]] = {
    "exact": lambda value, tag: value == tag,
    "contains": lambda value, tag: tag in value,
    "starts": str.startswith,
    "ends": str.endswith,
}

_REGEX_BRACKETS = {"(": ")", "[": "]", "{": "}", "<": ">"}
_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": 0,
    "D": 0,
    "A": 0,
}


@dataclass(frozen=True)
class Comparator:
    """Decides whether a run-time value satisfies a configured value.

    The comparator is stateless and immutable, so one instance can be shared
    across threads. ``compare()`` routes on the operator prefix first
    (``email_*``, ``ip_*``), then on the field type:

    ==========================  ================================
    Field type                  Comparison family
    ==========================  ================================
    number, number_unit         ``compare_numeric``
    text_unit, unknown types    ``compare_text``
    tags                        ``compare_tags``
    boolean                     ``compare_boolean``
    date                        ``compare_date``
    time                        ``compare_time``
    select                      collection if multiple, else equality
    post, term, user, ajax      ``compare_collection``
    ==========================  ================================

    Every method returns a ``bool`` and never raises. Unsupported operators
    and unparseable input resolve to ``False``, or to ``True`` for the
    ``*_not_match`` operators when there is nothing to match.

    Attributes:
        field_type: The field type tag of the condition being compared.
        multiple: Whether the condition accepts several values (only
            changes behavior for ``select``).
        tz: Timezone that defines "midnight" for date comparisons.
            Defaults to ``CondEvalSettings.timezone`` (local time if unset).

    Example:
        >>> Comparator("number").compare(">=", "3", "3")
        True
        >>> Comparator("text").compare("contains", "WORLD", "hello world")
        True
    """

    field_type: str = FieldType.TEXT.value
    multiple: bool = False
    tz: tzinfo | None = field(default_factory=default_timezone, compare=False, repr=False)

    def compare(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """Compare a run-time value against a configured value.

        Args:
            operator: Operator identifier (e.g. ``">="``, ``"contains"``,
                ``"ip_match"``).
            user_value: The value configured by the rule author.
            compare_value: The run-time value being tested.

        Returns:
            bool: Whether the condition holds.
        """
        operator = to_str(operator)
        try:
            if operator.startswith("email_"):
                return self.compare_email(operator, user_value, compare_value)
            if operator.startswith("ip_"):
                return self.compare_ip(operator, user_value, compare_value)
            return self._compare_by_type(operator, user_value, compare_value)
        except Exception:  # noqa: BLE001
            logger.warning(
                "comparison_failed",
                operator=operator,
                field_type=self.field_type,
                exc_info=True,
            )
            return operator.endswith("_not_match")

    def _compare_by_type(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        kind = FieldType.parse(self.field_type)
        if kind in (FieldType.NUMBER, FieldType.NUMBER_UNIT):
            return self.compare_numeric(operator, user_value, compare_value)
        if kind is FieldType.TAGS:
            return self.compare_tags(operator, user_value, compare_value)
        if kind is FieldType.BOOLEAN:
            return self.compare_boolean(operator, compare_value)
        if kind is FieldType.DATE:
            return self.compare_date(operator, user_value, compare_value)
        if kind is FieldType.TIME:
            return self.compare_time(operator, user_value, compare_value)
        if kind is FieldType.SELECT:
            if self.multiple:
                return self.compare_collection(operator, user_value, compare_value)
            return self.compare_equality(operator, user_value, compare_value)
        if kind in COLLECTION_TYPES:
            return self.compare_collection(operator, user_value, compare_value)
        return self.compare_text(operator, user_value, compare_value)

    def compare_numeric(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """Numeric comparison; operators ``== != > < >= <=``.

        Both sides are coerced with ``to_float()`` (non-numeric -> ``0.0``)
        and ``compare_value`` is the left operand.
        """
        relation = _RELATIONS.get(operator)
        if relation is None:
            return self._unsupported("numeric", operator)
        return relation(to_float(compare_value), to_float(user_value))

    def compare_text(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """Text comparison.

        Operators:
            - ``==``/``!=``: case-sensitive exact (in)equality
            - ``contains``/``not_contains``/``starts_with``/``ends_with``:
              case-insensitive tests of ``compare_value`` against ``user_value``
            - ``empty``/``not_empty``: only look at ``compare_value``
            - ``regex``: ``user_value`` is a delimited pattern (``/abc/i``)
              searched for in ``compare_value``; a malformed pattern is a
              non-match
        """
        expected = to_str(user_value)
        actual = to_str(compare_value)

        if operator == "==":
            return actual == expected
        if operator == "!=":
            return actual != expected
        if operator == "contains":
            return expected.lower() in actual.lower()
        if operator == "not_contains":
            return expected.lower() not in actual.lower()
        if operator == "starts_with":
            return actual.lower().startswith(expected.lower())
        if operator == "ends_with":
            return actual.lower().endswith(expected.lower())
        if operator == "empty":
            return is_empty(actual)
        if operator == "not_empty":
            return not is_empty(actual)
        if operator == "regex":
            return _regex_search(expected, actual)
        return self._unsupported("text", operator)

    def compare_equality(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """Single-value equality with loose semantics (``"1" == 1``)."""
        if operator == "==":
            return loose_equal(compare_value, user_value)
        if operator == "!=":
            return not loose_equal(compare_value, user_value)
        return self._unsupported("equality", operator)

    def compare_collection(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """Set-membership comparison; operators ``== any != none all``.

        Both sides are wrapped into lists of strings first.

        - ``==``/``any``: the two sides share at least one element
        - ``!=``/``none``: they share none
        - ``all``: every element of ``user_value`` is in ``compare_value``
        """
        selected = set(to_str_list(user_value))
        actual = set(to_str_list(compare_value))

        if operator in ("==", "any"):
            return bool(selected & actual)
        if operator in ("!=", "none"):
            return not selected & actual
        if operator == "all":
            return selected <= actual
        return self._unsupported("collection", operator)

    def compare_ip(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """IP pattern matching; operators ``ip_match`` and ``ip_not_match``.

        ``user_value`` holds one or more exact, CIDR, or wildcard patterns.
        An empty or unparseable address never matches.
        """
        address = to_str(compare_value).strip()
        if is_empty(address):
            return operator == "ip_not_match"

        matches = ip_matches(address, normalize_patterns(user_value))
        if operator == "ip_match":
            return matches
        if operator == "ip_not_match":
            return not matches
        return self._unsupported("ip", operator)

    def compare_email(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """Email pattern matching; operators ``email_match`` and ``email_not_match``.

        Patterns may be a full address, ``@domain``, ``.tld`` or a domain
        fragment. An empty value, an empty pattern list, or an unparseable
        address all take the "not matched" branch.
        """
        value = to_str(compare_value).strip()
        patterns = normalize_patterns(user_value)
        if is_empty(value) or not patterns:
            return operator == "email_not_match"

        email = EmailAddress.parse(value)
        if email is None:
            logger.debug("email_unparseable", value=value)
            return operator == "email_not_match"

        matches = email.matches_any(patterns)
        if operator == "email_match":
            return matches
        if operator == "email_not_match":
            return not matches
        return self._unsupported("email", operator)

    def compare_tags(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """Tag/pattern matching.

        The operator combines a quantifier (``any_``: at least one tag must
        match, ``none_``: no tag may match) with a match type (``exact``,
        ``contains``, ``starts``, ``ends``). The bare ``any``/``none``
        operators use ``ends``. Tags and ``compare_value`` are compared
        lower-cased.
        """
        if operator in ("any", "none"):
            want_match, match_type = operator == "any", "ends"
        elif operator.startswith("any_"):
            want_match, match_type = True, operator[4:]
        elif operator.startswith("none_"):
            want_match, match_type = False, operator[5:]
        else:
            return self._unsupported("tags", operator)

        test = _TAG_TESTS.get(match_type)
        if test is None:
            return self._unsupported("tags", operator)

        value = to_str(compare_value).lower()
        tags = [t.strip().lower() for t in to_str_list(user_value)]
        matched = any(test(value, tag) for tag in tags if tag)
        return matched if want_match else not matched

    def compare_boolean(self, operator: str, compare_value: Any) -> bool:
        """Boolean comparison; ``yes`` wants true, ``no`` wants false."""
        is_true = parse_bool(compare_value)
        if operator == "yes":
            return is_true
        if operator == "no":
            return not is_true
        return self._unsupported("boolean", operator)

    def compare_date(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """Day-granularity date comparison; operators ``== != > < >= <=``."""
        relation = _RELATIONS.get(operator)
        if relation is None:
            return self._unsupported("date", operator)
        expected = parse_date(user_value, self.tz)
        actual = parse_date(compare_value, self.tz)
        if expected is None or actual is None:
            return False
        return relation(actual, expected)

    def compare_time(self, operator: str, user_value: Any, compare_value: Any) -> bool:
        """Time-of-day comparison; operators ``== != >`` only."""
        relation = _TIME_RELATIONS.get(operator)
        if relation is None:
            return self._unsupported("time", operator)
        expected = parse_time(user_value, self.tz)
        actual = parse_time(compare_value, self.tz)
        if expected is None or actual is None:
            return False
        return relation(actual, expected)

    def _unsupported(self, family: str, operator: str) -> bool:
        logger.debug(
            "operator_unsupported",
            family=family,
            operator=operator,
            field_type=self.field_type,
        )
        return False


def _regex_search(pattern: str, subject: str) -> bool:
    compiled = _compile_delimited(pattern)
    if compiled is None:
        return False
    regex, anchored = compiled
    found = regex.match(subject) if anchored else regex.search(subject)
    return found is not None


@lru_cache(maxsize=256)
def _compile_delimited(pattern: str) -> tuple[re.Pattern[str], bool] | None:
    """Compile a delimited pattern such as ``/^abc$/i`` or ``#a|b#``."""
    pattern = pattern.lstrip()
    if len(pattern) < 2:
        logger.debug("regex_invalid", pattern=pattern, reason="too short")
        return None

    opener = pattern[0]
    if opener.isalnum() or opener == "\\":
        logger.debug("regex_invalid", pattern=pattern, reason="bad delimiter")
        return None
    closer = _REGEX_BRACKETS.get(opener, opener)
    end = pattern.rfind(closer)
    if end <= 0:
        logger.debug("regex_invalid", pattern=pattern, reason="no ending delimiter")
        return None

    body, modifiers = pattern[1:end], pattern[end + 1 :].rstrip()
    flags = 0
    for modifier in modifiers:
        if modifier not in _REGEX_FLAGS:
            logger.debug("regex_invalid", pattern=pattern, reason=f"unknown modifier '{modifier}'")
            return None
        flags |= _REGEX_FLAGS[modifier]

    try:
        return re.compile(body, flags), "A" in modifiers
    except re.error as exc:
        logger.debug("regex_invalid", pattern=pattern, reason=str(exc))
        return None
