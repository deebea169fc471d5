from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class MatchResult:
    """The recorded outcome of one rule matching.

    Created by the orchestration layer once it has decided a rule matched.
    This is a frozen (immutable) dataclass.

    Attributes:
        rule_id: Identifier of the matched rule, if it has one.
        rule_title: Display title of the matched rule, if it has one.
        rule_ref: Opaque back-reference to the originating rule object.
            Ownership stays with the caller; condeval never dereferences it.
        group: The condition group that satisfied the rule, if the caller
            tracks groups.
        matched: Whether the rule matched. ``False`` is used for the
            "no rule matched" sentinel some callers return.
    """

    rule_id: int | None = None
    rule_title: str | None = None
    rule_ref: Any = None
    group: Any = None
    matched: bool = True

    @classmethod
    def from_rule(cls, rule: Any, group: Any = None) -> MatchResult:
        """Build a result from a rule mapping or object.

        ``id``/``title`` are read from mapping keys or attributes, whichever
        the rule provides; the rule itself becomes ``rule_ref``.
        """
        if isinstance(rule, Mapping):
            rule_id, title = rule.get("id"), rule.get("title")
        else:
            rule_id, title = getattr(rule, "id", None), getattr(rule, "title", None)
        return cls(rule_id=rule_id, rule_title=title, rule_ref=rule, group=group)


@dataclass(frozen=True, init=False)
class MatchResultCollection:
    """An ordered, immutable sequence of ``MatchResult``.

    Insertion order is evaluation order. Duplicates are kept. ``filter()``
    returns a new collection and never mutates the receiver.

    Example:
        >>> results = MatchResultCollection([MatchResult(1, "A"), MatchResult(2, "B")])
        >>> results.all_rule_ids()
        [1, 2]
        >>> results.filter(lambda r: r.rule_id != 1).count()
        1
    """

    results: tuple[MatchResult, ...] = ()

    def __init__(self, results: Iterable[MatchResult] = ()) -> None:
        object.__setattr__(self, "results", tuple(results))

    def __iter__(self) -> Iterator[MatchResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def count(self) -> int:
        return len(self.results)

    def has_matches(self) -> bool:
        return bool(self.results)

    def is_empty(self) -> bool:
        return not self.results

    def get_all(self) -> tuple[MatchResult, ...]:
        return self.results

    def get_first(self) -> MatchResult | None:
        """Return the first result, or ``None`` when empty."""
        return self.results[0] if self.results else None

    def get_last(self) -> MatchResult | None:
        """Return the last result, or ``None`` when empty."""
        return self.results[-1] if self.results else None

    def all_rule_ids(self) -> list[int]:
        """Rule ids in order, skipping results without one."""
        return [r.rule_id for r in self.results if r.rule_id is not None]

    def all_rule_titles(self) -> list[str]:
        """Rule titles in order, skipping absent and empty titles."""
        return [r.rule_title for r in self.results if r.rule_title]

    def all_rule_refs(self) -> list[Any]:
        return [r.rule_ref for r in self.results if r.rule_ref is not None]

    def filter(self, predicate: Callable[[MatchResult], bool]) -> MatchResultCollection:
        return MatchResultCollection(r for r in self.results if predicate(r))

    def map(self, fn: Callable[[MatchResult], T]) -> list[T]:
        return [fn(r) for r in self.results]
