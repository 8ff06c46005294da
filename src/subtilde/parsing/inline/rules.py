"""Inline rules and the priority-ordered rule table.

An inline rule is offered the line buffer whenever the scan reaches one of
its trigger characters. It either returns an InlineMatch (a token plus the
number of characters consumed) or None, in which case the next rule for
that character is tried. When every rule declines, the scanner emits the
character as literal text.

Rules are ordered by priority, lower values first (code spans at 100 and
emphasis at 500 in the usual numbering). Ties keep registration order.

Thread Safety:
Rules are stateless and InlineRuleTable is immutable. Both may be shared
across threads.

"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

from subtilde.parsing.inline.delimiters import scan_delimiter

if TYPE_CHECKING:
    from subtilde.parsing.inline.tokens import InlineToken
    from subtilde.parsing.line import LineBuffer

EMPHASIS_PRIORITY = 500


class InlineMatch(NamedTuple):
    """Successful rule result.

    Attributes:
        token: Token appended to the inline token stream.
        consumed: Characters to advance past, always at least one.

    """

    token: InlineToken
    consumed: int


@runtime_checkable
class InlineRule(Protocol):
    """Protocol for inline rules.

    Rules must be stateless: one instance serves every parse.

    """

    @property
    def name(self) -> str:
        """Rule identifier."""
        ...

    @property
    def triggers(self) -> frozenset[str]:
        """Characters that cause the scanner to offer this rule a position."""
        ...

    def parse(self, block: LineBuffer) -> InlineMatch | None:
        """Try to match at the cursor; None leaves the cursor untouched."""
        ...


@dataclass(frozen=True, slots=True)
class Prioritized[T]:
    """A value with its registration priority (lower runs first)."""

    value: T
    priority: int


class InlineRuleTable:
    """Immutable mapping of trigger character to priority-ordered rules.

    Usage:
        >>> table = InlineRuleTable([Prioritized(EmphasisRule(), 500)])
        >>> [rule.name for rule in table.rules_for("*")]
        ['emphasis']

    """

    __slots__ = ("_entries", "_by_trigger", "_triggers")

    def __init__(self, entries: Iterable[Prioritized[InlineRule]] = ()) -> None:
        # sorted() is stable, so equal priorities keep registration order
        ordered = tuple(sorted(entries, key=lambda entry: entry.priority))
        by_trigger: dict[str, list[InlineRule]] = {}
        for entry in ordered:
            for char in entry.value.triggers:
                by_trigger.setdefault(char, []).append(entry.value)

        self._entries = ordered
        self._by_trigger = {char: tuple(rules) for char, rules in by_trigger.items()}
        self._triggers = frozenset(self._by_trigger)

    def rules_for(self, char: str) -> tuple[InlineRule, ...]:
        """Rules triggered by ``char``, in the order they are attempted."""
        return self._by_trigger.get(char, ())

    def with_rule(self, rule: InlineRule, priority: int) -> InlineRuleTable:
        """Return a new table with ``rule`` added at ``priority``."""
        return InlineRuleTable((*self._entries, Prioritized(rule, priority)))

    @property
    def triggers(self) -> frozenset[str]:
        return self._triggers

    @property
    def entries(self) -> tuple[Prioritized[InlineRule], ...]:
        return self._entries

    @property
    def names(self) -> tuple[str, ...]:
        """Rule names in attempt order."""
        return tuple(entry.value.name for entry in self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        listed = ", ".join(f"{e.value.name}@{e.priority}" for e in self._entries)
        return f"InlineRuleTable({listed})"


class EmphasisRule:
    """Delimiter runs of ``*`` and ``_``, paired later into em/strong."""

    __slots__ = ()

    @property
    def name(self) -> str:
        return "emphasis"

    @property
    def triggers(self) -> frozenset[str]:
        return frozenset("*_")

    def parse(self, block: LineBuffer) -> InlineMatch:
        token = scan_delimiter(block)
        return InlineMatch(token, token.run_length)


# Rules every parse gets, with or without plugins
CORE_INLINE_RULES = InlineRuleTable((Prioritized(EmphasisRule(), EMPHASIS_PRIORITY),))
