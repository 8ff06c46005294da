"""Match registry for delimiter-run tracking.

Tokens are immutable NamedTuples, so everything the delimiter algorithm
learns (which runs paired up, how many characters each pairing used,
which runs are no longer eligible) is recorded here instead.

Thread Safety:
One MatchRegistry per inline parse; all state is instance-local.

"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class DelimiterMatch:
    """A matched opener/closer pair.

    Attributes:
        opener_idx: Token index of the opening run.
        closer_idx: Token index of the closing run.
        match_count: Delimiter characters used from each side (1 or 2).

    """

    opener_idx: int
    closer_idx: int
    match_count: int


@dataclass(slots=True)
class MatchRegistry:
    """External match state for delimiter tokens.

    Usage:
        registry = MatchRegistry()
        registry.record_match(opener_idx=0, closer_idx=4, count=1)
        registry.remaining_count(0, 1)  # -> 0

    """

    matches: list[DelimiterMatch] = field(default_factory=list)
    consumed: dict[int, int] = field(default_factory=dict)
    deactivated: set[int] = field(default_factory=set)
    _by_opener: dict[int, list[DelimiterMatch]] = field(default_factory=dict)

    def record_match(self, opener_idx: int, closer_idx: int, count: int) -> DelimiterMatch:
        """Record a pairing and charge ``count`` characters to both runs."""
        match = DelimiterMatch(opener_idx, closer_idx, count)
        self.matches.append(match)
        self._by_opener.setdefault(opener_idx, []).append(match)
        self.consumed[opener_idx] = self.consumed.get(opener_idx, 0) + count
        self.consumed[closer_idx] = self.consumed.get(closer_idx, 0) + count
        return match

    def is_active(self, idx: int) -> bool:
        """Whether the run at ``idx`` may still take part in a match."""
        return idx not in self.deactivated

    def deactivate(self, idx: int) -> None:
        self.deactivated.add(idx)

    def remaining_count(self, idx: int, run_length: int) -> int:
        """Characters of the run at ``idx`` not yet used by any match."""
        return run_length - self.consumed.get(idx, 0)

    def get_matches_for_opener(self, idx: int) -> list[DelimiterMatch]:
        """All pairings opened by the run at ``idx``, in recording order.

        ``***text***`` opens twice from the same run (strong, then emphasis).
        """
        return self._by_opener.get(idx, [])
