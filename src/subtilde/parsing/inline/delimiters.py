"""Delimiter runs for emphasis and strikethrough.

Implements the CommonMark delimiter-run scan (flanking rules) and the
delimiter-stack matching pass.
See: https://spec.commonmark.org/0.31.2/#emphasis-and-strong-emphasis

Matching runs over the whole token list of a text, after every line has
been scanned, so runs pair up across line breaks while subscripts (which
are resolved during the scan) never do.

Thread Safety:
All functions are pure; match state lives in a per-call MatchRegistry.

"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from subtilde.parsing.charsets import (
    EMPHASIS_DELIMITERS,
    is_unicode_punctuation,
    is_unicode_whitespace,
)
from subtilde.parsing.inline.match_registry import MatchRegistry
from subtilde.parsing.inline.tokens import DelimiterToken, InlineToken

if TYPE_CHECKING:
    from subtilde.parsing.line import LineBuffer


def is_left_flanking(before: str, after: str) -> bool:
    """Check if a delimiter run is left-flanking.

    Left-flanking: not followed by whitespace, and either not followed by
    punctuation, or preceded by whitespace or punctuation.
    """
    if is_unicode_whitespace(after):
        return False
    if not is_unicode_punctuation(after):
        return True
    return is_unicode_whitespace(before) or is_unicode_punctuation(before)


def is_right_flanking(before: str, after: str) -> bool:
    """Check if a delimiter run is right-flanking.

    Right-flanking: not preceded by whitespace, and either not preceded by
    punctuation, or followed by whitespace or punctuation.
    """
    if is_unicode_whitespace(before):
        return False
    if not is_unicode_punctuation(before):
        return True
    return is_unicode_whitespace(after) or is_unicode_punctuation(after)


def scan_delimiter(block: LineBuffer) -> DelimiterToken:
    """Scan the delimiter run starting at the cursor.

    The run is every consecutive, non-literal copy of the trigger
    character. Line start and line end count as whitespace.
    """
    char = block.char_at(0)

    run_length = 1
    while block.char_at(run_length) == char and not block.is_literal(run_length):
        run_length += 1

    before = block.preceding_char or ""
    after = block.char_at(run_length)

    left_flanking = is_left_flanking(before, after)
    right_flanking = is_right_flanking(before, after)

    # Underscore runs may not open or close intraword
    if char == "_":
        can_open = left_flanking and (not right_flanking or is_unicode_punctuation(before))
        can_close = right_flanking and (not left_flanking or is_unicode_punctuation(after))
    else:
        can_open = left_flanking
        can_close = right_flanking

    return DelimiterToken(
        char=char,  # type: ignore[arg-type]
        run_length=run_length,
        can_open=can_open,
        can_close=can_close,
        location=block.location(0, run_length),
    )


def process_delimiters(tokens: Sequence[InlineToken]) -> MatchRegistry:
    """Pair delimiter runs into openers and closers.

    Runs only pair with runs of the same character. Each pairing uses two
    characters from both sides when both have at least two left, otherwise
    one. Per-character opener stacks keep the lookup for each closer short.

    Args:
        tokens: Token list produced by the inline scan.

    Returns:
        MatchRegistry holding every pairing.
    """
    registry = MatchRegistry()
    openers: dict[str, list[int]] = {char: [] for char in EMPHASIS_DELIMITERS}

    idx = 0
    tokens_len = len(tokens)
    while idx < tokens_len:
        token = tokens[idx]
        if not isinstance(token, DelimiterToken):
            idx += 1
            continue

        stack = openers[token.char]

        if token.can_close and registry.is_active(idx):
            found = _find_opener(tokens, registry, stack, idx, token)
            if found is None:
                if token.can_open:
                    stack.append(idx)
                else:
                    registry.deactivate(idx)
                idx += 1
                continue

            opener_idx, opener = found
            _pair(tokens, registry, openers, opener_idx, opener, idx, token)
            # A closer with characters left over tries the next opener down
            if registry.remaining_count(idx, token.run_length) == 0:
                idx += 1
            continue

        if token.can_open:
            stack.append(idx)
        idx += 1

    return registry


def _find_opener(
    tokens: Sequence[InlineToken],
    registry: MatchRegistry,
    stack: list[int],
    closer_idx: int,
    closer: DelimiterToken,
) -> tuple[int, DelimiterToken] | None:
    """Search the opener stack, top down, for a run the closer may pair with."""
    closer_remaining = registry.remaining_count(closer_idx, closer.run_length)

    for opener_idx in reversed(stack):
        opener = tokens[opener_idx]
        if not isinstance(opener, DelimiterToken) or not registry.is_active(opener_idx):
            continue
        opener_remaining = registry.remaining_count(opener_idx, opener.run_length)

        # CommonMark "rule of three" for runs that can both open and close
        either_both_ways = (opener.can_open and opener.can_close) or (
            closer.can_open and closer.can_close
        )
        if (
            either_both_ways
            and (opener_remaining + closer_remaining) % 3 == 0
            and (opener_remaining % 3 != 0 or closer_remaining % 3 != 0)
        ):
            continue

        return opener_idx, opener

    return None


def _pair(
    tokens: Sequence[InlineToken],
    registry: MatchRegistry,
    openers: dict[str, list[int]],
    opener_idx: int,
    opener: DelimiterToken,
    closer_idx: int,
    closer: DelimiterToken,
) -> None:
    """Record a pairing and retire every run it encloses."""
    opener_remaining = registry.remaining_count(opener_idx, opener.run_length)
    closer_remaining = registry.remaining_count(closer_idx, closer.run_length)
    use_count = 2 if opener_remaining >= 2 and closer_remaining >= 2 else 1
    registry.record_match(opener_idx, closer_idx, use_count)

    for mid_idx in range(opener_idx + 1, closer_idx):
        if isinstance(tokens[mid_idx], DelimiterToken):
            registry.deactivate(mid_idx)

    for stack in openers.values():
        while stack and stack[-1] > opener_idx:
            stack.pop()

    if registry.remaining_count(opener_idx, opener.run_length) == 0:
        registry.deactivate(opener_idx)
        stack = openers[opener.char]
        if stack and stack[-1] == opener_idx:
            stack.pop()

    if registry.remaining_count(closer_idx, closer.run_length) == 0:
        registry.deactivate(closer_idx)
