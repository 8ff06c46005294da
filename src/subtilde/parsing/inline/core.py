"""Core inline parsing for subtilde.

Parsing happens in three phases:

1. Scan: each line is decoded (escapes and entities resolved) and scanned
   once, left to right. At every non-literal trigger character the rules
   registered for it are tried in priority order; the first match
   advances the cursor past what it consumed. Subscripts are complete
   nodes after this phase. Emphasis and strikethrough leave delimiter
   tokens behind.
2. Match: delimiter tokens are paired across the whole text.
3. Build: tokens and pairings become the inline AST.

Thread Safety:
InlineParser holds only its rule table, which is immutable. One instance
may parse many texts, from any number of threads.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from subtilde.config import get_parse_config
from subtilde.location import SourceLocation
from subtilde.nodes import (
    Emphasis,
    Inline,
    LineBreak,
    SoftBreak,
    Strikethrough,
    Strong,
    Text,
)
from subtilde.parsing.inline.delimiters import process_delimiters
from subtilde.parsing.inline.match_registry import DelimiterMatch, MatchRegistry
from subtilde.parsing.inline.tokens import (
    DelimiterToken,
    HardBreakToken,
    InlineToken,
    NodeToken,
    SoftBreakToken,
    TextToken,
)
from subtilde.parsing.line import DecodedLine, LineBuffer, decode_line

if TYPE_CHECKING:
    from subtilde.parsing.inline.rules import InlineRuleTable


class InlineParser:
    """Single-pass inline parser driven by a priority-ordered rule table.

    Usage:
        >>> parser = InlineParser()  # rules from the active ParseConfig
        >>> [type(node).__name__ for node in parser.parse("*hi* there")]
        ['Emphasis', 'Text']

    """

    __slots__ = ("_rules", "_source_file")

    def __init__(
        self,
        rules: InlineRuleTable | None = None,
        *,
        source_file: str | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            rules: Rule table to use. Defaults to the rules of the active
                ParseConfig (see subtilde.config).
            source_file: Optional source file path recorded in locations.
        """
        self._rules = rules if rules is not None else get_parse_config().inline_rules
        self._source_file = source_file

    @property
    def rules(self) -> InlineRuleTable:
        return self._rules

    def parse(self, source: str) -> tuple[Inline, ...]:
        """Parse inline Markdown into a tuple of inline nodes."""
        if not source:
            return ()
        tokens = self.tokenize(source)
        registry = process_delimiters(tokens)
        return self._build_inline_ast(tokens, registry)

    # =========================================================================
    # Phase 1: scan
    # =========================================================================

    def tokenize(self, source: str) -> list[InlineToken]:
        """Scan every line of ``source`` into a flat token list."""
        tokens: list[InlineToken] = []
        raw_lines = source.split("\n")
        last_index = len(raw_lines) - 1

        for index, raw in enumerate(raw_lines):
            line = decode_line(raw, lineno=index + 1, source_file=self._source_file)

            # Continuation lines lose their leading spaces
            start = 0
            if index > 0:
                while (
                    start < len(line)
                    and line.text[start] == " "
                    and start not in line.literal
                ):
                    start += 1

            if index == last_index:
                self._tokenize_line(line, start, tokens)
                break

            end, hard = _content_end(line)
            self._tokenize_line(line.truncated(end), start, tokens)
            location = line.location(end, len(line))
            tokens.append(HardBreakToken(location) if hard else SoftBreakToken(location))

        return tokens

    def _tokenize_line(self, line: DecodedLine, pos: int, tokens: list[InlineToken]) -> None:
        """Scan one decoded line from ``pos`` to its end."""
        rules = self._rules
        triggers = rules.triggers
        text = line.text
        literal = line.literal
        text_len = len(text)
        tokens_append = tokens.append

        while pos < text_len:
            char = text[pos]

            if char in triggers and pos not in literal:
                block = LineBuffer(line, pos)
                for rule in rules.rules_for(char):
                    match = rule.parse(block)
                    if match is not None:
                        tokens_append(match.token)
                        pos += match.consumed
                        break
                else:
                    # No rule claimed it: the trigger is ordinary text
                    tokens_append(TextToken(char, block.location(0, 1)))
                    pos += 1
                continue

            text_start = pos
            pos += 1
            while pos < text_len and (text[pos] not in triggers or pos in literal):
                pos += 1
            tokens_append(TextToken(text[text_start:pos], line.location(text_start, pos)))

    # =========================================================================
    # Phase 3: build
    # =========================================================================

    def _build_inline_ast(
        self,
        tokens: list[InlineToken],
        registry: MatchRegistry,
        start: int = 0,
        end: int | None = None,
    ) -> tuple[Inline, ...]:
        """Build AST from tokens and delimiter pairings.

        Works on index bounds rather than slices. Registry indices are
        token-list indices.

        Args:
            tokens: Token list from tokenize().
            registry: Pairings from process_delimiters().
            start: Start index in tokens (inclusive).
            end: End index in tokens (exclusive). Default len(tokens).

        Returns:
            Tuple of Inline nodes.
        """
        if end is None:
            end = len(tokens)

        result: list[Inline] = []
        idx = start

        while idx < end:
            token = tokens[idx]

            match token:
                case TextToken(content=content, location=location):
                    _append_text(result, content, location)
                    idx += 1

                case NodeToken(node=node):
                    result.append(node)
                    idx += 1

                case HardBreakToken(location=location):
                    result.append(LineBreak(location=location))
                    idx += 1

                case SoftBreakToken(location=location):
                    result.append(SoftBreak(location=location))
                    idx += 1

                case DelimiterToken() as delimiter:
                    idx = self._build_delimited(tokens, registry, delimiter, idx, end, result)

                case _:
                    idx += 1

        return _merge_text(result)

    def _build_delimited(
        self,
        tokens: list[InlineToken],
        registry: MatchRegistry,
        token: DelimiterToken,
        idx: int,
        end: int,
        result: list[Inline],
    ) -> int:
        """Emit the span(s) opened by ``token`` at ``idx``, or its leftover characters.

        Returns the index to continue from.
        """
        delim_char = token.char
        location = token.location

        all_matches = registry.get_matches_for_opener(idx)
        if not all_matches or all_matches[0].closer_idx <= idx:
            remaining = registry.remaining_count(idx, token.run_length)
            if remaining > 0:
                _append_text(result, delim_char * remaining, location)
            return idx + 1

        # Innermost (nearest closer) first: __foo_ bar_ opens twice from one run
        sorted_matches = sorted(all_matches, key=lambda m: m.closer_idx)
        consumed = sum(m.match_count for m in all_matches)
        opener_remaining = token.run_length - consumed
        if opener_remaining > 0:
            _append_text(result, delim_char * opener_remaining, location)

        accumulated: tuple[Inline, ...] = ()
        boundary = idx + 1
        for match_info in sorted_matches:
            closer_idx = match_info.closer_idx
            if boundary < closer_idx:
                segment = self._build_inline_ast(tokens, registry, boundary, closer_idx)
            else:
                segment = ()
            accumulated = (_wrap(delim_char, match_info, accumulated + segment, location),)
            boundary = closer_idx + 1

        result.extend(accumulated)

        outermost_idx = sorted_matches[-1].closer_idx
        if outermost_idx < end:
            closer = tokens[outermost_idx]
            if isinstance(closer, DelimiterToken):
                if len({m.closer_idx for m in sorted_matches}) == 1:
                    # A closer may be shared by several openers (*foo *bar**)
                    closer_remaining = registry.remaining_count(outermost_idx, closer.run_length)
                else:
                    closer_remaining = closer.run_length - sorted_matches[-1].match_count
                if closer_remaining > 0:
                    _append_text(result, delim_char * closer_remaining, closer.location)

        return outermost_idx + 1


def _wrap(
    delim_char: str,
    match_info: DelimiterMatch,
    children: tuple[Inline, ...],
    location: SourceLocation | None,
) -> Inline:
    location = location or _UNKNOWN
    if delim_char == "~":
        return Strikethrough(location=location, children=children)
    if match_info.match_count == 2:
        return Strong(location=location, children=children)
    return Emphasis(location=location, children=children)


def _append_text(result: list[Inline], content: str, location: SourceLocation | None) -> None:
    result.append(Text(location=location or _UNKNOWN, content=content))


def _merge_text(nodes: list[Inline]) -> tuple[Inline, ...]:
    """Join each run of adjacent Text nodes into one node, in one pass."""
    merged: list[Inline] = []
    run: list[Text] = []
    for node in nodes:
        if isinstance(node, Text):
            run.append(node)
            continue
        _flush_text(run, merged)
        merged.append(node)
    _flush_text(run, merged)
    return tuple(merged)


def _flush_text(run: list[Text], merged: list[Inline]) -> None:
    if len(run) == 1:
        merged.append(run[0])
    elif run:
        location = run[0].location.span_to(run[-1].location)
        merged.append(Text(location=location, content="".join(text.content for text in run)))
    run.clear()


def _content_end(line: DecodedLine) -> tuple[int, bool]:
    """Find where a non-final line's content stops, and whether it ends hard.

    A trailing unescaped backslash, or two or more trailing spaces, make a
    hard break. Trailing spaces are never part of the content.
    """
    text = line.text
    end = len(text)
    if end and text[end - 1] == "\\" and (end - 1) not in line.literal:
        return end - 1, True
    while end and text[end - 1] == " " and (end - 1) not in line.literal:
        end -= 1
    return end, len(text) - end >= 2


_UNKNOWN = SourceLocation.unknown()
