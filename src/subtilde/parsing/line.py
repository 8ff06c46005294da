"""Line decoding and the read-only line view handed to inline rules.

Backslash escapes and entity references are resolved here, before any
delimiter scanning. The decoded text keeps a record of which characters
came from an escape or a reference: such characters are literal and never
act as delimiters, so ``H\\~2~O`` and ``H&#126;2~O`` contain no subscript.

Thread Safety:
DecodedLine is frozen; LineBuffer is a read-only view. Both are safe to
share, though each parse creates its own.

"""

from __future__ import annotations

from dataclasses import dataclass
from html.entities import html5

from subtilde.location import SourceLocation
from subtilde.parsing.charsets import ASCII_PUNCTUATION, DIGITS, HEX_DIGITS

_REPLACEMENT_CHAR = "\ufffd"


@dataclass(frozen=True, slots=True)
class DecodedLine:
    """One source line after escape and entity resolution.

    Attributes:
        text: Decoded text of the line (no trailing newline).
        literal: Indices into ``text`` of characters produced by an escape
            or a character reference.
        columns: Raw column of each decoded character, followed by one
            sentinel entry holding the raw line length.
        lineno: Line number (1-indexed).
        source_file: Source file path, if any.

    """

    text: str
    literal: frozenset[int]
    columns: tuple[int, ...]
    lineno: int = 1
    source_file: str | None = None

    def __len__(self) -> int:
        return len(self.text)

    def truncated(self, end: int) -> DecodedLine:
        """Return the line cut at decoded index ``end``."""
        if end >= len(self.text):
            return self
        return DecodedLine(
            text=self.text[:end],
            literal=frozenset(i for i in self.literal if i < end),
            columns=self.columns[: end + 1],
            lineno=self.lineno,
            source_file=self.source_file,
        )

    def location(self, start: int, end: int) -> SourceLocation:
        """Build a SourceLocation for the decoded range [start, end)."""
        return SourceLocation(
            lineno=self.lineno,
            col_offset=self.columns[start],
            end_col_offset=self.columns[end],
            source_file=self.source_file,
        )


def decode_line(raw: str, *, lineno: int = 1, source_file: str | None = None) -> DecodedLine:
    """Resolve escapes and character references in a single raw line.

    Args:
        raw: Raw line text without its newline.
        lineno: Line number used for node locations.
        source_file: Optional source file path.

    Returns:
        DecodedLine with literal markers and raw column mapping.
    """
    if "\\" not in raw and "&" not in raw:
        return DecodedLine(
            text=raw,
            literal=frozenset(),
            columns=tuple(range(len(raw) + 1)),
            lineno=lineno,
            source_file=source_file,
        )

    chars: list[str] = []
    columns: list[int] = []
    literal: set[int] = set()
    pos = 0
    raw_len = len(raw)

    while pos < raw_len:
        char = raw[pos]

        if char == "\\" and pos + 1 < raw_len and raw[pos + 1] in ASCII_PUNCTUATION:
            literal.add(len(chars))
            chars.append(raw[pos + 1])
            columns.append(pos)
            pos += 2
            continue

        if char == "&":
            entity = _try_parse_entity(raw, pos)
            if entity is not None:
                decoded, new_pos = entity
                for decoded_char in decoded:
                    literal.add(len(chars))
                    chars.append(decoded_char)
                    columns.append(pos)
                pos = new_pos
                continue

        chars.append(char)
        columns.append(pos)
        pos += 1

    columns.append(raw_len)
    return DecodedLine(
        text="".join(chars),
        literal=frozenset(literal),
        columns=tuple(columns),
        lineno=lineno,
        source_file=source_file,
    )


def _codepoint_to_char(codepoint: int) -> str:
    if codepoint == 0 or codepoint > 0x10FFFF:
        return _REPLACEMENT_CHAR
    return chr(codepoint)


def _try_parse_entity(text: str, pos: int) -> tuple[str, int] | None:
    """Try to parse an HTML entity reference at position.

    CommonMark 6.2: Entity and numeric character references.
    - Named entities: &amp; &nbsp; &copy; etc.
    - Decimal: &#digits; (1-7 digits)
    - Hexadecimal: &#xhex; or &#Xhex; (1-6 hex digits)

    Returns:
        Tuple of (decoded_text, new_position) if valid, None otherwise.
    """
    text_len = len(text)
    end = pos + 1

    if end < text_len and text[end] == "#":
        end += 1
        if end < text_len and text[end] in "xX":
            end += 1
            digits, base, max_len = HEX_DIGITS, 16, 6
        else:
            digits, base, max_len = DIGITS, 10, 7
        num_start = end
        while end < text_len and text[end] in digits:
            end += 1
        if not 1 <= end - num_start <= max_len:
            return None
        if end >= text_len or text[end] != ";":
            return None
        return _codepoint_to_char(int(text[num_start:end], base)), end + 1

    # Named entity: &name; with an alphanumeric name starting with a letter
    if end < text_len and text[end].isalpha():
        max_end = min(pos + 33, text_len)
        while end < max_end and text[end].isalnum():
            end += 1
        if end < text_len and text[end] == ";":
            decoded = html5.get(text[pos + 1 : end + 1])
            if decoded is None:
                return None
            return decoded, end + 1

    return None


class LineBuffer:
    """Read-only view of a decoded line from the scan cursor onward.

    This is what inline rules see: characters at offsets from the cursor
    (offset 0 is the trigger character), the character just before the
    cursor, and which characters are literal. Nothing is copied; rules
    that need the whole line read ``line.text`` from ``pos``.

    Usage:
        >>> block = LineBuffer(decode_line("H~2~O"), 1)
        >>> block.char_at(1)
        '2'
        >>> block.preceding_char
        'H'

    """

    __slots__ = ("_line", "_pos")

    def __init__(self, line: DecodedLine, pos: int = 0) -> None:
        self._line = line
        self._pos = pos

    @property
    def line(self) -> DecodedLine:
        return self._line

    @property
    def pos(self) -> int:
        return self._pos

    @property
    def preceding_char(self) -> str | None:
        """Decoded character before the cursor, or None at line start."""
        if self._pos == 0:
            return None
        return self._line.text[self._pos - 1]

    def char_at(self, offset: int) -> str:
        """Character ``offset`` places past the cursor, "" past the line end."""
        idx = self._pos + offset
        text = self._line.text
        return text[idx] if idx < len(text) else ""

    def is_literal(self, offset: int) -> bool:
        """Whether the character ``offset`` places past the cursor is literal."""
        return self._pos + offset in self._line.literal

    def location(self, start: int, end: int) -> SourceLocation:
        """Build a SourceLocation for the range [start, end) past the cursor."""
        return self._line.location(self._pos + start, self._pos + end)
