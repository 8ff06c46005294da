"""Source location tracking for AST nodes.

Positions refer to the raw source text, before escape and entity
resolution, so a node built from ``&#x1f7af;`` points at the whole
reference rather than at the single decoded character.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for debugging and tooling.

    Line numbers are 1-indexed; column offsets are 0-indexed positions in
    the raw line.

    Attributes:
        lineno: Line number (1-indexed)
        col_offset: Starting column in the raw line
        end_col_offset: Ending column (exclusive), when known
        source_file: Source file path (optional)

    Examples:
        >>> loc = SourceLocation(lineno=1, col_offset=1, end_col_offset=4)
        >>> str(loc)
        '1:1'

    """

    lineno: int
    col_offset: int
    end_col_offset: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location as "file.md:10:5" or "10:5"."""
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    def span_to(self, end: SourceLocation) -> SourceLocation:
        """Create a location running from this start to the end of ``end``."""
        return SourceLocation(
            lineno=self.lineno,
            col_offset=self.col_offset,
            end_col_offset=end.end_col_offset if end.end_col_offset is not None else end.col_offset,
            source_file=self.source_file,
        )

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Create a placeholder location for synthetic nodes."""
        return cls(lineno=0, col_offset=0)
