"""StringBuilder for O(n) HTML accumulation.

Node renderers write into a shared StringBuilder instead of returning
strings, so a walk over the tree appends fragments in order and joins
them once at the end.

Thread Safety:
StringBuilder instances are local to each render() call.
No shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterable


class StringBuilder:
    """Append-only string accumulator.

    Usage:
        >>> sb = StringBuilder()
        >>> sb.append("<sub>").append("2").append("</sub>")
        >>> sb.build()
        '<sub>2</sub>'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append a string (empty strings are skipped).

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
        return self

    def extend(self, strings: Iterable[str]) -> StringBuilder:
        """Append several strings at once."""
        self._parts.extend(s for s in strings if s)
        return self

    def build(self) -> str:
        """Join all parts into the final string."""
        return "".join(self._parts)

    def __len__(self) -> int:
        """Return number of parts (not total length)."""
        return len(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)
