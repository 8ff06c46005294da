"""Character sets and classifiers for inline scanning.

All sets are frozensets for O(1) membership tests and safe sharing.

Reference: CommonMark 0.31.2 specification

"""

import unicodedata

# CommonMark: ASCII punctuation characters (the escapable set)
# https://spec.commonmark.org/0.31.2/#ascii-punctuation-character
ASCII_PUNCTUATION: frozenset[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

# ASCII whitespace for fast-path checks
WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")

DIGITS: frozenset[str] = frozenset("0123456789")

HEX_DIGITS: frozenset[str] = frozenset("0123456789abcdefABCDEF")

# Delimiter characters shared by emphasis and strikethrough runs
EMPHASIS_DELIMITERS: frozenset[str] = frozenset("*_~")

# The single trigger character for subscript and strikethrough
TILDE = "~"


def is_unicode_punctuation(char: str) -> bool:
    """Check if character is Unicode punctuation or symbol (P* or S*).

    CommonMark uses these categories for flanking rules.

    """
    if not char:
        return False
    if char in ASCII_PUNCTUATION:
        return True
    cat = unicodedata.category(char)
    return cat.startswith("P") or cat.startswith("S")


def is_unicode_whitespace(char: str) -> bool:
    """Check if character is Unicode whitespace for flanking rules.

    ASCII whitespace plus category Zs. The empty string (line start or
    line end) counts as whitespace.

    """
    if not char:
        return True
    if char in WHITESPACE:
        return True
    return unicodedata.category(char) == "Zs"


def is_space(char: str) -> bool:
    """Check if a decoded character breaks a subscript span.

    Uses the Unicode White_Space notion (``str.isspace``), which also
    covers NEL and no-break space.

    """
    return char.isspace()
