"""Edge case tests for emphasis and strikethrough next to subscripts.

These tests exercise the delimiter stack with subscript nodes, literal
characters and line breaks mixed into the token stream.
"""

import pytest

from subtilde import Markdown


class TestEmphasis:
    """CommonMark emphasis through the full pipeline."""

    @pytest.fixture
    def md(self) -> Markdown:
        return Markdown(plugins=["all"])

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("*a*", "<em>a</em>"),
            ("_a_", "<em>a</em>"),
            ("**a**", "<strong>a</strong>"),
            ("***a***", "<em><strong>a</strong></em>"),
            ("*foo**bar*", "<em>foo**bar</em>"),
            ("**a*", "*<em>a</em>"),
            ("** a**", "** a**"),
            ("snake_case_name", "snake_case_name"),
            ("\\*not\\*", "*not*"),
        ],
    )
    def test_cases(self, md: Markdown, source: str, expected: str) -> None:
        assert md(source) == expected

    def test_across_soft_break(self, md: Markdown) -> None:
        assert md("*a\nb*") == "<em>a\nb</em>"


class TestMixedWithSubscript:
    """Subscripts sit inside and beside delimiter spans."""

    @pytest.fixture
    def md(self) -> Markdown:
        return Markdown(plugins=["all"])

    def test_subscript_inside_emphasis(self, md: Markdown) -> None:
        assert md("*x~2~*") == "<em>x<sub>2</sub></em>"

    def test_subscript_then_emphasis(self, md: Markdown) -> None:
        assert md("H~2~O is *wet*") == "H<sub>2</sub>O is <em>wet</em>"

    def test_strikethrough_inside_strong(self, md: Markdown) -> None:
        assert md("**~~a~~**") == "<strong><del>a</del></strong>"

    def test_spaced_tilde_falls_to_strikethrough(self, md: Markdown) -> None:
        assert md("*a ~b~*") == "<em>a <del>b</del></em>"

    def test_emphasis_markers_inside_subscript_are_text(self, md: Markdown) -> None:
        assert md("x~*2*~") == "x<sub>*2*</sub>"

    def test_escaped_tilde_is_content(self, md: Markdown) -> None:
        assert md("x~a\\~b~") == "x<sub>a~b</sub>"


class TestStrikethroughOnly:
    """Strikethrough without the subscript plugin."""

    @pytest.fixture
    def md(self) -> Markdown:
        return Markdown(plugins=["strikethrough"])

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("~~a~~", "<del>a</del>"),
            ("~a~", "<del>a</del>"),
            ("H~2~O", "H<del>2</del>O"),
            ("~~~a~~~", "~~~a~~~"),
            ("~~a~", "~<del>a</del>"),
        ],
    )
    def test_cases(self, md: Markdown, source: str, expected: str) -> None:
        assert md(source) == expected
