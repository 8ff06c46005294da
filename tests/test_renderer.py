"""Tests for the HTML renderer, node renderers and attribute filtering."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

import pytest

from subtilde import Markdown, parse, render, transform
from subtilde.errors import RenderError
from subtilde.extensions import ExtensionsBuilder
from subtilde.location import SourceLocation
from subtilde.nodes import Document, Emphasis, LineBreak, Node, SoftBreak, Strong, Subscript, Text
from subtilde.plugins.subscript import SubscriptPlugin, render_subscript
from subtilde.renderers.attributes import GLOBAL_ATTRIBUTE_FILTER, is_allowed, render_attributes
from subtilde.renderers.html import HtmlRenderer, html_escape
from subtilde.stringbuilder import StringBuilder

LOC = SourceLocation(lineno=1, col_offset=0)


def _sub(content: str, attributes: tuple[tuple[str, str], ...] | None = None) -> Subscript:
    return Subscript(location=LOC, children=(Text(location=LOC, content=content),), attributes=attributes)


def _doc(*inlines: Node) -> Document:
    return Document(location=LOC, children=inlines)  # type: ignore[arg-type]


class TestHtmlEscape:
    """html_escape follows CommonMark's escaping set."""

    def test_escapes_markup(self) -> None:
        assert html_escape('<a href="x">&</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"

    def test_single_quote_untouched(self) -> None:
        assert html_escape("it's") == "it's"


class TestCoreRendering:
    """Core kinds render without any plugin."""

    def test_core_kinds(self) -> None:
        doc = _doc(
            Text(location=LOC, content="a<"),
            Emphasis(location=LOC, children=(Text(location=LOC, content="b"),)),
            Strong(location=LOC, children=(Text(location=LOC, content="c"),)),
            SoftBreak(location=LOC),
            LineBreak(location=LOC),
        )
        assert HtmlRenderer().render(doc) == "a&lt;<em>b</em><strong>c</strong>\n<br />\n"

    def test_empty_document(self) -> None:
        assert HtmlRenderer().render(_doc()) == ""

    def test_plugin_kind_without_renderer_raises(self) -> None:
        with pytest.raises(RenderError, match="Subscript"):
            HtmlRenderer().render(_doc(_sub("2")))

    def test_render_inline(self) -> None:
        renderer = HtmlRenderer(node_renderers={Subscript: render_subscript})
        assert renderer.render_inline(_sub("2")) == "<sub>2</sub>"


class TestNodeRenderers:
    """Registered node renderers run on entry and on exit."""

    def test_calls_entering_then_exiting(self) -> None:
        calls: list[bool] = []

        def record(sb: StringBuilder, node: Subscript, entering: bool) -> None:
            calls.append(entering)
            sb.append("[" if entering else "]")

        renderer = HtmlRenderer(node_renderers={Subscript: record})
        assert renderer.render(_doc(_sub("x"))) == "[x]"
        assert calls == [True, False]

    def test_registered_renderer_overrides_core(self) -> None:
        def italic(sb: StringBuilder, node: Emphasis, entering: bool) -> None:
            sb.append("<i>" if entering else "</i>")

        renderer = HtmlRenderer(node_renderers={Emphasis: italic})
        doc = _doc(Emphasis(location=LOC, children=(Text(location=LOC, content="x"),)))
        assert renderer.render(doc) == "<i>x</i>"

    def test_custom_node_kind(self) -> None:
        @dataclass(frozen=True, slots=True)
        class Mark(Node):
            children: tuple[Node, ...]

        def render_mark(sb: StringBuilder, node: Mark, entering: bool) -> None:
            sb.append("<mark>" if entering else "</mark>")

        renderer = HtmlRenderer(node_renderers={Mark: render_mark})
        doc = _doc(Mark(location=LOC, children=(Text(location=LOC, content="hi"),)))
        assert renderer.render(doc) == "<mark>hi</mark>"

    def test_renderer_mapping_is_read_only(self) -> None:
        renderer = HtmlRenderer(node_renderers={Subscript: render_subscript})
        with pytest.raises(TypeError):
            renderer.node_renderers[Emphasis] = render_subscript  # type: ignore[index]


class TestSubscriptRenderer:
    """Opening tag with and without attributes."""

    def test_bare_tag(self) -> None:
        sb = StringBuilder()
        render_subscript(sb, _sub("2"), True)
        render_subscript(sb, _sub("2"), False)
        assert sb.build() == "<sub></sub>"

    def test_attributes_in_stored_order(self) -> None:
        sb = StringBuilder()
        render_subscript(sb, _sub("2", (("id", "x"), ("class", "chem"))), True)
        assert sb.build() == '<sub id="x" class="chem">'

    def test_unpermitted_attribute_dropped(self) -> None:
        sb = StringBuilder()
        render_subscript(sb, _sub("2", (("onclick", "evil()"), ("class", "c"))), True)
        assert sb.build() == '<sub class="c">'

    def test_all_attributes_dropped_keeps_bracket(self) -> None:
        sb = StringBuilder()
        render_subscript(sb, _sub("2", (("onclick", "evil()"),)), True)
        assert sb.build() == "<sub>"

    def test_data_attributes_allowed(self) -> None:
        sb = StringBuilder()
        render_subscript(sb, _sub("2", (("data-kind", "ion"),)), True)
        assert sb.build() == '<sub data-kind="ion">'

    def test_values_escaped(self) -> None:
        sb = StringBuilder()
        render_subscript(sb, _sub("2", (("title", 'a "b" <c>'),)), True)
        assert sb.build() == '<sub title="a &quot;b&quot; &lt;c&gt;">'

    def test_custom_filter(self) -> None:
        sb = StringBuilder()
        render_subscript(sb, _sub("2", (("id", "x"), ("class", "c"))), True, frozenset({"class"}))
        assert sb.build() == '<sub class="c">'

    def test_no_filter_keeps_everything(self) -> None:
        sb = StringBuilder()
        render_subscript(sb, _sub("2", (("onclick", "f()"),)), True, None)
        assert sb.build() == '<sub onclick="f()">'

    def test_attributes_through_transform(self) -> None:
        doc = parse("H~2~O", plugins=["subscript"])

        def classify(node: Node) -> Node:
            if isinstance(node, Subscript):
                return dataclasses.replace(node, attributes=(("class", "chem"),))
            return node

        assert render(transform(doc, classify)) == 'H<sub class="chem">2</sub>O'

    def test_plugin_with_custom_filter(self) -> None:
        builder = ExtensionsBuilder()
        SubscriptPlugin(attribute_filter=frozenset({"id"})).extend(builder)
        renderer = HtmlRenderer(node_renderers=builder.build().node_renderers)
        doc = _doc(_sub("2", (("id", "a"), ("class", "b"))))
        assert renderer.render(doc) == '<sub id="a">2</sub>'


class TestAttributeFilter:
    """Attribute filtering is name-based."""

    def test_global_attributes(self) -> None:
        assert {"class", "id", "lang", "title", "style"} <= GLOBAL_ATTRIBUTE_FILTER
        assert "onclick" not in GLOBAL_ATTRIBUTE_FILTER
        assert "href" not in GLOBAL_ATTRIBUTE_FILTER

    @pytest.mark.parametrize(
        ("name", "allowed"),
        [("class", True), ("data-x", True), ("onclick", False), ("href", False)],
    )
    def test_is_allowed(self, name: str, allowed: bool) -> None:
        assert is_allowed(name, GLOBAL_ATTRIBUTE_FILTER) is allowed

    def test_dropped_attribute_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        sb = StringBuilder()
        with caplog.at_level(logging.DEBUG, logger="subtilde"):
            render_attributes(sb, [("onclick", "x")], GLOBAL_ATTRIBUTE_FILTER)
        assert sb.build() == ""
        assert "onclick" in caplog.text


class TestMarkdownRender:
    """Markdown.render and module-level render share renderers."""

    def test_markdown_render_matches_call(self) -> None:
        md = Markdown(plugins=["all"])
        source = "H~2~O ~~x~~ *y*"
        assert md.render(md.parse(source)) == md(source)

    def test_module_render_defaults_to_all(self) -> None:
        doc = parse("H~2~O ~~x~~", plugins=["all"])
        assert render(doc) == "H<sub>2</sub>O <del>x</del>"

    def test_module_render_without_plugins_raises(self) -> None:
        doc = parse("H~2~O", plugins=["subscript"])
        with pytest.raises(RenderError):
            render(doc, plugins=[])
