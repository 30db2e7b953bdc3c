import logging
import re
from collections import Counter

import pytest

from hamlhtml.compiler import (
    ConversionResult,
    HamlCompiler,
    OpenFrame,
    TranspileOptions,
    convert,
    render_tag,
    transpile,
)
from hamlhtml.errors import HamlConfigError, HamlStructuralError
from hamlhtml.formatter import format_html
from hamlhtml.samples import SAMPLE_HAML
from hamlhtml.tags import SELF_CLOSING_TAGS, TagSpec

RAW = TranspileOptions(format_output=False)


def _tag_balance(html: str):
    opened = Counter(name for name in re.findall(r"<([a-zA-Z][\w-]*)", html)
                     if name.lower() not in SELF_CLOSING_TAGS)
    closed = Counter(re.findall(r"</([a-zA-Z][\w-]*)>", html))
    return opened, closed


def test_nested_inline_content() -> None:
    assert transpile("%div\n  %p Hello") == "<div>\n  <p>Hello</p>\n</div>"


def test_siblings_at_same_indent_do_not_nest() -> None:
    assert transpile("%ul\n  %li One\n  %li Two") == "<ul>\n  <li>One</li>\n  <li>Two</li>\n</ul>"


def test_sibling_containers_close_before_next_opens() -> None:
    assert transpile("%div\n%div", RAW) == "<div>\n</div>\n<div>\n</div>"


def test_self_closing_modes() -> None:
    source = '%img{src: "a.png"}'
    assert transpile(source) == '<img src="a.png" />'
    assert transpile(source, TranspileOptions(self_closing_mode="xhtml")) == '<img src="a.png" />'
    assert transpile(source, TranspileOptions(self_closing_mode="html5")) == '<img src="a.png">'
    assert transpile(source, TranspileOptions(self_closing_mode="html4")) == '<img src="a.png">'


def test_id_and_class_shorthand() -> None:
    assert transpile("%div#main.card Hello") == '<div id="main" class="card">Hello</div>'


def test_attribute_order_is_id_class_then_attributes() -> None:
    html = transpile('%a.nav.big#home{href: "/", title: "Home"} Home')
    assert html == '<a id="home" class="nav big" href="/" title="Home">Home</a>'


@pytest.mark.parametrize("source", ["", "   ", "\n\n", "  \n\t\n", "/ note", "/ one\n  / two"])
def test_empty_output(source: str) -> None:
    assert transpile(source) == ""


def test_deep_nesting_closes_innermost_first() -> None:
    source = "\n".join([
        "%div",
        "  %section",
        "    %article",
        "      %ul",
        "        %li",
        "%footer Bye",
        "%aside",
        "%p end",
    ])
    expected = "\n".join([
        "<div>",
        "  <section>",
        "    <article>",
        "      <ul>",
        "        <li>",
        "        </li>",
        "      </ul>",
        "    </article>",
        "  </section>",
        "</div>",
        "<footer>Bye</footer>",
        "<aside>",
        "</aside>",
        "<p>end</p>",
    ])
    assert transpile(source, RAW) == expected
    assert transpile(source) == expected
    assert expected.count("</aside>") == 1
    assert expected.count("</div>") == 1


def test_partial_dedent_closes_only_deeper_frames() -> None:
    source = "%div\n  %ul\n    %li\n  %p after"
    assert transpile(source) == "<div>\n  <ul>\n    <li>\n    </li>\n  </ul>\n  <p>after</p>\n</div>"


def test_end_of_document_flush() -> None:
    html = transpile("%html\n  %body\n    %main", RAW)
    assert html.endswith("    </main>\n  </body>\n</html>")


def test_self_closing_with_content_never_closes() -> None:
    assert transpile("%br text") == "<br />"
    assert transpile("%div\n  %br hello\n  %p x", RAW) == "<div>\n  <br />\n  <p>x</p>\n</div>"


def test_children_of_self_closing_are_siblings() -> None:
    html = transpile("%div\n  %input\n    %span x")
    assert html == "<div>\n  <input />\n  <span>x</span>\n</div>"


def test_plain_text_passthrough() -> None:
    assert transpile("%p\n  Hello world\n  %b bold", RAW) == "<p>\n  Hello world\n  <b>bold</b>\n</p>"


def test_plain_text_at_same_indent_closes_sibling() -> None:
    assert transpile("%div\ntext", RAW) == "<div>\n</div>\ntext"


def test_doctype_line_passes_through() -> None:
    assert transpile("!!!\n%html") == "!!!\n<html>\n</html>"


def test_dynamic_content_is_literal() -> None:
    assert transpile("%span= 1 + 1") == "<span>1 + 1</span>"


def test_irregular_indentation_is_reformatted() -> None:
    source = "%div\n     %p\n   %span hi"
    assert transpile(source, RAW) == "<div>\n     <p>\n     </p>\n   <span>hi</span>\n</div>"
    assert transpile(source) == "<div>\n  <p>\n  </p>\n  <span>hi</span>\n</div>"


def test_indent_unit_option() -> None:
    assert transpile("%div\n  %p x", TranspileOptions(indent_unit=4)) == "<div>\n    <p>x</p>\n</div>"


def test_crlf_input() -> None:
    assert transpile("%div\r\n  %p Hi\r\n") == "<div>\n  <p>Hi</p>\n</div>"


def test_comments_do_not_close_tags() -> None:
    assert transpile("%div\n/ note\n  %p x") == "<div>\n  <p>x</p>\n</div>"


def test_sample_document() -> None:
    html = transpile(SAMPLE_HAML)
    assert html.startswith('!!!\n<html>\n  <head>\n    <meta charset="utf-8" />\n'
                           '    <title>Sample HAML Document</title>\n'
                           '    <link rel="stylesheet" href="styles.css" />\n  </head>')
    assert '<header id="main-header">' in html
    assert '<section id="hero" class="hero-section">' in html
    assert html.endswith("      <p>© 2024 Sample Website. All rights reserved.</p>\n"
                         "    </footer>\n  </body>\n</html>")


@pytest.mark.parametrize("mode", ["xhtml", "html5"])
@pytest.mark.parametrize("format_output", [True, False])
def test_output_is_balanced(mode: str, format_output: bool) -> None:
    html = transpile(SAMPLE_HAML, TranspileOptions(format_output, mode))
    opened, closed = _tag_balance(html)
    assert opened == closed


def test_formatted_output_is_stable() -> None:
    html = transpile(SAMPLE_HAML)
    assert format_html(html) == html
    raw = transpile(SAMPLE_HAML, RAW)
    assert format_html(raw) == html


def test_compiler_is_reusable() -> None:
    compiler = HamlCompiler()
    assert compiler.compile("%div\n  %div") == "<div>\n  <div>\n  </div>\n</div>"
    assert compiler.compile("%p x") == "<p>x</p>"
    assert compiler.tag_stack == []


def test_mixed_indentation_warns(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="hamlhtml.compiler"):
        html = transpile("%div\n \t%p x")
    assert html == "<div>\n  <p>x</p>\n</div>"
    assert "Mixed tabs and spaces" in caplog.text


def test_render_tag_classification() -> None:
    assert render_tag(TagSpec("p", inline_content="x")) == ("<p>x</p>", "p", False, True)
    assert render_tag(TagSpec("div")) == ("<div>", "div", False, False)
    assert render_tag(TagSpec("hr", is_self_closing=True), "html5") == ("<hr>", "hr", True, False)


def test_invalid_options() -> None:
    with pytest.raises(HamlConfigError):
        TranspileOptions(self_closing_mode="bogus")
    with pytest.raises(HamlConfigError):
        TranspileOptions(indent_unit=-1)


def test_push_out_of_order_is_structural_error() -> None:
    compiler = HamlCompiler()
    compiler.tag_stack = [OpenFrame("div", 4)]
    with pytest.raises(HamlStructuralError):
        compiler._push("p", 2)


def _break_closing(monkeypatch) -> None:
    monkeypatch.setattr(HamlCompiler, "_close_tags", lambda self, indent: None)


def test_structural_error_aborts(monkeypatch) -> None:
    _break_closing(monkeypatch)
    with pytest.raises(HamlStructuralError) as excinfo:
        transpile("%div\n%p")
    assert excinfo.value.line_number == 2
    assert str(excinfo.value).startswith("HAML Compile Error (Line 2): ")


def test_convert_returns_errors_as_values(monkeypatch) -> None:
    assert convert("%p x") == ConversionResult("<p>x</p>", None)
    assert convert("%p x").ok

    _break_closing(monkeypatch)
    result = convert("%div\n%p")
    assert not result.ok
    assert result.output is None
    assert "Line 2" in result.error
