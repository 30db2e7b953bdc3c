import logging
from dataclasses import dataclass
from typing import AbstractSet, List, NamedTuple, Optional

from .errors import HamlConfigError, HamlStructuralError
from .formatter import format_html
from .tags import SELF_CLOSING_TAGS, LineKind, SourceLine, TagSpec, classify_line, parse_tag_line

logger = logging.getLogger(__name__)

SELF_CLOSING_ENDINGS = {
    'xhtml': ' />',
    'html5': '>',
    'html4': '>',
}


@dataclass(frozen=True)
class TranspileOptions:
    format_output: bool = True
    self_closing_mode: str = 'xhtml'  # 'xhtml', 'html5', 'html4'
    indent_unit: int = 2

    def __post_init__(self):
        if not isinstance(self.self_closing_mode, str) or self.self_closing_mode not in SELF_CLOSING_ENDINGS:
            raise HamlConfigError(
                f"Unknown self-closing mode {self.self_closing_mode!r}. "
                f"Expected one of: {', '.join(SELF_CLOSING_ENDINGS)}.")
        if not isinstance(self.indent_unit, int) or self.indent_unit < 0:
            raise HamlConfigError(f"Indent unit must be a non-negative integer, got {self.indent_unit!r}.")


class RenderedTag(NamedTuple):
    html: str
    tag_name: str
    self_closing: bool
    has_inline_content: bool


class OpenFrame(NamedTuple):
    tag_name: str
    indent: int
    self_closing: bool = False


class OutputLine(NamedTuple):
    indent: int
    text: str


class ConversionResult(NamedTuple):
    output: Optional[str]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def render_tag(spec: TagSpec, self_closing_mode: str = 'xhtml') -> RenderedTag:
    """Renders the opening tag (and for one-line elements, the rest of it)."""
    html = f"<{spec.tag_name}"
    if spec.id:
        html += f' id="{spec.id}"'
    if spec.classes:
        html += f' class="{" ".join(spec.classes)}"'
    for key, value in spec.attributes:
        html += f' {key}="{value}"'

    if spec.is_self_closing:
        # Inline content after a void tag is dropped
        html += SELF_CLOSING_ENDINGS[self_closing_mode]
        return RenderedTag(html, spec.tag_name, True, False)

    html += '>'
    if spec.inline_content:
        html += f"{spec.inline_content}</{spec.tag_name}>"
        return RenderedTag(html, spec.tag_name, False, True)
    return RenderedTag(html, spec.tag_name, False, False)


class HamlCompiler:
    """
    HAML Compiler
    Turns indentation-based HAML-style shorthand into nested HTML.

    Features:
    - Indentation-based hierarchy, measured in raw whitespace characters
    - Tag shorthand: %name, #id, .class, {key: value} attributes
    - Implicit div when only #id or .class is given
    - Inline content and '=' dynamic content (emitted literally)
    - Void tags rendered per the configured self-closing mode
    - '/' comment lines, plain text passthrough
    - Optional re-indentation of the result
    """

    def __init__(self, options: Optional[TranspileOptions] = None,
                 self_closing_tags: AbstractSet[str] = SELF_CLOSING_TAGS):
        self.options = options or TranspileOptions()
        self.self_closing_tags = self_closing_tags
        self.output: List[OutputLine] = []
        self.tag_stack: List[OpenFrame] = []
        self.line_number: int = 0

    def _fatal_error(self, message: str):
        """Raises a fatal compilation error."""
        raise HamlStructuralError(message, line_number=self.line_number or None)

    def _emit(self, indent: int, text: str):
        if indent < 0:
            self._fatal_error(f"Negative indent width {indent}.")
        self.output.append(OutputLine(indent, text))

    def _close_frame(self):
        frame = self.tag_stack.pop()
        if not frame.self_closing:
            self._emit(frame.indent, f"</{frame.tag_name}>")

    def _close_tags(self, indent: int):
        """Closes every open frame at or deeper than the given indent width."""
        while self.tag_stack and indent <= self.tag_stack[-1].indent:
            self._close_frame()

    def _push(self, tag_name: str, indent: int):
        if self.tag_stack and self.tag_stack[-1].indent >= indent:
            self._fatal_error(
                f"Cannot open <{tag_name}> at indent {indent} inside "
                f"<{self.tag_stack[-1].tag_name}> at indent {self.tag_stack[-1].indent}.")
        self.tag_stack.append(OpenFrame(tag_name, indent))

    def _process_line(self, line: SourceLine):
        """Processes one non-blank, non-comment line."""
        self.line_number = line.number + 1  # For error reporting

        whitespace = line.leading_whitespace
        if ' ' in whitespace and '\t' in whitespace:
            logger.warning("Line %d: Mixed tabs and spaces in indentation; each counts as one column.",
                           self.line_number)

        # Equal indentation closes the previous sibling first
        self._close_tags(line.indent)

        if classify_line(line) is LineKind.TEXT:
            self._emit(line.indent, line.content)
            return

        spec = parse_tag_line(line.content, self.self_closing_tags)
        rendered = render_tag(spec, self.options.self_closing_mode)
        self._emit(line.indent, rendered.html)
        if not rendered.self_closing and not rendered.has_inline_content:
            self._push(rendered.tag_name, line.indent)

    def render_output(self) -> str:
        return '\n'.join(' ' * entry.indent + entry.text for entry in self.output)

    def compile(self, source: str) -> str:
        """Compiles HAML source to HTML."""
        # Reset state for fresh compilation
        self.output = []
        self.tag_stack = []
        self.line_number = 0

        if not source.strip():
            return ''

        for number, raw in enumerate(source.split('\n')):
            line = SourceLine.from_raw(raw, number)
            if classify_line(line) in (LineKind.BLANK, LineKind.COMMENT):
                continue
            self._process_line(line)

        # Close any remaining open tags, innermost first
        self.line_number = 0
        while self.tag_stack:
            self._close_frame()

        html = self.render_output()
        logger.debug("Compiled %d source lines into %d output lines", number + 1, len(self.output))
        if self.options.format_output:
            return format_html(html, self.options.indent_unit, self.self_closing_tags)
        return html


def transpile(source: str, options: Optional[TranspileOptions] = None) -> str:
    """Transpiles HAML source to HTML, raising HamlStructuralError on failure."""
    return HamlCompiler(options).compile(source)


def convert(source: str, options: Optional[TranspileOptions] = None) -> ConversionResult:
    """Like transpile(), but hands compile failures back as a value."""
    try:
        return ConversionResult(transpile(source, options))
    except HamlStructuralError as e:
        logger.error("%s", e)
        return ConversionResult(None, str(e))
