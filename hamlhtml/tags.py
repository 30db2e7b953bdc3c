import re
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Dict, FrozenSet, Optional, Tuple

# Tags that never take children
SELF_CLOSING_TAGS: FrozenSet[str] = frozenset([
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'param', 'source', 'track', 'wbr',
])

COMMENT_MARKER = '/'
TAG_MARKER = '%'
ID_MARKER = '#'
CLASS_MARKER = '.'
DYNAMIC_MARKER = '='

_TAG_NAME_RE = re.compile(r"^%([a-zA-Z0-9-]+)")
_SELECTOR_RE = re.compile(r"^[^\s{=]*")
_ID_RE = re.compile(r"#([a-zA-Z0-9\-_]+)")
_CLASS_RE = re.compile(r"\.([a-zA-Z0-9\-_]+)")
_ATTR_BLOCK_RE = re.compile(r"\{([^}]+)\}")
_ATTR_PAIR_RE = re.compile(r"[^,\s]+:\s*[^,]+")
_QUOTES_RE = re.compile(r"['\"]")


class LineKind(Enum):
    BLANK = 'blank'
    COMMENT = 'comment'
    TAG = 'tag'
    TEXT = 'text'


@dataclass(frozen=True)
class SourceLine:
    """One raw line of input along with its measured indentation."""
    raw: str
    number: int  # 0-based
    indent: int
    content: str

    @classmethod
    def from_raw(cls, raw: str, number: int) -> 'SourceLine':
        stripped = raw.lstrip()
        return cls(raw=raw, number=number, indent=len(raw) - len(stripped), content=stripped.strip())

    @property
    def leading_whitespace(self) -> str:
        return self.raw[:self.indent]


@dataclass(frozen=True)
class TagSpec:
    tag_name: str = 'div'
    id: Optional[str] = None
    classes: Tuple[str, ...] = ()
    # (key, value) pairs in first-seen order
    attributes: Tuple[Tuple[str, str], ...] = ()
    inline_content: Optional[str] = None
    is_self_closing: bool = False


def classify_line(line: SourceLine) -> LineKind:
    """Decides how a single source line is handled."""
    content = line.content
    if not content:
        return LineKind.BLANK
    if content.startswith(COMMENT_MARKER):
        return LineKind.COMMENT
    if content.startswith((TAG_MARKER, ID_MARKER, CLASS_MARKER)):
        return LineKind.TAG
    # Everything else, '!!!' included, passes through untouched
    return LineKind.TEXT


def _parse_attribute_block(attr_string: str) -> Dict[str, str]:
    """
    Splits the interior of a {...} block into key/value pairs.
    This is a comma/colon heuristic, not a tokenizer: values containing
    commas or colons are cut short.
    """
    attributes: Dict[str, str] = {}
    for pair in _ATTR_PAIR_RE.findall(attr_string):
        parts = [p.strip() for p in pair.split(':')]
        key, value = parts[0], parts[1]
        attributes[key] = _QUOTES_RE.sub('', value)
    return attributes


def parse_tag_line(line: str, self_closing_tags: AbstractSet[str] = SELF_CLOSING_TAGS) -> TagSpec:
    """
    Parses one trimmed tag-shorthand line, e.g. '%a#home.nav{href: "/"} Home'.

    Extraction runs in a fixed order over whatever text remains: tag name,
    id (first one wins), classes, attribute block and finally inline content.
    Each pass removes what it matched before the next one runs. Malformed
    input is never rejected; anything that is not recognised ends up in the
    inline content.
    """
    tag_name = 'div'
    if line.startswith(TAG_MARKER):
        match = _TAG_NAME_RE.match(line)
        if match:
            tag_name = match.group(1)
            line = line[match.end():]

    # Ids and classes only count in the selector run ahead of the
    # attribute block or content, so 'a.png' or 'Call #1' stay intact
    selector_match = _SELECTOR_RE.match(line)
    selector, line = selector_match.group(0), line[selector_match.end():]

    tag_id = None
    id_match = _ID_RE.search(selector)
    if id_match:
        tag_id = id_match.group(1)
        selector = selector.replace(id_match.group(0), '', 1)

    class_matches = [m.group(0) for m in _CLASS_RE.finditer(selector)]
    classes = tuple(cls[1:] for cls in class_matches)
    for cls in class_matches:
        selector = selector.replace(cls, '', 1)

    # Unrecognised selector leftovers drift into the content
    line = selector + line

    attributes: Dict[str, str] = {}
    attr_match = _ATTR_BLOCK_RE.search(line)
    if attr_match:
        attributes = _parse_attribute_block(attr_match.group(1))
        line = line.replace(attr_match.group(0), '', 1)

    content = line.strip()
    if content.startswith(DYNAMIC_MARKER):
        # No evaluation, the expression is emitted as written
        content = content[1:].strip()

    return TagSpec(
        tag_name=tag_name,
        id=tag_id,
        classes=classes,
        attributes=tuple(attributes.items()),
        inline_content=content or None,
        is_self_closing=tag_name.lower() in self_closing_tags,
    )
