import re
from typing import AbstractSet, List

from .tags import SELF_CLOSING_TAGS

_OPEN_TAG_RE = re.compile(r"^<([a-zA-Z][a-zA-Z0-9:-]*)")


def _opens_block(line: str, self_closing_tags: AbstractSet[str]) -> bool:
    """True for a bare opening tag whose children follow on later lines."""
    match = _OPEN_TAG_RE.match(line)
    if not match:
        return False
    if '/>' in line or '</' in line:
        return False
    # html5/html4 void tags carry no ' />' terminator
    return match.group(1).lower() not in self_closing_tags


def format_html(html: str, indent_unit: int = 2, self_closing_tags: AbstractSet[str] = SELF_CLOSING_TAGS) -> str:
    """
    Re-indents tag-per-line HTML by tracking a running depth.

    Closing tags step the depth down before they are written, bare opening
    tags step it up after. Self-closing tags, one-line open/content/close
    units and plain text stay at the current depth. Blank lines are dropped.
    Running it on its own output changes nothing.
    """
    depth = 0
    formatted_lines: List[str] = []
    for line in html.split('\n'):
        trimmed = line.strip()
        if not trimmed:
            continue

        if trimmed.startswith('</'):
            depth = max(0, depth - 1)

        formatted_lines.append(' ' * (depth * indent_unit) + trimmed)

        if _opens_block(trimmed, self_closing_tags):
            depth += 1

    return '\n'.join(formatted_lines)
