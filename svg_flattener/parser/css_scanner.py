"""Small explicit-state scanner for the CSS found inside SVG style blocks.

The scanner alternates between two states: collecting a selector (prelude)
until ``{``, and collecting a declaration list until the matching ``}``.
Nested blocks (``@media`` and friends, or CSS nesting) push a new frame, so
every closed block is reported with the preludes that enclose it. Strings and
comments are skipped so braces inside them do not change the nesting depth.
A block that is never closed is dropped; everything it completed before the
end of input is still reported.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

CUSTOM_PROPERTY_NAME = re.compile(r"--[\w-]+")
_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)


@dataclass(slots=True)
class CssRule:
    """A closed ``selector { body }`` block and its position in the source."""

    selector: str
    body: str
    start: int
    end: int
    parents: Tuple[str, ...] = ()
    declarations_text: str = ""

    @property
    def is_nested(self) -> bool:
        return bool(self.parents)

    @property
    def qualified_selector(self) -> str:
        """Selector prefixed with its enclosing preludes, e.g. ``@media print rect``."""
        return " ".join((*self.parents, self.selector))


@dataclass(slots=True)
class _OpenBlock:
    selector: str
    start: int
    body_start: int
    children: List[Tuple[int, int]] = field(default_factory=list)


def scan_rules(css: str) -> List[CssRule]:
    """Return every closed block of ``css`` in document order."""
    rules: List[CssRule] = []
    stack: List[_OpenBlock] = []
    selector_start: Optional[int] = None
    length = len(css)
    index = 0

    while index < length:
        char = css[index]
        if css.startswith("/*", index):
            close = css.find("*/", index + 2)
            index = length if close == -1 else close + 2
            continue
        if char in "\"'":
            if selector_start is None:
                selector_start = index
            index = _skip_string(css, index)
            continue

        if char == "{":
            start = index if selector_start is None else selector_start
            stack.append(_OpenBlock(selector=css[start:index].strip(), start=start, body_start=index + 1))
            selector_start = None
        elif char == "}":
            if stack:
                block = stack.pop()
                rule = CssRule(
                    selector=block.selector,
                    body=css[block.body_start:index],
                    start=block.start,
                    end=index + 1,
                    parents=tuple(open_block.selector for open_block in stack),
                    declarations_text=_own_text(css, block, index),
                )
                rules.append(rule)
                if stack:
                    stack[-1].children.append((rule.start, rule.end))
            selector_start = None
        elif char == ";":
            selector_start = None
        elif selector_start is None and not char.isspace():
            selector_start = index
        index += 1

    rules.sort(key=lambda rule: rule.start)
    return rules


def remove_empty_rules(css: str) -> str:
    """Delete blocks whose body is whitespace only, repeating until none remain.

    Removing the last child of an ``@media`` block empties the parent, which is
    then removed on the next round.
    """
    while True:
        empty = [rule for rule in scan_rules(css) if not rule.body.strip()]
        if not empty:
            return css
        for rule in sorted(empty, key=lambda item: item.start, reverse=True):
            css = css[: rule.start] + css[rule.end :]


def split_declarations(text: str) -> List[str]:
    """Split a declaration list on ``;`` outside of parentheses and strings."""
    parts: List[str] = []
    depth = 0
    quote: Optional[str] = None
    current: List[str] = []
    for char in text:
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif char == ";" and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def split_declaration(declaration: str) -> Tuple[Optional[str], str]:
    """Split ``name: value`` into its trimmed parts; name is None without a colon."""
    name, colon, value = declaration.partition(":")
    if not colon:
        return None, declaration.strip()
    return name.strip(), value.strip()


def iter_custom_properties(text: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(--name, value)`` for every custom property declared in ``text``."""
    for declaration in split_declarations(_COMMENT.sub("", text)):
        name, value = split_declaration(declaration)
        if name is None or not value:
            continue
        if CUSTOM_PROPERTY_NAME.fullmatch(name):
            yield name, value


# ----------------------------------------------------------------------
def _skip_string(css: str, index: int) -> int:
    quote = css[index]
    index += 1
    while index < len(css):
        if css[index] == "\\":
            index += 2
            continue
        if css[index] == quote:
            return index + 1
        index += 1
    return index


def _own_text(css: str, block: _OpenBlock, close: int) -> str:
    """Body text of ``block`` with its nested child blocks cut out."""
    pieces: List[str] = []
    cursor = block.body_start
    for child_start, child_end in block.children:
        pieces.append(css[cursor:child_start])
        cursor = child_end
    pieces.append(css[cursor:close])
    return "".join(pieces)
