"""Rewrite a themed SVG into a flat one using a resolved palette.

Three passes run in order: ``var()`` substitution, style-attribute cleanup and
style-block cleanup. None of them raise on malformed input; a construct that
does not fit the expected shape is left as it is.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from svg_flattener.model.palette_model import Palette
from svg_flattener.parser.css_scanner import remove_empty_rules, split_declaration, split_declarations
from svg_flattener.parser.property_extractor import STYLE_ATTRIBUTE, STYLE_BLOCK
from svg_flattener.utils.logger import get_logger

LOGGER = get_logger(__name__)

VAR_REFERENCE = re.compile(r"var\(\s*(--[\w-]+)\s*([,)])")
IMPORT_URL = re.compile(r"@import\s+url\([^)]+\);?", re.IGNORECASE)
IMPORT_STRING = re.compile(r"@import\s+[\"'][^\"']+[\"'];?", re.IGNORECASE)
BLANK_LINES = re.compile(r"\n\s*\n")
BRACES_ONLY = re.compile(r"[{}\s]*")
_FALLBACK_STOP = frozenset(";{}<>")


@dataclass(slots=True)
class RewriteStats:
    """Counters collected while rewriting, reported at DEBUG level."""

    substitutions: int = 0
    attributes_removed: int = 0
    blocks_removed: int = 0


class Rewriter:
    """Apply a palette to a document and strip the declarations it replaces."""

    def __init__(self, palette: Palette) -> None:
        self._palette = palette
        names = "|".join(re.escape(name) for name in sorted(palette.names(), key=len, reverse=True))
        self._declaration_pattern = re.compile(
            rf"\s*(?<![\w-])(?:{names})\s*:[^;{{}}]*(?:;|(?=\s*\}}))"
        )
        self.stats = RewriteStats()

    def rewrite(self, document: str) -> str:
        """Run all three passes and return the flattened document."""
        self.stats = RewriteStats()
        flat = self.substitute(document)
        flat = self.clean_style_attributes(flat)
        flat = self.clean_style_blocks(flat)
        LOGGER.debug(
            "Rewrote document: %d substitution(s), %d style attribute(s) dropped, %d style block(s) dropped",
            self.stats.substitutions,
            self.stats.attributes_removed,
            self.stats.blocks_removed,
        )
        return flat

    # ------------------------------------------------------------------
    # Pass 1: var() substitution
    def substitute(self, document: str) -> str:
        """Replace ``var(--slot)`` and ``var(--slot, fallback)`` with the slot value."""
        pieces: List[str] = []
        cursor = 0
        position = 0
        while True:
            match = VAR_REFERENCE.search(document, position)
            if match is None:
                break
            name = match.group(1)
            value = self._palette.get(name)
            if value is None:
                position = match.end(1)
                continue
            if match.group(2) == ")":
                end: Optional[int] = match.end()
            else:
                end = _find_closing_paren(document, match.end())
            if end is None:
                position = match.end()
                continue
            pieces.append(document[cursor : match.start()])
            pieces.append(value)
            cursor = position = end
            self.stats.substitutions += 1
        pieces.append(document[cursor:])
        return "".join(pieces)

    # ------------------------------------------------------------------
    # Pass 2: style attributes
    def clean_style_attributes(self, document: str) -> str:
        """Drop palette declarations from ``style`` attributes, removing emptied ones."""
        return STYLE_ATTRIBUTE.sub(self._clean_attribute, document)

    def _clean_attribute(self, match: re.Match) -> str:
        leading, quote, content = match.group(1), match.group(2), match.group(3)
        kept = [part.strip() for part in split_declarations(content) if part.strip()]
        kept = [part for part in kept if not self._is_palette_declaration(part)]
        if not kept:
            self.stats.attributes_removed += 1
            return ""
        return f"{leading}style={quote}{'; '.join(kept)}{quote}"

    def _is_palette_declaration(self, declaration: str) -> bool:
        name, _ = split_declaration(declaration)
        return name is not None and name.startswith("--") and name in self._palette

    # ------------------------------------------------------------------
    # Pass 3: style blocks
    def clean_style_blocks(self, document: str) -> str:
        """Strip imports and palette declarations from ``<style>`` blocks."""
        return STYLE_BLOCK.sub(self._clean_block, document)

    def _clean_block(self, match: re.Match) -> str:
        opening, css = match.group(1), match.group(2)
        css = IMPORT_URL.sub("", css)
        css = IMPORT_STRING.sub("", css)
        css = self._declaration_pattern.sub("", css)
        css = BLANK_LINES.sub("\n", css).strip()
        css = remove_empty_rules(css)
        css = BLANK_LINES.sub("\n", css).strip()

        if BRACES_ONLY.fullmatch(css):
            self.stats.blocks_removed += 1
            return ""
        return f"{opening}{css}</style>"


def _find_closing_paren(text: str, index: int) -> Optional[int]:
    """Return the offset just past the ``)`` closing a ``var(`` whose body starts at ``index``.

    ``index`` points after the comma of a fallback; nested parentheses in the
    fallback are balanced. Returns None when the reference is not closed before
    the end of its declaration or tag.
    """
    depth = 1
    while index < len(text):
        char = text[index]
        if char in _FALLBACK_STOP:
            return None
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return None
