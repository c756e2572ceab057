"""Collect CSS custom-property declarations from an SVG document."""
from __future__ import annotations

import re
from typing import Iterator

from svg_flattener.model.property_model import PropertyCatalog, ScopedRule
from svg_flattener.parser.css_scanner import iter_custom_properties, scan_rules
from svg_flattener.utils.logger import get_logger

LOGGER = get_logger(__name__)

STYLE_ATTRIBUTE = re.compile(r"(\s*)(?<![\w:-])style\s*=\s*([\"'])(.*?)\2", re.DOTALL)
STYLE_BLOCK = re.compile(r"(<style\b[^>]*>)(.*?)</style\s*>", re.IGNORECASE | re.DOTALL)
GLOBAL_SELECTORS = re.compile(r":{0,2}root|html|body|svg|\*", re.IGNORECASE)


class PropertyExtractor:
    """Scan style attributes and style blocks for ``--name: value`` pairs.

    Inline declarations from every ``style=""`` attribute are merged into one
    table (later attributes win). Top-level rules whose selector is one of
    ``:root``, ``root``, ``html``, ``body``, ``svg`` or ``*`` feed the global
    table; every other rule that declares a custom property is kept as a
    scoped rule under its selector.
    """

    def __init__(self, document: str) -> None:
        self._document = document

    def extract(self) -> PropertyCatalog:
        """Return the inline, global and scoped tables of the document."""
        catalog = PropertyCatalog()
        for style in self._iter_style_attributes():
            catalog.inline.update(iter_custom_properties(style))
        for css in self._iter_style_blocks():
            self._collect_rules(css, catalog)

        LOGGER.debug(
            "Extracted %d inline, %d global and %d scoped rule(s)",
            len(catalog.inline),
            len(catalog.global_),
            len(catalog.scoped),
        )
        return catalog

    # ------------------------------------------------------------------
    def _iter_style_attributes(self) -> Iterator[str]:
        for match in STYLE_ATTRIBUTE.finditer(self._document):
            yield match.group(3)

    def _iter_style_blocks(self) -> Iterator[str]:
        for match in STYLE_BLOCK.finditer(self._document):
            yield match.group(2)

    def _collect_rules(self, css: str, catalog: PropertyCatalog) -> None:
        for rule in scan_rules(css):
            declarations = dict(iter_custom_properties(rule.declarations_text))
            if not declarations:
                continue
            if is_global_selector(rule.selector) and not rule.is_nested:
                catalog.global_.update(declarations)
            else:
                catalog.scoped.append(ScopedRule(selector=rule.qualified_selector, declarations=declarations))


def is_global_selector(selector: str) -> bool:
    """Return True for selectors that apply document-wide defaults."""
    return GLOBAL_SELECTORS.fullmatch(selector.strip()) is not None
