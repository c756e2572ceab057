"""Resolve the flattening palette from overrides, declarations and defaults."""
from __future__ import annotations

import re
from typing import Dict, Mapping, Optional, Tuple

from svg_flattener.model.palette_model import DEFAULT_RATIOS, PUBLIC_SLOTS, Palette, RatioTable
from svg_flattener.model.property_model import PropertyCatalog
from svg_flattener.utils.colors import mix_colors
from svg_flattener.utils.logger import get_logger

LOGGER = get_logger(__name__)

VAR_VALUE = re.compile(r"var\(\s*(--[\w-]+)\s*(?:,(.*))?\)", re.DOTALL)


class PaletteResolver:
    """Merge overrides with extracted declarations and derive every palette slot.

    Lookup order for each public slot ``X``: ``overrides["X"]``,
    ``overrides["--X"]``, inline ``--X``, global ``--X``, then the default
    (``bg``/``fg``) or a mix of fg over bg at the table's ratio. A value that
    is itself a ``var()`` reference is followed to a literal first. Scoped rules
    are only consulted when a ``theme_context`` is given, between the inline
    and the global table.
    """

    def __init__(
        self,
        catalog: PropertyCatalog,
        overrides: Optional[Mapping[str, str]] = None,
        ratios: RatioTable = DEFAULT_RATIOS,
        theme_context: Optional[str] = None,
    ) -> None:
        self._catalog = catalog
        self._overrides = dict(overrides or {})
        self._ratios = ratios
        self._theme_context = theme_context

    def resolve(self) -> Palette:
        """Return a palette with every public and internal slot populated."""
        public: Dict[str, str] = {}

        for slot in PUBLIC_SLOTS:
            dashed = f"--{slot}"
            value, source = self._lookup(slot)
            if value is not None:
                value = self._dereference(value, public, (dashed,))
            if value is None:
                value, source = self._fallback(slot, public)
            public[slot] = value
            self._log_source(slot, source)

        values = {f"--{slot}": value for slot, value in public.items()}
        for rule in self._ratios.internal:
            if rule.source is not None:
                values[rule.name] = public[rule.source]
            else:
                values[rule.name] = self._mix(public, rule.ratio)
        return Palette(values)

    # ------------------------------------------------------------------
    def _lookup(self, slot: str) -> Tuple[Optional[str], Optional[str]]:
        dashed = f"--{slot}"
        for key in (slot, dashed):
            if self._overrides.get(key):
                return self._overrides[key], "override"
        return self._catalog.locate(dashed, self._theme_context)

    def _dereference(self, value: str, public: Mapping[str, str], seen: Tuple[str, ...]) -> Optional[str]:
        """Replace a ``var()`` value by what it points to, or None when it leads nowhere.

        A resolved slot wins, then another declared property, then the
        reference's own fallback. Cycles resolve to None.
        """
        match = VAR_VALUE.fullmatch(value.strip())
        if match is None:
            return value
        name, fallback = match.group(1), match.group(2)
        if name[2:] in public:
            return public[name[2:]]
        if name not in seen:
            declared = self._catalog.lookup(name, self._theme_context)
            if declared:
                resolved = self._dereference(declared, public, seen + (name,))
                if resolved is not None:
                    return resolved
        if fallback and fallback.strip():
            return self._dereference(fallback.strip(), public, seen + (name,))
        return None

    def _fallback(self, slot: str, public: Mapping[str, str]) -> Tuple[str, str]:
        if slot == "bg":
            return self._ratios.default_bg, "default"
        if slot == "fg":
            return self._ratios.default_fg, "default"
        return self._mix(public, self._ratios.ratio_for(slot)), "derived"

    def _mix(self, public: Mapping[str, str], ratio: Optional[float]) -> str:
        if ratio is None:
            return public["fg"]
        return mix_colors(public["fg"], public["bg"], ratio)

    def _log_source(self, slot: str, source: Optional[str]) -> None:
        LOGGER.debug("Palette slot %s resolved from %s", slot, source)


def resolve_palette(
    catalog: PropertyCatalog,
    overrides: Optional[Mapping[str, str]] = None,
    ratios: RatioTable = DEFAULT_RATIOS,
    theme_context: Optional[str] = None,
) -> Palette:
    """Convenience wrapper around :class:`PaletteResolver`."""
    return PaletteResolver(catalog, overrides, ratios=ratios, theme_context=theme_context).resolve()
