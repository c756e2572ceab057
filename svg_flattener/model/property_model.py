"""Custom-property tables extracted from a document, grouped by scope."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

PropertyTable = Dict[str, str]


@dataclass(slots=True)
class ScopedRule:
    """Custom properties declared under a non-global selector (e.g. ``.dark``)."""

    selector: str
    declarations: PropertyTable = field(default_factory=dict)

    def matches(self, context: Optional[str]) -> bool:
        """Return True when ``context`` names this rule's scope."""
        return bool(context) and context in self.selector


@dataclass(slots=True)
class PropertyCatalog:
    """Inline, global and scoped custom-property declarations of one document."""

    inline: PropertyTable = field(default_factory=dict)
    global_: PropertyTable = field(default_factory=dict)
    scoped: List[ScopedRule] = field(default_factory=list)

    def lookup(self, name: str, context: Optional[str] = None) -> Optional[str]:
        """Return the effective value of ``name``: inline, then scoped, then global."""
        return self.locate(name, context)[0]

    def locate(self, name: str, context: Optional[str] = None) -> Tuple[Optional[str], Optional[str]]:
        """Like :meth:`lookup`, also naming the table the value came from."""
        candidates = (
            ("inline", self.inline.get(name)),
            ("scoped", self.scoped_value(name, context)),
            ("global", self.global_.get(name)),
        )
        for source, value in candidates:
            if value:
                return value, source
        return None, None

    def scoped_value(self, name: str, context: Optional[str]) -> Optional[str]:
        """Return the first scoped declaration of ``name`` whose selector matches ``context``."""
        if not context:
            return None
        for rule in self.scoped:
            if rule.matches(context) and name in rule.declarations:
                return rule.declarations[name]
        return None

    def is_empty(self) -> bool:
        return not (self.inline or self.global_ or self.scoped)
