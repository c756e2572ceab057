"""Palette slots and the ratio table used to derive them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional, Tuple

PUBLIC_SLOTS: Tuple[str, ...] = ("bg", "fg", "line", "accent", "muted", "surface", "border")
INTERNAL_SLOTS: Tuple[str, ...] = (
    "--_text",
    "--_text-sec",
    "--_text-muted",
    "--_text-faint",
    "--_line",
    "--_arrow",
    "--_node-fill",
    "--_node-stroke",
    "--_group-fill",
    "--_group-hdr",
    "--_inner-stroke",
    "--_key-badge",
)
SLOT_NAMES: Tuple[str, ...] = tuple(f"--{name}" for name in PUBLIC_SLOTS) + INTERNAL_SLOTS


@dataclass(frozen=True, slots=True)
class SlotRule:
    """Derivation of an internal slot: a copy of a public slot or an fg/bg mix."""

    name: str
    source: Optional[str] = None
    ratio: Optional[float] = None


@dataclass(frozen=True, slots=True)
class RatioTable:
    """Defaults and mixing ratios that turn a bg/fg pair into a full palette."""

    default_bg: str
    default_fg: str
    public_ratios: Tuple[Tuple[str, float], ...]
    internal: Tuple[SlotRule, ...]

    def ratio_for(self, slot: str) -> Optional[float]:
        for name, ratio in self.public_ratios:
            if name == slot:
                return ratio
        return None


DEFAULT_RATIOS = RatioTable(
    default_bg="#FFFFFF",
    default_fg="#27272A",
    public_ratios=(
        ("line", 0.3),
        ("accent", 0.5),
        ("muted", 0.4),
        ("surface", 0.03),
        ("border", 0.2),
    ),
    internal=(
        SlotRule("--_text", source="fg"),
        SlotRule("--_text-sec", source="muted"),
        SlotRule("--_text-muted", source="muted"),
        SlotRule("--_text-faint", ratio=0.25),
        SlotRule("--_line", source="line"),
        SlotRule("--_arrow", source="accent"),
        SlotRule("--_node-fill", source="surface"),
        SlotRule("--_node-stroke", source="border"),
        SlotRule("--_group-fill", source="bg"),
        SlotRule("--_group-hdr", ratio=0.05),
        SlotRule("--_inner-stroke", ratio=0.12),
        SlotRule("--_key-badge", ratio=0.1),
    ),
)


class Palette:
    """Fully resolved slot values keyed by their dashed property name."""

    def __init__(self, values: Mapping[str, str]):
        missing = [name for name in SLOT_NAMES if name not in values]
        if missing:
            raise ValueError(f"Palette is missing slot(s): {', '.join(missing)}")
        self._values: Dict[str, str] = {name: values[name] for name in SLOT_NAMES}

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str) -> Optional[str]:
        """Return the value bound to ``name`` or None for unknown slots."""
        return self._values.get(name)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._values)

    def as_dict(self) -> Dict[str, str]:
        """Return a copy of the slot values."""
        return dict(self._values)
