"""Helpers to persist intermediate representations for debugging."""
from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

from svg_flattener.model.palette_model import Palette
from svg_flattener.model.property_model import PropertyCatalog


class DebugDumper:
    """Writes the extracted properties and the resolved palette for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, catalog: PropertyCatalog, palette: Palette) -> None:
        """Persist the property catalog and palette as JSON files."""
        self.directory.mkdir(parents=True, exist_ok=True)
        self._write("properties.json", self._serialize(catalog))
        self._write("palette.json", palette.as_dict())

    def _write(self, name: str, payload: Any) -> None:
        (self.directory / name).write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def _serialize(self, value: Any) -> Any:
        if is_dataclass(value):
            return {k.rstrip("_"): self._serialize(v) for k, v in asdict(value).items()}
        if isinstance(value, dict):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value
