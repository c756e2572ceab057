"""Common helpers shared by renderer implementations."""
from __future__ import annotations

import math
import re
import sys
from typing import Optional

DEFAULT_WIDTH = 800
MIN_WIDTH = 100
MAX_WIDTH = 10000

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def validate_width(width: object, default: int = DEFAULT_WIDTH) -> int:
    """Return ``width`` as an int when it lies in [100, 10000], else ``default``.

    Strings are parsed by their leading integer (``"500"`` and ``"500px"`` both
    give 500); floats are truncated; anything unparseable yields the default.
    """
    parsed = _parse_int(width)
    if parsed is None or parsed < MIN_WIDTH or parsed > MAX_WIDTH:
        return default
    return parsed


def _parse_int(value: object) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def rsvg_install_help(platform: Optional[str] = None) -> str:
    """Return install instructions for rsvg-convert on the given platform."""
    platform = platform or sys.platform
    if platform == "darwin":
        return (
            "Make sure rsvg-convert (librsvg) is installed. On macOS you can install it with:\n"
            "  brew install librsvg"
        )
    if platform.startswith("linux"):
        return (
            "Make sure rsvg-convert (librsvg) is installed. On Linux you can typically install it with:\n"
            "  Debian/Ubuntu: sudo apt-get install librsvg2-bin\n"
            "  Fedora/RHEL:   sudo dnf install librsvg2-tools\n"
            "  Arch Linux:    sudo pacman -S librsvg"
        )
    if platform == "win32":
        return (
            "Make sure rsvg-convert (librsvg) is installed and available in your PATH.\n"
            "On Windows you can install it via:\n"
            "  choco install librsvg   (Chocolatey)\n"
            "  scoop install librsvg   (Scoop)\n"
            "Or use a package from MSYS2 or another distribution that provides librsvg."
        )
    return (
        "Make sure rsvg-convert (librsvg) is installed and available on your PATH.\n"
        "See https://wiki.gnome.org/Projects/LibRsvg for installation instructions."
    )
