"""Render a flattened SVG into a PNG file through rsvg-convert."""
from __future__ import annotations

import os
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from svg_flattener.renderer.utils import DEFAULT_WIDTH, rsvg_install_help, validate_width
from svg_flattener.utils.logger import get_logger

LOGGER = get_logger(__name__)

RSVG_BINARY = "rsvg-convert"
RSVG_TIMEOUT = 30


@dataclass(slots=True)
class CommandResult:
    """Outcome of one external command invocation."""

    returncode: Optional[int]
    stderr: str
    timed_out: bool = False
    not_found: bool = False


class SubprocessRunner:
    """Thin wrapper around ``subprocess.run`` so tests can substitute it."""

    def run(self, args: Sequence[str], timeout: Optional[int] = None) -> CommandResult:
        try:
            proc = subprocess.run(
                list(args),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=timeout,
                check=False,
            )
            return CommandResult(proc.returncode, proc.stderr)
        except subprocess.TimeoutExpired as exc:
            stderr = exc.stderr if isinstance(exc.stderr, str) else ""
            return CommandResult(None, stderr, timed_out=True)
        except FileNotFoundError:
            return CommandResult(None, f"{args[0]} not found on PATH", not_found=True)


class PngRenderer:
    """Convert SVG text to a PNG at ``output_path``; failures return False."""

    def __init__(self, output_path: Path, runner: Optional[SubprocessRunner] = None) -> None:
        self._output_path = output_path
        self._runner = runner or SubprocessRunner()

    def render(self, svg: str, width: object = DEFAULT_WIDTH) -> bool:
        """Write ``svg`` to a temp file and rasterize it; True on success."""
        valid_width = validate_width(width, DEFAULT_WIDTH)
        fd, temp_name = tempfile.mkstemp(prefix="svg-flatten-", suffix=".temp.svg")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(svg)
            result = self._runner.run(
                [RSVG_BINARY, "--width", str(valid_width), temp_name, "-o", str(self._output_path)],
                timeout=RSVG_TIMEOUT,
            )
            reason = self._failure_reason(result)
            if reason is None:
                return True
            LOGGER.error("PNG conversion failed: %s", reason)
            LOGGER.error("%s", rsvg_install_help())
            return False
        except OSError as exc:
            LOGGER.error("PNG conversion failed: %s", exc)
            return False
        finally:
            try:
                os.unlink(temp_name)
            except OSError:
                pass

    @staticmethod
    def _failure_reason(result: CommandResult) -> Optional[str]:
        if result.not_found:
            return f"{RSVG_BINARY} not found on PATH"
        if result.timed_out:
            return f"{RSVG_BINARY} timed out after {RSVG_TIMEOUT}s"
        if result.returncode != 0:
            detail = result.stderr.strip()
            suffix = f": {detail}" if detail else ""
            return f"{RSVG_BINARY} exited with code {result.returncode}{suffix}"
        return None
