"""Flatten a directory of SVG files with bounded parallelism."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from svg_flattener.main import flatten_file
from svg_flattener.renderer.utils import DEFAULT_WIDTH
from svg_flattener.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_WORKERS = 4
MAX_WORKERS = 16


@dataclass(slots=True)
class BatchResult:
    """Summary of a directory run: written files and per-file failures."""

    total: int = 0
    succeeded: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def clamp_workers(workers: Optional[int]) -> int:
    """Keep the worker count within [1, 16], falling back to the default."""
    if not workers:
        return DEFAULT_WORKERS
    return max(1, min(int(workers), MAX_WORKERS))


def flatten_directory(
    input_dir: Path,
    output_dir: Path,
    overrides: Optional[Mapping[str, str]] = None,
    *,
    fmt: str = "svg",
    width: object = DEFAULT_WIDTH,
    workers: Optional[int] = DEFAULT_WORKERS,
    theme_context: Optional[str] = None,
) -> BatchResult:
    """Flatten every ``*.svg`` file of ``input_dir`` into ``output_dir``."""
    input_dir = Path(input_dir)
    output_dir = Path(output_dir)
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory not found: {input_dir}")
    if output_dir.resolve() == input_dir.resolve():
        raise ValueError(f"Output directory must differ from the input directory: {output_dir}")

    files = sorted(path for path in input_dir.iterdir() if path.is_file() and path.suffix.lower() == ".svg")
    result = BatchResult(total=len(files))
    if not files:
        return result

    output_dir.mkdir(parents=True, exist_ok=True)
    LOGGER.info("Found %d SVG file(s) to flatten", len(files))

    def run(path: Path) -> Path:
        target = output_dir / f"{path.stem}.{fmt}"
        return flatten_file(path, target, overrides, fmt=fmt, width=width, theme_context=theme_context)

    with ThreadPoolExecutor(max_workers=clamp_workers(workers)) as executor:
        futures = [(path, executor.submit(run, path)) for path in files]
        for path, future in futures:
            try:
                future.result()
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("Failed %s: %s", path.name, exc)
                result.failed.append((path.name, str(exc)))
            else:
                LOGGER.info("Flattened %s", path.name)
                result.succeeded.append(path.name)

    LOGGER.info("%d/%d file(s) flattened successfully", len(result.succeeded), result.total)
    return result
