"""Entry-point for the SVG flattening pipeline."""
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from svg_flattener.model.palette_model import DEFAULT_RATIOS, PUBLIC_SLOTS, Palette, RatioTable
from svg_flattener.model.property_model import PropertyCatalog
from svg_flattener.parser.palette_resolver import PaletteResolver
from svg_flattener.parser.property_extractor import PropertyExtractor
from svg_flattener.renderer.png_renderer import PngRenderer
from svg_flattener.renderer.rewriter import Rewriter
from svg_flattener.renderer.utils import DEFAULT_WIDTH
from svg_flattener.utils.debug import DebugDumper
from svg_flattener.utils.logger import get_logger, set_verbose

LOGGER = get_logger(__name__)

FORMATS = ("svg", "png")


class ConversionError(RuntimeError):
    """Raised when a flattened document could not be rasterized."""


@dataclass(slots=True)
class FlattenResult:
    """Flattened document together with the tables it was derived from."""

    document: str
    catalog: PropertyCatalog
    palette: Palette


def flatten_document(
    document: str,
    overrides: Optional[Mapping[str, str]] = None,
    *,
    ratios: RatioTable = DEFAULT_RATIOS,
    theme_context: Optional[str] = None,
) -> FlattenResult:
    """Extract custom properties, resolve the palette and rewrite the document."""
    catalog = PropertyExtractor(document).extract()
    palette = PaletteResolver(catalog, overrides, ratios=ratios, theme_context=theme_context).resolve()
    flat = Rewriter(palette).rewrite(document)
    return FlattenResult(document=flat, catalog=catalog, palette=palette)


def flatten(
    document: str,
    overrides: Optional[Mapping[str, str]] = None,
    *,
    ratios: RatioTable = DEFAULT_RATIOS,
    theme_context: Optional[str] = None,
) -> str:
    """Return ``document`` with palette ``var()`` references replaced by literal colors."""
    return flatten_document(document, overrides, ratios=ratios, theme_context=theme_context).document


def flatten_file(
    input_path: Path,
    output_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, str]] = None,
    *,
    fmt: str = "svg",
    width: object = DEFAULT_WIDTH,
    theme_context: Optional[str] = None,
    debug_dir: Optional[Path] = None,
) -> Path:
    """Flatten an SVG file and write it as SVG or PNG; returns the written path.

    When PNG conversion fails the flattened SVG is written next to the
    requested PNG and :class:`ConversionError` is raised.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported output format: {fmt}")
    input_path = Path(input_path)
    if not input_path.exists():
        raise FileNotFoundError(f"SVG file not found: {input_path}")
    if output_path is None:
        output_path = input_path.with_suffix(".png") if fmt == "png" else input_path.with_suffix(".flat.svg")
    output_path = Path(output_path)

    LOGGER.info("Flattening %s", input_path.name)
    result = flatten_document(input_path.read_text(encoding="utf-8"), overrides, theme_context=theme_context)
    if debug_dir is not None:
        DebugDumper(Path(debug_dir)).dump(result.catalog, result.palette)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "svg":
        output_path.write_text(result.document, encoding="utf-8")
        return output_path

    if PngRenderer(output_path).render(result.document, width):
        return output_path
    fallback = output_path.with_suffix(".svg")
    fallback.write_text(result.document, encoding="utf-8")
    raise ConversionError(f"PNG conversion failed for {input_path.name}, saved SVG to {fallback}")


def build_overrides(args: argparse.Namespace) -> Dict[str, str]:
    """Collect the palette colors given on the command line."""
    overrides: Dict[str, str] = {}
    for slot in PUBLIC_SLOTS:
        value = getattr(args, slot, None)
        if value:
            overrides[slot] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="svg-flatten",
        description="Replace theme CSS variables in an SVG with literal colors",
    )
    parser.add_argument("input", help="SVG file, or a directory of SVG files with --batch")
    parser.add_argument("-o", "--output", help="Output file (default: stdout for SVG) or directory with --batch")
    parser.add_argument("-f", "--format", choices=FORMATS, default="svg", help="Output format (default: svg)")
    for slot in PUBLIC_SLOTS:
        parser.add_argument(f"--{slot}", metavar="HEX", help=f"Override the {slot} color")
    parser.add_argument("--theme-context", help="Resolve variables from scoped rules whose selector contains this text")
    parser.add_argument("--width", default=DEFAULT_WIDTH, help="PNG width in pixels (default: 800)")
    parser.add_argument("--batch", action="store_true", help="Flatten every .svg file in the input directory")
    parser.add_argument("-w", "--workers", type=int, default=None, help="Parallel workers for --batch (default: 4)")
    parser.add_argument("--debug-dir", help="Write extracted properties and palette as JSON here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line and return a process exit code."""
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)
    overrides = build_overrides(args)

    if args.batch:
        from svg_flattener.batch import DEFAULT_WORKERS, flatten_directory

        if not args.output:
            LOGGER.error("--output is required with --batch")
            return 1
        try:
            result = flatten_directory(
                Path(args.input),
                Path(args.output),
                overrides,
                fmt=args.format,
                width=args.width,
                workers=args.workers or DEFAULT_WORKERS,
                theme_context=args.theme_context,
            )
        except (FileNotFoundError, ValueError) as exc:
            LOGGER.error("%s", exc)
            return 1
        if result.total == 0:
            LOGGER.error("No .svg files found in %s", args.input)
            return 1
        return 0 if result.ok else 1

    input_path = Path(args.input)
    if not input_path.exists():
        LOGGER.error("Input file not found: %s", input_path)
        return 1

    if args.format == "svg" and not args.output:
        result = flatten_document(
            input_path.read_text(encoding="utf-8"), overrides, theme_context=args.theme_context
        )
        if args.debug_dir:
            DebugDumper(Path(args.debug_dir)).dump(result.catalog, result.palette)
        sys.stdout.write(result.document)
        return 0

    try:
        written = flatten_file(
            input_path,
            Path(args.output) if args.output else None,
            overrides,
            fmt=args.format,
            width=args.width,
            theme_context=args.theme_context,
            debug_dir=Path(args.debug_dir) if args.debug_dir else None,
        )
    except ConversionError as exc:
        LOGGER.error("%s", exc)
        return 1
    LOGGER.info("%s saved to %s", args.format.upper(), written)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
