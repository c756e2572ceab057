"""Unit tests for the substitution and cleanup passes."""
import unittest

from svg_flattener.model.property_model import PropertyCatalog
from svg_flattener.parser.palette_resolver import resolve_palette
from svg_flattener.renderer.rewriter import Rewriter


class RewriterTestBase(unittest.TestCase):
    def setUp(self) -> None:
        catalog = PropertyCatalog(global_={"--bg": "#FFFFFF", "--fg": "#000000", "--accent": "#FF0000"})
        self.palette = resolve_palette(catalog)
        self.rewriter = Rewriter(self.palette)


class SubstitutionTest(RewriterTestBase):
    """var() references to palette slots become literal colors."""

    def test_plain_reference(self) -> None:
        result = self.rewriter.substitute('<rect fill="var(--bg)" stroke="var(--accent)"/>')
        self.assertEqual(result, '<rect fill="#FFFFFF" stroke="#FF0000"/>')
        self.assertEqual(self.rewriter.stats.substitutions, 2)

    def test_derived_and_internal_slots(self) -> None:
        result = self.rewriter.substitute("fill: var(--_node-stroke); stroke: var( --border )")
        self.assertEqual(result, "fill: #cccccc; stroke: #cccccc")

    def test_fallback_is_discarded(self) -> None:
        self.assertEqual(self.rewriter.substitute('fill="var(--bg, #FF0000)"'), 'fill="#FFFFFF"')
        self.assertEqual(self.rewriter.substitute('fill="var(--bg, rgb(0,0,0))"'), 'fill="#FFFFFF"')
        self.assertEqual(self.rewriter.substitute('fill="var(--bg, var(--fallback))"'), 'fill="#FFFFFF"')
        self.assertEqual(
            self.rewriter.substitute("fill: var(--bg, var(--other, rgb(1, 2, 3))); x: 1"),
            "fill: #FFFFFF; x: 1",
        )

    def test_unknown_names_are_left_untouched(self) -> None:
        text = 'stroke="var(--undefined, #00FF00)" fill="var(--bg-alt)" color="var(--_texture)"'
        self.assertEqual(self.rewriter.substitute(text), text)

    def test_known_reference_inside_unknown_fallback(self) -> None:
        result = self.rewriter.substitute("fill: var(--custom, var(--fg))")
        self.assertEqual(result, "fill: var(--custom, #000000)")

    def test_unterminated_reference_is_left_as_is(self) -> None:
        text = '<rect fill="var(--bg, rgb(0,0,0" stroke="var(--fg)"/>'
        self.assertEqual(self.rewriter.substitute(text), '<rect fill="var(--bg, rgb(0,0,0" stroke="#000000"/>')


class StyleAttributeCleanupTest(RewriterTestBase):
    """Only substituted custom properties are dropped from style attributes."""

    def test_keeps_regular_declarations(self) -> None:
        result = self.rewriter.clean_style_attributes('<svg style="--bg: #fff; color: red;">')
        self.assertEqual(result, '<svg style="color: red">')

    def test_removes_emptied_attribute(self) -> None:
        result = self.rewriter.clean_style_attributes('<svg width="10" style="--bg: #fff;">')
        self.assertEqual(result, '<svg width="10">')
        self.assertEqual(self.rewriter.stats.attributes_removed, 1)

    def test_preserves_quote_character(self) -> None:
        result = self.rewriter.clean_style_attributes("<g style='--fg: #000; display: block;'>")
        self.assertEqual(result, "<g style='display: block'>")

    def test_unrelated_custom_properties_survive(self) -> None:
        result = self.rewriter.clean_style_attributes('<g style="--bg: #fff; --font: Inter; opacity: 0.5">')
        self.assertEqual(result, '<g style="--font: Inter; opacity: 0.5">')

    def test_declarations_without_colon_survive(self) -> None:
        result = self.rewriter.clean_style_attributes('<g style="--bg: #fff; weird">')
        self.assertEqual(result, '<g style="weird">')


class StyleBlockCleanupTest(RewriterTestBase):
    """Style blocks lose imports, palette declarations and emptied rules."""

    def test_removes_block_left_empty(self) -> None:
        svg = "<svg>\n  <style>\n    :root { --bg: #FFFFFF; --fg: #000000; }\n  </style>\n</svg>"
        result = self.rewriter.clean_style_blocks(svg)
        self.assertNotIn("<style", result)
        self.assertEqual(self.rewriter.stats.blocks_removed, 1)

    def test_strips_imports(self) -> None:
        css = (
            '<style>@import url("https://fonts.example/css?family=Inter;wght");\n'
            "@import 'theme.css';\n"
            "text { font-family: Inter; }</style>"
        )
        result = self.rewriter.clean_style_blocks(css)
        self.assertEqual(result, "<style>text { font-family: Inter; }</style>")

    def test_removes_emptied_scoped_rules_and_keeps_others(self) -> None:
        svg = (
            '<style type="text/css">\n'
            "  :root { --bg: #FFFFFF; --custom-plugin-var: #123456; }\n"
            "  .dark { --bg: #1a1a1a; --fg: #e5e5e5; }\n"
            "  @media print {\n"
            "    rect { fill: #000000; }\n"
            "  }\n"
            "</style>"
        )
        result = self.rewriter.clean_style_blocks(svg)
        self.assertTrue(result.startswith('<style type="text/css">'))
        self.assertIn("--custom-plugin-var: #123456", result)
        self.assertNotIn("--bg", result)
        self.assertNotIn(".dark", result)
        self.assertIn("@media print", result)
        self.assertIn("rect { fill: #000000; }", result)

    def test_declaration_without_trailing_semicolon(self) -> None:
        result = self.rewriter.clean_style_blocks("<style>:root { --bg: #FFFFFF }\n.a { fill: red; }</style>")
        self.assertEqual(result, "<style>.a { fill: red; }</style>")

    def test_media_block_emptied_by_removal_disappears(self) -> None:
        svg = "<style>@media (prefers-color-scheme: dark) { :root { --bg: #000; } }\n.a { fill: red; }</style>"
        self.assertEqual(self.rewriter.clean_style_blocks(svg), "<style>.a { fill: red; }</style>")

    def test_prefix_named_properties_survive(self) -> None:
        result = self.rewriter.clean_style_blocks("<style>:root { --bg-alt: #111; --my--bg: #222; }</style>")
        self.assertIn("--bg-alt: #111;", result)
        self.assertIn("--my--bg: #222;", result)


class RewriteTest(RewriterTestBase):
    def test_all_passes(self) -> None:
        svg = (
            '<svg style="--bg: #FFFFFF; --fg: #000000">'
            "<style>:root { --_line: var(--border); } .edge { stroke: var(--_node-stroke); }</style>"
            '<rect fill="var(--bg)"/></svg>'
        )
        result = self.rewriter.rewrite(svg)
        self.assertEqual(result, '<svg><style>.edge { stroke: #cccccc; }</style><rect fill="#FFFFFF"/></svg>')


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
