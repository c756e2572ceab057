"""Unit tests for width validation and PNG conversion."""
import os
import tempfile
import unittest
from pathlib import Path

from svg_flattener.renderer.png_renderer import CommandResult, PngRenderer, SubprocessRunner
from svg_flattener.renderer.utils import rsvg_install_help, validate_width


class ValidateWidthTest(unittest.TestCase):
    """Widths outside [100, 10000] or unparseable fall back to the default."""

    def test_accepts_valid_widths(self) -> None:
        self.assertEqual(validate_width(100), 100)
        self.assertEqual(validate_width(800), 800)
        self.assertEqual(validate_width(10000), 10000)
        self.assertEqual(validate_width("500"), 500)
        self.assertEqual(validate_width(" 640px"), 640)
        self.assertEqual(validate_width(1200.9), 1200)

    def test_rejects_out_of_range(self) -> None:
        for width in (99, 0, -100, 10001, 50000):
            with self.subTest(width=width):
                self.assertEqual(validate_width(width), 800)

    def test_rejects_invalid_inputs(self) -> None:
        for width in (float("nan"), "invalid", None, "", True, [800]):
            with self.subTest(width=width):
                self.assertEqual(validate_width(width), 800)

    def test_custom_default(self) -> None:
        self.assertEqual(validate_width(50, 1200), 1200)
        self.assertEqual(validate_width("bad", 600), 600)


class FakeRunner:
    """Records invocations and returns a canned result."""

    def __init__(self, result: CommandResult) -> None:
        self.result = result
        self.calls = []
        self.temp_existed = False

    def run(self, args, timeout=None):
        self.calls.append((list(args), timeout))
        self.temp_existed = os.path.exists(args[3])
        return self.result


class PngRendererTest(unittest.TestCase):
    """Conversion shells out to rsvg-convert and fails closed."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.output = Path(self._tmp.name) / "out.png"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_success_invokes_rsvg_and_removes_temp_file(self) -> None:
        runner = FakeRunner(CommandResult(0, ""))
        self.assertTrue(PngRenderer(self.output, runner).render("<svg/>", "1200"))
        args, timeout = runner.calls[0]
        self.assertEqual(args[:3], ["rsvg-convert", "--width", "1200"])
        self.assertEqual(args[4:], ["-o", str(self.output)])
        self.assertEqual(timeout, 30)
        self.assertTrue(runner.temp_existed)
        self.assertFalse(os.path.exists(args[3]))

    def test_invalid_width_uses_default(self) -> None:
        runner = FakeRunner(CommandResult(0, ""))
        PngRenderer(self.output, runner).render("<svg/>", 50000)
        self.assertEqual(runner.calls[0][0][2], "800")

    def test_failures_return_false(self) -> None:
        for result in (
            CommandResult(None, "", not_found=True),
            CommandResult(1, "bad svg"),
            CommandResult(None, "", timed_out=True),
        ):
            with self.subTest(result=result):
                runner = FakeRunner(result)
                with self.assertLogs("svg_flattener.renderer.png_renderer", level="ERROR"):
                    self.assertFalse(PngRenderer(self.output, runner).render("<svg/>"))
                self.assertFalse(os.path.exists(runner.calls[0][0][3]))

    def test_subprocess_runner_reports_missing_binary(self) -> None:
        result = SubprocessRunner().run(["svg-flatten-no-such-binary-for-tests"])
        self.assertTrue(result.not_found)
        self.assertIsNone(result.returncode)


class InstallHelpTest(unittest.TestCase):
    def test_platform_specific_text(self) -> None:
        self.assertIn("brew install librsvg", rsvg_install_help("darwin"))
        self.assertIn("apt-get install librsvg2-bin", rsvg_install_help("linux"))
        self.assertIn("choco install librsvg", rsvg_install_help("win32"))
        self.assertIn("LibRsvg", rsvg_install_help("sunos5"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
