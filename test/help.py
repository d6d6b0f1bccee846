"""
Help renderer behavioral tests.

Scope
- Exact plain-text layout: usage, banner, groups, entries, epilog.
- Description column, wrapping, defaults, hidden options.
- Styled rendering and printing through a rich Console.

Conventions
- Test method names follow CamelCase per project convention.
- Expected layouts are spelled out line by line.
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console
from rich.text import Text

from optarg import Arity, Registry, format_help, format_version, print_help, render_help


def _registry(**kwargs):
    registry = Registry("demo", banner="Process files.", epilog="See the manual for more.", **kwargs)
    registry.add(
        "-o", "--output", arity=Arity.REQUIRED, metavar="FILE",
        descr="write the output of the run to this file instead of printing it",
    )
    registry.add("-d", "--depth", arity=Arity.OPTIONAL, default="3", descr="how deep")
    registry.add("-v", "--verbose")
    registry.add("--long-only", arity=Arity.OPTIONAL, descr="no short variant")
    registry.add("-x", hidden=True, descr="secret")
    registry.add("-q", "--quiet", group="output", descr="print nothing")
    return registry


class TestHelpLayout(TestCase):
    """Plain-text help layout."""

    def testFullLayout(self):
        expected = "\n".join([
            "usage: demo [-h] [-o FILE] [-d [DEPTH]] [-v] [--long-only [LONG-ONLY]] [-q]",
            "",
            "Process files.",
            "",
            "options:",
            "  -h, --help".ljust(26) + "show this help message and exit",
            "  -o, --output FILE".ljust(26) + "write the output of the run to this file instead of",
            " " * 26 + "printing it",
            "  -d, --depth [DEPTH]".ljust(26) + "how deep (default: 3)",
            "  -v, --verbose",
            "      --long-only [LONG-ONLY]",
            " " * 26 + "no short variant",
            "",
            "output:",
            "  -q, --quiet".ljust(26) + "print nothing",
            "",
            "See the manual for more.",
        ])
        self.assertEqual(format_help(_registry()), expected)

    def testRegistryMethodMatchesFunction(self):
        registry = _registry()
        self.assertEqual(registry.format_help(), format_help(registry))

    def testMinimalRegistry(self):
        expected = "\n".join([
            "usage: demo [-h]",
            "",
            "options:",
            "  -h, --help".ljust(26) + "show this help message and exit",
        ])
        self.assertEqual(format_help(Registry("demo")), expected)

    def testNoOptionsAtAll(self):
        self.assertEqual(format_help(Registry("demo", help=False)), "usage: demo")

    def testExplicitUsage(self):
        registry = Registry("demo", usage="[options] FILE...")
        self.assertTrue(format_help(registry).startswith("usage: demo [options] FILE...\n\n"))

    def testHiddenOptionsOmitted(self):
        text = format_help(_registry())
        self.assertNotIn("-x", text)
        self.assertNotIn("secret", text)

    def testHiddenOnlyGroupSkipped(self):
        registry = Registry("demo")
        registry.add("-z", group="internal", hidden=True)
        self.assertNotIn("internal:", format_help(registry))

    def testShortOnlyEntry(self):
        registry = Registry("demo", help=False)
        registry.add("-n", arity=Arity.REQUIRED, descr="a number")
        self.assertEqual(
            format_help(registry).splitlines()[-1],
            "  -n ARG".ljust(26) + "a number",
        )

    def testLongNamesBreakToNextLine(self):
        registry = Registry("demo", help=False)
        registry.add("--a-rather-long-name", arity=Arity.REQUIRED, descr="text")
        self.assertEqual(format_help(registry).splitlines()[-2:], [
            "      --a-rather-long-name A-RATHER-LONG-NAME",
            " " * 26 + "text",
        ])

    def testVersionHelperListed(self):
        registry = Registry("demo", version="1.0")
        self.assertEqual(
            format_help(registry).splitlines()[-1],
            "      --version".ljust(26) + "show the version and exit",
        )

    def testOverriddenShortHelpListed(self):
        registry = Registry("demo")
        registry.add("-h", "--host", arity=Arity.REQUIRED, descr="server host")
        lines = format_help(registry).splitlines()
        self.assertEqual(lines[0], "usage: demo [--help] [-h HOST]")
        self.assertEqual(lines[3], "      --help".ljust(26) + "show this help message and exit")
        self.assertEqual(lines[4], "  -h, --host HOST".ljust(26) + "server host")


class TestHelpWrapping(TestCase):
    """Width handling."""

    def setUp(self):
        self.registry = Registry("demo", width=40)
        for name in ("-a", "-b", "-c", "-d"):
            self.registry.add(name, arity=Arity.REQUIRED, metavar="VALUE")

    def testUsageWrapsWithHangingIndent(self):
        lines = format_help(self.registry).splitlines()
        self.assertEqual(lines[0], "usage: demo [-h] [-a VALUE] [-b VALUE]")
        self.assertEqual(lines[1], " " * 12 + "[-c VALUE] [-d VALUE]")

    def testLinesFitWidth(self):
        registry = Registry("demo", width=40, banner="word " * 30)
        registry.add("--many", descr="longer description " * 4)
        for line in format_help(registry).splitlines():
            self.assertLessEqual(len(line), 40)

    def testWidthOverride(self):
        registry = Registry("demo", banner="word " * 30)
        narrow = format_help(registry, width=40)
        wide = format_help(registry)
        self.assertGreater(len(narrow.splitlines()), len(wide.splitlines()))


class TestHelpRendering(TestCase):
    """Styled rendering and printing."""

    def testColorfulRenderHasSpans(self):
        registry = _registry()
        styled = render_help(registry, colorful=True)
        plain = render_help(registry)
        self.assertTrue(styled.spans)
        self.assertFalse(plain.spans)
        self.assertEqual(styled.plain, plain.plain)

    def testStyledTextKeepsItsSpans(self):
        registry = Registry("demo", colorful=True, banner=Text("BANNER", "bold red"))
        registry.add("-x", descr=Text("styled", "blue"))
        rendered = render_help(registry)
        spans = [(rendered.plain[span.start:span.end], str(span.style)) for span in rendered.spans]
        self.assertIn(("BANNER", "bold red"), spans)
        self.assertIn(("styled", "blue"), spans)

    def testStyledTextIsPlainWithoutColors(self):
        registry = Registry("demo", banner=Text("BANNER", "bold red"))
        registry.add("-d", arity=Arity.OPTIONAL, default="3", descr=Text("styled", "blue"))
        rendered = render_help(registry)
        self.assertFalse(rendered.spans)
        self.assertIn("BANNER", rendered.plain)
        self.assertIn("  -d [ARG]".ljust(26) + "styled (default: 3)", rendered.plain)

    def testStyledTextWraps(self):
        registry = Registry("demo", width=40, colorful=True)
        registry.add("--many", descr=Text("longer description " * 4, "blue"))
        lines = render_help(registry).plain.splitlines()
        self.assertEqual(lines[-4:], [" " * 26 + "longer", " " * 26 + "description"] * 2)

    def testStylesOverrideFromMain(self):
        with mock.patch.object(sys.modules["__main__"], "__styles__", {"option-name": "red"}, create=True):
            rendered = render_help(_registry(), colorful=True)
        spans = [(rendered.plain[span.start:span.end], str(span.style)) for span in rendered.spans]
        self.assertIn(("--verbose", "red"), spans)
        self.assertNotIn(("--verbose", "bold #00E6FF"), spans)

    def testFormatHelpIsPlainWhenColorful(self):
        registry = _registry(colorful=True)
        self.assertEqual(format_help(registry), format_help(_registry()))

    def testPrintHelp(self):
        console = Console(file=io.StringIO(), width=80, color_system=None)
        registry = _registry()
        print_help(registry, console=console)
        self.assertEqual(console.file.getvalue(), format_help(registry) + "\n")

    def testPrintFancyHelp(self):
        console = Console(file=io.StringIO(), width=100, color_system=None)
        _registry(fancy=True).print_help(console=console)
        output = console.file.getvalue()
        self.assertIn("[ DEMO HELP ]", output)
        self.assertIn("show this help message and exit", output)

    def testFormatVersion(self):
        self.assertEqual(format_version(Registry("demo", version="1.2.3")), "demo 1.2.3")


if __name__ == "__main__":
    unittest.main()
