"""
Helper module behavioral tests (usage, help and version rendering).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is checked on plain text; colors are exercised but not asserted.
"""

from __future__ import annotations

import contextlib
import io
import sys
import unittest
from unittest import TestCase, mock

from clasp import ArgumentParser
from clasp import helper


def _sample(**options):
    parser = ArgumentParser(
        ["prog"], "Sample Application", "1.0.0", "Some really useful cli program.", **options
    )
    parser.add_help()
    parser.option("-c", "--cfg").required().metavar("FILE").description("sets the config file")
    parser.option("-s").flag().description("silent mode")
    parser.option("-m", "--mode").choices("fast", "safe")
    parser.positional("INPUT").required().description("file to read")
    parser.positional("OUTPUT")
    return parser


class TestUsage(TestCase):
    """Behavioral tests for the synthesized usage line."""

    def testUsageEntries(self):
        self.assertEqual(
            helper.usage(_sample(), width=200).plain,
            "usage: prog [-h | --help] (-c | --cfg) <FILE> [-s] [-m | --mode {fast,safe}] INPUT [OUTPUT]",
        )

    def testUsageWrapsUnderFirstEntry(self):
        lines = helper.usage(_sample(), width=60).plain.splitlines()
        self.assertGreater(len(lines), 1)
        for line in lines[1:]:
            self.assertTrue(line.startswith(" " * len("usage: prog ")))

    def testSingleNameRequiredOptionNotGrouped(self):
        parser = ArgumentParser(["prog"])
        parser.option("-o").required()
        self.assertEqual(helper.usage(parser).plain, "usage: prog -o <o>")

    def testDefaultMetavarFromName(self):
        parser = ArgumentParser(["prog"])
        parser.option("-o", "--output")
        self.assertEqual(helper.usage(parser).plain, "usage: prog [-o | --output <output>]")


class TestHelp(TestCase):
    """Behavioral tests for help and version messages."""

    def testHelpSections(self):
        text = _sample().help()
        self.assertTrue(text.startswith("Sample Application 1.0.0\nSome really useful cli program.\n"))
        self.assertIn("options:\n  -h, --help     show this help message and exit\n", text)
        self.assertIn("  -c, --cfg <FILE>\n                 sets the config file", text)
        self.assertIn("  -s             silent mode", text)
        self.assertIn("positionals:\n  INPUT          file to read\n  OUTPUT", text)

    def testHelpWithoutMetadata(self):
        parser = ArgumentParser(["prog"])
        parser.positional("FILE")
        self.assertEqual(parser.help(), "usage: prog [FILE]\n\npositionals:\n  FILE")

    def testColorfulHelpHasSamePlainText(self):
        self.assertEqual(_sample(colorful=True).help(), _sample().help())

    def testFancyHelpUsesPanel(self):
        text = _sample(fancy=True).help()
        self.assertIn("SAMPLE APPLICATION HELP", text)
        self.assertIn("usage: prog", text)

    def testPrintHelpToFile(self):
        buffer = io.StringIO()
        _sample().print_help(file=buffer)
        self.assertIn("usage: prog", buffer.getvalue())

    def testVersionMessage(self):
        self.assertEqual(helper.render_version(_sample()).plain, "Sample Application 1.0.0")

    def testVersionFallsBackToProg(self):
        parser = ArgumentParser(["/bin/tool"], version="2.0")
        self.assertEqual(helper.render_version(parser).plain, "tool 2.0")

    def testVacuousShellInputPrintsHelp(self):
        parser = _sample(shell=True)
        with contextlib.redirect_stdout(io.StringIO()) as stdout:
            self.assertFalse(parser.parse())
        self.assertIn("usage: prog", stdout.getvalue())

    def testHostStylesOverridePalette(self):
        with mock.patch.object(sys.modules["__main__"], "__styles__", {"choice": "red"}, create=True):
            self.assertEqual(helper._Painter(True).style("choice"), "red")
            self.assertEqual(helper._Painter(False).style("choice"), "")


if __name__ == "__main__":
    unittest.main()
