"""
Converters module behavioral tests (built-ins, fallback and isolation).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import decimal
import pathlib
import unittest
from unittest import TestCase

from clasp import Converters, defaults
from clasp.faults import ConversionError, FaultCode


class TestConverters(TestCase):
    """Behavioral tests for the conversion registry."""

    def setUp(self):
        self.converters = Converters()

    def testBuiltinInteger(self):
        self.assertEqual(self.converters.convert(int, "123"), 123)
        self.assertEqual(self.converters.convert(int, "-7"), -7)

    def testBuiltinFloat(self):
        self.assertEqual(self.converters.convert(float, "3.14"), 3.14)

    def testBuiltinBoolean(self):
        for text, expected in (("", True), ("1", True), ("true", True), ("0", False), ("yes", False)):
            with self.subTest(text=text):
                self.assertIs(self.converters.convert(bool, text), expected)

    def testBuiltinString(self):
        self.assertEqual(self.converters.convert(str, "hello"), "hello")

    def testUnregisteredTypeUsedAsConstructor(self):
        self.assertEqual(self.converters.convert(pathlib.Path, "a/b"), pathlib.Path("a/b"))

    def testFailureWrapped(self):
        with self.assertRaises(ConversionError) as context:
            self.converters.convert(int, "abc")
        self.assertEqual(context.exception.options["code"], FaultCode.CONVERSION_FAILED)
        self.assertEqual(context.exception.options["value"], "abc")
        self.assertIsInstance(context.exception.__cause__, ValueError)

    def testArithmeticFailureWrapped(self):
        with self.assertRaises(ConversionError) as context:
            self.converters.convert(decimal.Decimal, "abc")
        self.assertIsInstance(context.exception.__cause__, decimal.InvalidOperation)

    def testLookupFailureWrapped(self):
        self.converters.register(dict, lambda value: {"red": 1}[value])
        with self.assertRaises(ConversionError) as context:
            self.converters.convert(dict, "blue")
        self.assertIsInstance(context.exception.options["exception"], KeyError)

    def testRegisterDecorator(self):
        @self.converters.register(pathlib.Path)
        def path(value):
            return pathlib.Path(value).with_suffix(".txt")

        self.assertIn(pathlib.Path, self.converters)
        self.assertEqual(self.converters.convert(pathlib.Path, "notes"), pathlib.Path("notes.txt"))

    def testRegisterRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            self.converters.register(int, "int")

    def testCopyIsIndependent(self):
        copy = self.converters.copy()
        copy.register(complex, complex)
        self.assertIn(complex, copy)
        self.assertNotIn(complex, self.converters)
        self.assertEqual(len(copy), len(self.converters) + 1)

    def testDefaultsHoldBuiltins(self):
        for type in (int, float, bool, str):
            self.assertIn(type, defaults)


if __name__ == "__main__":
    unittest.main()
