"""
Value converter behavioral tests.

Scope
- Scalars (int, str, bool, float, Decimal, date, datetime, Enum), nullable and list types.
- Empty-token zero values.
- Error taxonomy: FormatError vs RangeError vs DateError vs UnknownTypeError, with their messages.
- Default assignability, type inference from defaults and usage descriptions.
- Round trips from a value to its token and back for int, str, bool and dates.

Conventions
- Test method names follow CamelCase per project convention.
"""
import datetime
import decimal
import enum
import typing
import unittest
from typing import Annotated
from unittest import TestCase

from argosy import FormatError, RangeError, DateError, UnknownTypeError, ConversionError, FaultCode
from argosy.converters import convert, zero, accepts, infer, describe, render, can_be_date, parse_date


class Color(enum.Enum):
    Red = 1
    Green = 2


class Level(enum.Enum):
    LOW = "low"
    HIGH = "high"


class TestScalars(TestCase):
    def testIntConverts(self):
        self.assertEqual(convert("42", int), 42)
        self.assertEqual(convert("-7", int), -7)

    def testIntBadFormat(self):
        with self.assertRaises(FormatError) as context:
            convert("abc", int)
        self.assertEqual(context.exception.message, 'Could not convert "abc" to int')
        self.assertEqual(context.exception.code, FaultCode.BAD_FORMAT)

    def testIntTooManyDigitsIsRange(self):
        with self.assertRaises(RangeError) as context:
            convert("9" * 10000, int)
        self.assertTrue(context.exception.message.endswith('" is too big or too small'))

    def testStringIsVerbatim(self):
        self.assertEqual(convert("Hello World", str), "Hello World")

    def testBoolCaseInsensitive(self):
        self.assertIs(convert("true", bool), True)
        self.assertIs(convert("FALSE", bool), False)

    def testBoolBadFormat(self):
        with self.assertRaises(FormatError) as context:
            convert("yes", bool)
        self.assertEqual(str(context.exception), 'Could not convert "yes" to bool')

    def testFloatConverts(self):
        self.assertEqual(convert("1.5", float), 1.5)

    def testFloatOverflowIsRange(self):
        with self.assertRaises(RangeError) as context:
            convert("1e400", float)
        self.assertEqual(context.exception.message, 'Value "1e400" is too big or too small')

    def testDecimalConverts(self):
        self.assertEqual(convert("10.25", decimal.Decimal), decimal.Decimal("10.25"))

    def testDecimalBadFormat(self):
        with self.assertRaises(FormatError) as context:
            convert("ten", decimal.Decimal)
        self.assertEqual(context.exception.message, 'Could not convert "ten" to decimal.Decimal')

    def testDecimalOverflowIsRange(self):
        with self.assertRaises(RangeError):
            convert("1e999999999999", decimal.Decimal)

    def testEnumByName(self):
        self.assertIs(convert("Red", Color), Color.Red)
        self.assertIs(convert("green", Color), Color.Green)

    def testEnumByValue(self):
        self.assertIs(convert("2", Color), Color.Green)
        self.assertIs(convert("high", Level), Level.HIGH)

    def testEnumBadFormat(self):
        with self.assertRaises(FormatError):
            convert("Blue", Color)

    def testAnnotatedIsTransparent(self):
        self.assertEqual(convert("3", Annotated[int, "meta"]), 3)


class TestDates(TestCase):
    def testDateConverts(self):
        self.assertEqual(convert("31-12-2020", datetime.date), datetime.date(2020, 12, 31))

    def testDatetimeConverts(self):
        self.assertEqual(convert("01-02-2003", datetime.datetime), datetime.datetime(2003, 2, 1))

    def testImpossibleCalendarDate(self):
        with self.assertRaises(DateError) as context:
            convert("31-02-2020", datetime.date)
        self.assertEqual(context.exception.message, "Could not convert 31-02-2020 to Date")
        self.assertEqual(context.exception.code, FaultCode.BAD_DATE)

    def testWrongSegmentCount(self):
        with self.assertRaises(DateError) as context:
            parse_date("12-2020")
        self.assertEqual(context.exception.message, "Could not convert 12-2020 to Date")

    def testNonNumericSegmentUsesIntPath(self):
        with self.assertRaises(FormatError) as context:
            convert("aa-12-2020", datetime.date)
        self.assertEqual(context.exception.message, 'Could not convert "aa" to int')

    def testCanBeDate(self):
        self.assertTrue(can_be_date("01-01-2000"))
        self.assertFalse(can_be_date("2000"))
        self.assertFalse(can_be_date("32-01-2000"))


class TestEmptyAndNullable(TestCase):
    def testEmptyTokenZeroValues(self):
        self.assertEqual(convert("", int), 0)
        self.assertIs(convert("", bool), False)
        self.assertEqual(convert("", float), 0.0)
        self.assertEqual(convert("", decimal.Decimal), decimal.Decimal(0))
        self.assertIsNone(convert("", str))
        self.assertIsNone(convert("", datetime.date))
        self.assertIsNone(convert("", Color))

    def testNullableEmptyIsNone(self):
        self.assertIsNone(convert("", int | None))
        self.assertIsNone(convert("", typing.Optional[bool]))

    def testNullableUnwraps(self):
        self.assertEqual(convert("5", int | None), 5)
        self.assertEqual(convert("01-01-2001", typing.Optional[datetime.date]), datetime.date(2001, 1, 1))

    def testZero(self):
        self.assertEqual(zero(int), 0)
        self.assertIsNone(zero(int | None))
        self.assertIsNone(zero(str))


class TestArrays(TestCase):
    def testIntArray(self):
        self.assertEqual(convert("1+2+3", list[int]), [1, 2, 3])

    def testStringArray(self):
        self.assertEqual(convert("a+b", list[str]), ["a", "b"])
        self.assertEqual(convert("single", list), ["single"])

    def testMalformedSegmentFailsWhole(self):
        with self.assertRaises(FormatError) as context:
            convert("1+x+3", list[int])
        self.assertEqual(context.exception.message, 'Could not convert "x" to int')

    def testEmptyArrayToken(self):
        self.assertEqual(convert("", list[int]), [0])


class TestUnknownType(TestCase):
    def testUnknownTypeFailsHard(self):
        with self.assertRaises(UnknownTypeError) as context:
            convert("1", complex)
        self.assertEqual(context.exception.message, "Unknown type is used in your method: complex")
        self.assertIsInstance(context.exception, ConversionError)

    def testUnionIsUnknown(self):
        with self.assertRaises(UnknownTypeError):
            convert("1", int | str)

    def testNonStringTokenRejected(self):
        with self.assertRaises(TypeError):
            convert(1, int)


class TestAccepts(TestCase):
    def testExactTypes(self):
        self.assertTrue(accepts(int, 0))
        self.assertTrue(accepts(str, "0"))
        self.assertTrue(accepts(bool, False))
        self.assertTrue(accepts(Color, Color.Red))

    def testBoolIsNotAnInt(self):
        self.assertFalse(accepts(int, True))
        self.assertFalse(accepts(bool, 0))

    def testNumericWidening(self):
        self.assertTrue(accepts(float, 1))
        self.assertTrue(accepts(decimal.Decimal, 1))
        self.assertFalse(accepts(int, 1.5))

    def testNone(self):
        self.assertTrue(accepts(str, None))
        self.assertTrue(accepts(int | None, None))
        self.assertTrue(accepts(list[int], None))
        self.assertFalse(accepts(int, None))

    def testArrays(self):
        self.assertTrue(accepts(list[int], [1, 2]))
        self.assertTrue(accepts(list[str], ("a",)))
        self.assertFalse(accepts(list[int], ["a"]))
        self.assertFalse(accepts(list[int], 1))

    def testUnknownAcceptsNothing(self):
        self.assertFalse(accepts(complex, 1j))


class TestDescribe(TestCase):
    def testDescriptions(self):
        self.assertEqual(describe(int), "number")
        self.assertEqual(describe(str), "value")
        self.assertEqual(describe(list[int]), "number[+number]")
        self.assertEqual(describe(list[str]), "value[+value]")
        self.assertEqual(describe(datetime.date), "dd-mm-yyyy")
        self.assertEqual(describe(float), "decimal")
        self.assertEqual(describe(Color), "Red|Green")
        self.assertEqual(describe(int | None), "number")

    def testRender(self):
        self.assertEqual(render("0"), "'0'")
        self.assertEqual(render(0), "0")
        self.assertEqual(render(False), "False")
        self.assertEqual(render(datetime.date(2020, 1, 2)), "02-01-2020")
        self.assertEqual(render(Color.Red), "Red")
        self.assertEqual(render([1, 2]), "1+2")


class TestInfer(TestCase):
    def testScalarDefaults(self):
        for default, expected in ((3, int), (True, bool), (1.5, float), ("x", str), (decimal.Decimal("2"), decimal.Decimal),
                                  (datetime.date(2020, 1, 2), datetime.date), (Color.Red, Color)):
            with self.subTest(default=default):
                self.assertIs(infer(default), expected)

    def testListDefaults(self):
        self.assertEqual(infer([1, 2]), list[int])
        self.assertEqual(infer(("a",)), list[str])
        self.assertIs(infer([]), str)
        self.assertIs(infer([1, "a"]), str)

    def testEverythingElseIsStr(self):
        for default in (None, object(), {"a": 1}):
            with self.subTest(default=default):
                self.assertIs(infer(default), str)


class TestRoundTrip(TestCase):
    def testInt(self):
        for value in (0, 1, -1, 42, -2147483648, 10 ** 18):
            with self.subTest(value=value):
                self.assertEqual(convert(str(value), int), value)

    def testStr(self):
        for value in ("a", "hello world", "a:b", "-x", "/x", "0"):
            with self.subTest(value=value):
                self.assertEqual(convert(value, str), value)

    def testBool(self):
        for value in (True, False):
            with self.subTest(value=value):
                self.assertIs(convert(str(value).lower(), bool), value)
                self.assertIs(convert(str(value), bool), value)

    def testDate(self):
        for value in (datetime.date(2000, 1, 1), datetime.date(2024, 2, 29), datetime.date(1999, 12, 31), datetime.date(1, 1, 1)):
            with self.subTest(value=value):
                token = f"{value.day:02d}-{value.month:02d}-{value.year:04d}"
                self.assertEqual(convert(token, datetime.date), value)


if __name__ == '__main__':
    unittest.main()
