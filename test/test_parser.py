# python
"""
Parsing engine tests.

Scope
- Long/short flags, inline values, clusters and negations.
- Multi accumulation, last-write-wins, rest and "--" handling.
- Unknown flags (collected or rejected), defaults backfill.
- Fault kinds raised for malformed command lines.

Conventions
- Test method names follow CamelCase per project convention.
- Parsers are built straight from a Registry so faults always propagate.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from oppa import (
    Argument,
    InvalidArgumentError,
    InvalidBooleanUsageError,
    InvalidNumberError,
    MissingValueError,
    Parser,
    Registry,
    Result,
    Unknown,
    UnknownArgumentError,
    ValidationError,
)


def build(*arguments, allow_unknown=False):
    registry = Registry()
    for argument in arguments:
        registry.register(argument)
    return Parser(registry, allow_unknown=allow_unknown)


class TestFlags(TestCase):
    """Single flags, aliases and inline values."""

    def testEmpty(self):
        self.assertEqual(build().parse([]), Result({}, [], [], []))

    def testLongWithSeparateValue(self):
        result = build(Argument("foo", type="number")).parse(["--foo", "47"])
        self.assertEqual(result.values, {"foo": 47})

    def testLongWithInlineValue(self):
        result = build(Argument("foo")).parse(["--foo=a=b"])
        self.assertEqual(result.values, {"foo": "a=b"})

    def testInlineEmptyValue(self):
        result = build(Argument("foo")).parse(["--foo="])
        self.assertEqual(result.values, {"foo": ""})

    def testAliasesResolveToCanonicalName(self):
        parser = build(Argument("foo", type="number", alias=["f", "fizz"]))
        self.assertEqual(parser.parse(["-f", "1"]).values, {"foo": 1})
        self.assertEqual(parser.parse(["-f=2"]).values, {"foo": 2})
        self.assertEqual(parser.parse(["--fizz", "3"]).values, {"foo": 3})

    def testSingleValueTakesNextTokenVerbatim(self):
        result = build(Argument("foo")).parse(["--foo", "-x"])
        self.assertEqual(result.values, {"foo": "-x"})

    def testLastWriteWins(self):
        result = build(Argument("foo")).parse(["--foo", "a", "--foo", "b"])
        self.assertEqual(result.values, {"foo": "b"})

    def testMissingValue(self):
        with self.assertRaises(MissingValueError) as context:
            build(Argument("foo")).parse(["--foo"])
        self.assertEqual(str(context.exception), "Missing value for argument --foo")

    def testInvalidNumber(self):
        with self.assertRaises(InvalidNumberError):
            build(Argument("foo", type="number")).parse(["--foo", "1e2"])

    def testTokensMustBeStrings(self):
        with self.assertRaises(TypeError):
            build().parse("--foo")
        with self.assertRaises(TypeError):
            build().parse(["--foo", 1])


class TestBooleans(TestCase):
    """Boolean flags and their negated forms."""

    def setUp(self):
        self.parser = build(Argument("verbose", type="boolean", alias=["V", "loud"]))

    def testLongAndShort(self):
        self.assertEqual(self.parser.parse(["--verbose"]).values, {"verbose": True})
        self.assertEqual(self.parser.parse(["-V"]).values, {"verbose": True})

    def testNegated(self):
        self.assertEqual(self.parser.parse(["--no-verbose"]).values, {"verbose": False})

    def testNegatedThroughLongAlias(self):
        self.assertEqual(self.parser.parse(["--no-loud"]).values, {"verbose": False})

    def testInlineValueRejected(self):
        for token in ("--verbose=true", "--no-verbose=1", "-V=1"):
            with self.subTest(token=token):
                with self.assertRaises(InvalidBooleanUsageError):
                    self.parser.parse([token])

    def testNonNegatableHasNoNegatedForm(self):
        parser = build(Argument("force", type="boolean", negatable=False))
        with self.assertRaises(UnknownArgumentError):
            parser.parse(["--no-force"])

    def testPatternSeesFlagToken(self):
        parser = build(Argument("foo", type="boolean", match=r"^--foo$"))
        self.assertEqual(parser.parse(["--foo"]).values, {"foo": True})
        with self.assertRaises(ValidationError):
            parser.parse(["--no-foo"])

    def testPredicateSeesNegation(self):
        seen = []
        parser = build(Argument("foo", type="boolean", match=lambda value, raw, argument: seen.append(value) or True))
        parser.parse(["--foo", "--no-foo"])
        self.assertEqual(seen, [True, False])


class TestClusters(TestCase):
    """Short-flag clusters such as -abc."""

    def setUp(self):
        self.a = Argument("a", type="boolean")
        self.b = Argument("b", type="boolean")
        self.c = Argument("c")

    def testAllBooleans(self):
        result = build(self.a, self.b).parse(["-ab"])
        self.assertEqual(result.values, {"a": True, "b": True})

    def testLastMemberTakesNextToken(self):
        result = build(self.a, self.b, self.c).parse(["-abc", "value"])
        self.assertEqual(result.values, {"a": True, "b": True, "c": "value"})

    def testLastMemberTakesInlineValue(self):
        result = build(self.a, self.c).parse(["-ac=value"])
        self.assertEqual(result.values, {"a": True, "c": "value"})

    def testValueOnBooleanLastMemberRejected(self):
        parser = build(self.a, allow_unknown=True)
        with self.assertRaises(InvalidBooleanUsageError):
            parser.parse(["-xa=1"])

    def testNonBooleanLeadingMemberRejected(self):
        with self.assertRaises(MissingValueError) as context:
            build(self.a, self.c).parse(["-ca"])
        self.assertIn("-c", str(context.exception))

    def testUnknownMemberCollected(self):
        result = build(self.a, allow_unknown=True).parse(["-xa"])
        self.assertEqual(result.values, {"a": True})
        self.assertEqual(result.unknown, [Unknown("x", None)])

    def testUnknownMemberRejected(self):
        with self.assertRaises(UnknownArgumentError):
            build(self.a).parse(["-xa"])

    def testPatternSeesMemberFlagInAnyPosition(self):
        a = Argument("a", type="boolean", match=r"^-a$")
        parser = build(a, self.b)
        self.assertEqual(parser.parse(["-ab"]).values, {"a": True, "b": True})
        self.assertEqual(parser.parse(["-ba"]).values, {"b": True, "a": True})
        self.assertEqual(parser.parse(["-a"]).values, {"a": True})

    def testDashInShortNameRejected(self):
        with self.assertRaises(InvalidArgumentError) as context:
            build(self.a).parse(["-a-b"])
        self.assertEqual(str(context.exception), "Invalid argument: -a-b")


class TestMulti(TestCase):
    """Multi-valued arguments."""

    def testAccumulatesUntilNextFlag(self):
        parser = build(Argument("foo", type="number", multi=True), Argument("bar", type="boolean"))
        result = parser.parse(["--foo", "1", "2", "3", "--bar"])
        self.assertEqual(result.values, {"foo": [1, 2, 3], "bar": True})
        self.assertEqual(result.rest, [])

    def testAccumulatesAcrossOccurrences(self):
        parser = build(Argument("foo", multi=True, alias="f"))
        result = parser.parse(["--foo", "a", "-f", "b", "--foo=c"])
        self.assertEqual(result.values, {"foo": ["a", "b", "c"]})

    def testEachValueValidated(self):
        parser = build(Argument("foo", type="number", multi=True, match=lambda value, raw, argument: value > 0))
        self.assertEqual(parser.parse(["--foo", "1", "2"]).values, {"foo": [1, 2]})
        with self.assertRaises(ValidationError):
            parser.parse(["--foo", "1", "0"])

    def testNoValuesFallsBackToDefault(self):
        parser = build(Argument("foo", multi=True, default=["x"]))
        self.assertEqual(parser.parse(["--foo"]).values, {"foo": ["x"]})


class TestRestAndDashdash(TestCase):
    """Positional rest and the "--" separator."""

    def testDashdash(self):
        result = build(Argument("foo", type="number")).parse(["--foo", "47", "bar", "--", "baz"])
        self.assertEqual(result.values, {"foo": 47})
        self.assertEqual(result.rest, ["bar"])
        self.assertEqual(result.dashdash, ["--", "baz"])

    def testOnlyFirstDashdashSplits(self):
        result = build().parse(["--", "a", "--", "b"])
        self.assertEqual(result.rest, [])
        self.assertEqual(result.dashdash, ["--", "a", "--", "b"])

    def testFirstBareTokenStopsScanning(self):
        result = build(Argument("foo"), Argument("bar", type="boolean")).parse(["--foo", "x", "file", "--bar"])
        self.assertEqual(result.values, {"foo": "x"})
        self.assertEqual(result.rest, ["file", "--bar"])

    def testRestBeforeDashdash(self):
        result = build().parse(["a", "b", "--", "-c"])
        self.assertEqual(result.rest, ["a", "b"])
        self.assertEqual(result.dashdash, ["--", "-c"])


class TestUnknown(TestCase):
    """Unrecognized flags."""

    def testRejectedByDefault(self):
        with self.assertRaises(UnknownArgumentError) as context:
            build().parse(["--nope"])
        self.assertEqual(str(context.exception), "Unknown argument: --nope")

    def testCollectedWhenAllowed(self):
        parser = build(Argument("foo", type="number", alias="f"), allow_unknown=True)
        result = parser.parse(["-f", "0", "-g=x"])
        self.assertEqual(result.values, {"foo": 0})
        self.assertEqual(result.unknown, [Unknown("g", "x")])

    def testUnknownLongWithoutValue(self):
        result = build(allow_unknown=True).parse(["--what"])
        self.assertEqual(result.unknown, [Unknown("what", None)])


class TestDefaults(TestCase):
    """Backfill of defaults after scanning."""

    def testDefault(self):
        self.assertEqual(build(Argument("foo", type="number", default=5)).parse([]).values, {"foo": 5})

    def testRealDefaultWins(self):
        parser = build(Argument("foo", type="number", default=5, real_default=7))
        self.assertEqual(parser.parse([]).values, {"foo": 7})

    def testSuppliedValueWins(self):
        parser = build(Argument("foo", type="number", default=5))
        self.assertEqual(parser.parse(["--foo", "1"]).values, {"foo": 1})

    def testBackfillFollowsRegistrationOrder(self):
        parser = build(Argument("b", default="1"), Argument("a", default="2"))
        self.assertEqual(list(parser.parse([]).values), ["b", "a"])

    def testMultiDefaultNotShared(self):
        parser = build(Argument("foo", multi=True, default=["a"]))
        first = parser.parse([])
        first.values["foo"].append("b")
        self.assertEqual(parser.parse([]).values, {"foo": ["a"]})

    def testSuppliedMultiDoesNotExtendDefault(self):
        parser = build(Argument("foo", multi=True, default=["a"]))
        self.assertEqual(parser.parse(["--foo", "b"]).values, {"foo": ["b"]})

    def testParsesAreIndependent(self):
        parser = build(Argument("foo", multi=True))
        self.assertEqual(parser.parse(["--foo", "a"]).values, {"foo": ["a"]})
        self.assertEqual(parser.parse(["--foo", "b"]).values, {"foo": ["b"]})


if __name__ == "__main__":
    unittest.main()
