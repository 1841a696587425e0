# python
"""
Resolver module behavioral tests (subcommand lookup over flag-laden vectors).

Scope
- Validate bare-token extraction (strip_flags) against declared flags.
- Validate descent by name and alias, called_as and the remaining vector.
- Validate the default and declared positional policies applied by resolve().

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from fuelcell import Command, args_minus_first, exact_args, find, resolve, strip_flags
from fuelcell.faults import UnknownCommandError


class TestStripFlags(TestCase):
    """Behavioral tests for bare-token extraction."""

    def setUp(self):
        self.root = Command("app")
        self.root.global_flag("verbose", "v", type=bool)
        self.root.global_flag("config", "c")

    def testEmptyVector(self):
        self.assertEqual(strip_flags([], self.root), [])

    def testUnknownLongFlagConsumesValue(self):
        self.assertEqual(strip_flags(["--port", "8080", "serve"], self.root), ["serve"])

    def testBoolFlagDoesNotConsume(self):
        self.assertEqual(strip_flags(["-v", "serve"], self.root), ["serve"])
        self.assertEqual(strip_flags(["--verbose", "serve"], self.root), ["serve"])

    def testValueFlagConsumes(self):
        self.assertEqual(strip_flags(["-c", "file", "serve"], self.root), ["serve"])

    def testLongAndShortSpellingsCheckedSeparately(self):
        root = Command("tool")
        root.flag("x", type=bool)
        root.flag("xray", "x")
        self.assertEqual(strip_flags(["-x", "val", "serve"], root), ["serve"])
        self.assertEqual(strip_flags(["--x", "serve"], root), ["serve"])

    def testEqualsFormsConsumeNothing(self):
        self.assertEqual(strip_flags(["--port=80", "serve", "-c=x", "now"], self.root), ["serve", "now"])

    def testTerminatorEndsScan(self):
        self.assertEqual(strip_flags(["serve", "--", "other"], self.root), ["serve"])

    def testLoneDashAndEmptyTokensSkipped(self):
        self.assertEqual(strip_flags(["-", "", "serve"], self.root), ["serve"])

    def testArgsMinusFirstRemovesFirstOccurrence(self):
        self.assertEqual(args_minus_first(["a", "b", "a"], "a"), ["b", "a"])
        self.assertEqual(args_minus_first(["a"], "z"), ["a"])


class TestResolve(TestCase):
    """Behavioral tests for finding the target command."""

    def setUp(self):
        self.root = Command("app")
        self.serve = Command("serve", aliases=["s"], run=lambda command, args: None)
        self.remote = Command("remote")
        self.add = Command("add", run=lambda command, args: None)
        self.root.add(self.serve, self.remote)
        self.remote.add(self.add)
        self.serve.flag("port", "p", type=int)
        self.root.global_flag("verbose", "v", type=bool)

    def testAliasWithFlagsAndExtra(self):
        command, args = resolve(self.root, ["s", "--port", "8080", "extra"])
        self.assertIs(command, self.serve)
        self.assertEqual(args, ["--port", "8080", "extra"])
        self.assertEqual(self.serve.called_as, "s")
        self.assertEqual(strip_flags(args, command), ["extra"])

    def testGlobalBoolBeforeCommand(self):
        command, args = resolve(self.root, ["-v", "serve"])
        self.assertIs(command, self.serve)
        self.assertEqual(args, ["-v"])

    def testEqualsFlagBeforeCommand(self):
        command, args = resolve(self.root, ["--port=80", "serve"])
        self.assertIs(command, self.serve)
        self.assertEqual(args, ["--port=80"])

    def testNestedDescent(self):
        command, args = resolve(self.root, ["remote", "add", "origin"])
        self.assertIs(command, self.add)
        self.assertEqual(args, ["origin"])
        self.assertEqual(self.add.called_as, "add")

    def testTerminatorKeepsRoot(self):
        command, args = resolve(self.root, ["--", "serve"])
        self.assertIs(command, self.root)
        self.assertEqual(args, ["--", "serve"])

    def testEmptyVectorKeepsRoot(self):
        self.assertEqual(resolve(self.root, []), (self.root, []))

    def testUnknownCommandAtRoot(self):
        with self.assertRaises(UnknownCommandError) as context:
            resolve(self.root, ["serv"])
        fault = context.exception
        self.assertIs(fault.tool, self.root)
        self.assertEqual(fault.suggestions, ("serve",))
        self.assertIn('unknown command "serv" for "app"', str(fault))
        self.assertIn("Did you mean this?", str(fault))

    def testSuggestionsDisabled(self):
        quiet = Command("quiet", disable_suggestions=True)
        quiet.add(Command("serve"))
        with self.assertRaises(UnknownCommandError) as context:
            resolve(quiet, ["serv"])
        self.assertEqual(context.exception.suggestions, ())
        self.assertNotIn("Did you mean", str(context.exception))

    def testNonRootWithChildrenAcceptsLeftovers(self):
        command, args = resolve(self.root, ["remote", "origin"])
        self.assertIs(command, self.remote)
        self.assertEqual(args, ["origin"])

    def testDeclaredValidatorLeftToLifecycle(self):
        strict = Command("strict", args=exact_args(1))
        self.root.add(strict)
        self.assertEqual(resolve(self.root, ["strict", "--help"]), (strict, ["--help"]))

    def testDeclaredValidatorReplacesDefaultPolicy(self):
        lenient = Command("lenient", args=lambda command, args: None)
        lenient.add(Command("child"))
        self.assertEqual(resolve(lenient, ["bogus"]), (lenient, ["bogus"]))

    def testDefaultValidatorCanBeDisabled(self):
        command, args = resolve(self.root, ["bogus"], default_validator=None)
        self.assertIs(command, self.root)
        self.assertEqual(args, ["bogus"])

    def testFindDoesNotValidate(self):
        self.assertEqual(find(self.root, ["bogus"]), (self.root, ["bogus"]))

    def testFirstDeclaredMatchWins(self):
        twin = Command("serve")
        self.root.add(twin)
        command, _ = resolve(self.root, ["serve"])
        self.assertIs(command, self.serve)


if __name__ == '__main__':
    unittest.main()
