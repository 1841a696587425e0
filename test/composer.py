# python
"""
Composer module behavioral tests (Local / Global / Full flag collections).

Scope
- Validate that full sets contain local, own global and inherited globals.
- Validate lazy caching and invalidation after declarations and tree changes.
- Validate nearest-wins collisions and normalization propagation.

Conventions
- Test method names follow CamelCase per project convention.
- Roots are kept on the test case: parents are weakly referenced.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from fuelcell import Command, word_separators


class TestFlagComposition(TestCase):
    """Behavioral tests for composed flag sets."""

    def setUp(self):
        self.root = Command("app")
        self.middle = Command("remote")
        self.leaf = Command("add")
        self.root.add(self.middle)
        self.middle.add(self.leaf)

    def testGrandparentGlobalVisibleInGrandchild(self):
        x = self.root.global_flag("x")
        self.assertIs(self.leaf.flags.lookup("x"), x)
        self.assertIs(self.leaf.inherited_flags.lookup("x"), x)

    def testFullContainsEveryContribution(self):
        local = self.leaf.flag("dry-run", type=bool)
        own = self.leaf.global_flag("force", type=bool)
        inherited = self.middle.global_flag("remote-name")
        names = {flag.name for flag in self.leaf.flags}
        self.assertTrue({local.name, own.name, inherited.name} <= names)

    def testLocalFlagsAreNotInherited(self):
        self.root.flag("quiet", type=bool)
        self.assertIsNone(self.middle.flags.lookup("quiet"))
        self.assertIsNotNone(self.root.flags.lookup("quiet"))

    def testFullIsCachedUntilChange(self):
        first = self.leaf.flags
        self.assertIs(self.leaf.flags, first)
        self.leaf.flag("new")
        self.assertIsNot(self.leaf.flags, first)
        self.assertIsNotNone(self.leaf.flags.lookup("new"))

    def testAncestorGlobalDeclarationInvalidatesDescendants(self):
        before = self.leaf.flags
        self.assertIsNone(before.lookup("late"))
        self.root.global_flag("late")
        self.assertTrue(self.leaf._flags.stale)
        self.assertIsNotNone(self.leaf.flags.lookup("late"))

    def testLocalDeclarationDoesNotInvalidateDescendants(self):
        self.leaf.flags
        self.root.flag("local-only")
        self.assertFalse(self.leaf._flags.stale)

    def testNearestDeclarationWins(self):
        self.root.global_flag("level")
        nearer = self.middle.global_flag("level")
        self.assertIs(self.leaf.flags.lookup("level"), nearer)

    def testOwnDeclarationsBeatInherited(self):
        self.root.global_flag("output", "o")
        own = self.leaf.flag("output")
        self.assertIs(self.leaf.flags.lookup("output"), own)

    def testShorthandCollisionKeepsNearer(self):
        verbose = self.root.global_flag("verbose", "v", type=bool)
        value = self.leaf.flag("value", "v")
        self.assertIs(self.leaf.flags.shorthand_lookup("v"), value)
        self.assertIs(self.leaf.flags.lookup("verbose"), verbose)

    def testDetachDropsInheritedFlags(self):
        self.root.global_flag("token")
        self.assertIsNotNone(self.middle.flags.lookup("token"))
        self.root.remove(self.middle)
        self.assertIsNone(self.middle.flags.lookup("token"))
        self.assertIsNone(self.leaf.flags.lookup("token"))

    def testAttachAddsInheritedFlags(self):
        orphan = Command("orphan")
        orphan.flags
        self.root.global_flag("token")
        self.root.add(orphan)
        self.assertIsNotNone(orphan.flags.lookup("token"))

    def testNormalizationPropagatesToCurrentAndFutureDescendants(self):
        self.root.set_normalize(word_separators)
        dry = self.leaf.flag("dry_run", type=bool)
        self.assertIs(self.leaf.flags.lookup("dry-run"), dry)
        late = Command("late")
        self.middle.add(late)
        level = late.flag("log.level")
        self.assertIs(late.flags.lookup("log-level"), level)

    def testCollisionsNeverRaise(self):
        self.root.global_flag("name", "n")
        self.middle.global_flag("name", "n")
        self.leaf.flag("name", "n")
        self.assertEqual(len([flag for flag in self.leaf.flags if flag.name == "name"]), 1)


if __name__ == '__main__':
    unittest.main()
