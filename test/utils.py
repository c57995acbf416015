"""
Helper tests (sentinel, coalesce, rename, mirror, ordinal, prefixed, key allocation).

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import unittest
from types import MappingProxyType
from unittest import TestCase

from helmsman.utils import *


class UnsetTest(TestCase):
    def testSingletonAndFalsy(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")
        self.assertIs(copy.copy(Unset), Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Sub(UnsetType):  # NOQA: F-841
                pass

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIsNone(coalesce(None, "x"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))


class RenameTest(TestCase):
    def testBothForms(self):
        def f():
            pass

        self.assertEqual(rename(f, "g").__name__, "g")
        self.assertEqual(rename("h")(f).__qualname__, "h")
        with self.assertRaises(TypeError):
            rename(len, "x")
        with self.assertRaises(TypeError):
            rename()


class MirrorTest(TestCase):
    def testReadOnlyViews(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = ["a"]
                self._table = {"a": 1}

        holder = Holder()
        self.assertEqual(holder.items, ("a",))
        self.assertIsInstance(holder.table, MappingProxyType)
        with self.assertRaises(AttributeError):
            holder.items = ()


class OrdinalTest(TestCase):
    def testWordsThenNumbers(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(111), "111th")


class PrefixedTest(TestCase):
    def testFiltersAndDeduplicates(self):
        self.assertEqual(prefixed(["sub1", "sub2", "other", "sub1"], "su"), ["sub1", "sub2"])
        self.assertEqual(prefixed(["b", "a"], None), ["b", "a"])
        self.assertEqual(prefixed(["Sub"], "su"), [])


class KeyAllocatorTest(TestCase):
    def testKeys(self):
        allocator = KeyAllocator("node")
        self.assertEqual([allocator(), allocator()], ["node0", "node1"])
        self.assertEqual(allocator.prefix, "node")
        self.assertEqual(repr(allocator), "key-allocator(prefix='node')")

    def testAllocatorsAreIndependent(self):
        self.assertEqual(KeyAllocator()(), KeyAllocator()())

    def testPrefixValidation(self):
        with self.assertRaises(TypeError):
            KeyAllocator(" ")


if __name__ == "__main__":
    unittest.main()
