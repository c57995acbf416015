"""
Child dispatcher tests (registry policy, dispatch, completion, executor adapter).

Scope
- Alias collision policy: first primary wins, secondaries never reassigned,
  unnamable specs skipped.
- Parsing selects the child, stores the resolved spec and descends.
- Completion is permission-filtered at the dispatcher level and delegated below.
- The executor adapter re-dispatches, fails on missing state and can enforce.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from threading import Thread
from unittest import TestCase

from helmsman.children import ChildCommandExecutor, children, executor
from helmsman.commands import command, CommandSpec
from helmsman.context import CommandContext
from helmsman.elements import choices, string, seq
from helmsman.faults import InternalStateError, PermissionDeniedError, UnknownSubcommandError
from helmsman.formatting import RichFormatter
from helmsman.tokens import CommandArgs
from helmsman.utils import KeyAllocator


class Commander:
    def __init__(self, *permissions):
        self.name = "tester"
        self.fmt = RichFormatter(colorful=False)
        self.permissions = set(permissions)

    def has_permission(self, permission, /):
        return permission in self.permissions


def spec(*aliases, **options):
    options.setdefault("executor", None)
    return command(*aliases, **options)


class RegistryPolicyTest(TestCase):
    def testFirstPrimaryWins(self):
        first, second = spec("sub"), spec("sub")
        element = children(first, second)
        self.assertIs(element.children["sub"], first)

    def testSecondaryNeverOverridesPrimary(self):
        first, second = spec("a", "b"), spec("b")
        element = children(first, second)
        self.assertIs(element.children["a"], first)
        self.assertIs(element.children["b"], second)

    def testSecondaryNeverReassigned(self):
        first, second = spec("a", "shared"), spec("b", "shared")
        element = children(first, second)
        self.assertIs(element.children["shared"], first)
        element = children(second, first)
        self.assertIs(element.children["shared"], second)

    def testDroppedPrimaryStillContributesSecondaries(self):
        first, second = spec("sub"), spec("sub", "alt")
        element = children(first, second)
        self.assertIs(element.children["sub"], first)
        self.assertIs(element.children["alt"], second)

    def testUnnamableSpecIsNeverResolvable(self):
        unnamable = spec()
        with self.assertLogs("helmsman.children", "DEBUG") as logs:
            element = children(unnamable, spec("sub"))
        self.assertNotIn(unnamable, element.children.values())
        self.assertEqual(list(element.children), ["sub"])
        self.assertTrue(any("unnamable" in line for line in logs.output))

    def testRegistryIsReadOnly(self):
        element = children(spec("sub"))
        with self.assertRaises(TypeError):
            element.children["other"] = spec("other")  # type: ignore[index]

    def testOnlySpecsAreAccepted(self):
        with self.assertRaises(TypeError):
            children("sub")  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            children(spec("sub"), allocator=lambda: "key")  # type: ignore[arg-type]


class DispatchTest(TestCase):
    def setUp(self):
        self.sub1 = spec("sub1", element=string("value"))
        self.sub2 = spec("sub2")
        self.other = spec("other", permission="secret")
        self.element = children(self.sub1, self.sub2, self.other)

    def testRoundTrip(self):
        context = CommandContext()
        self.element.parse(CommandArgs.tokenize("sub1 arg"), context)
        self.assertIs(context.one(self.element.key), self.sub1)
        self.assertEqual(context.one("value"), "arg")

    def testNestedDispatch(self):
        inner = children(spec("leaf", element=string("value")))
        outer = children(spec("branch", element=inner))
        context = CommandContext()
        outer.parse(CommandArgs.tokenize("branch leaf x"), context)
        self.assertEqual(context.one(outer.key).name, "branch")
        self.assertEqual(context.one(inner.key).name, "leaf")
        self.assertEqual(context.one("value"), "x")

    def testUnknownSubcommandLeavesContextUntouched(self):
        context = CommandContext()
        with self.assertRaises(UnknownSubcommandError) as fault:
            self.element.parse(CommandArgs.tokenize("sub3 arg"), context)
        self.assertEqual(len(context), 0)
        self.assertEqual(fault.exception.token, "sub3")
        self.assertIn("sub1", fault.exception.options["suggestions"])

    def testKeysAreUnique(self):
        allocator = KeyAllocator()
        first = children(spec("a"), allocator=allocator)
        second = children(spec("a"), allocator=allocator)
        self.assertNotEqual(first.key, second.key)
        self.assertTrue(first.key.startswith("child"))


class CompletionTest(TestCase):
    def setUp(self):
        self.element = children(
            spec("sub1", element=choices("mode", ["fast", "safe"])),
            spec("sub2"),
            spec("other"),
            spec("hidden", permission="secret"),
        )

    def complete(self, raw, commander=None):
        return self.element.tab_complete(commander or Commander(), CommandArgs.tokenize(raw, lenient=True), CommandContext())

    def testNoTokenListsVisibleNames(self):
        self.assertEqual(set(self.complete("")), {"sub1", "sub2", "other"})
        self.assertEqual(set(self.complete("", Commander("secret"))), {"sub1", "sub2", "other", "hidden"})

    def testPartialName(self):
        self.assertEqual(set(self.complete("su")), {"sub1", "sub2"})
        self.assertEqual(self.complete("hi"), [])

    def testDelegatesToChild(self):
        self.assertEqual(self.complete("sub1 "), ["fast", "safe"])
        self.assertEqual(self.complete("sub1 s"), ["safe"])

    def testUnknownChildCompletesNothing(self):
        self.assertEqual(self.complete("nope x"), [])

    def testUsageListsVisibleNames(self):
        self.assertEqual(self.element.usage(Commander()).plain, "sub1|sub2|other")


class ExecutorTest(TestCase):
    def setUp(self):
        self.calls = []

        @command("sub1", element=string("value"))
        def sub1(commander, context):
            self.calls.append(("sub1", context.one("value")))

        @command("guarded", permission="secret")
        def guarded(commander, context):
            self.calls.append(("guarded",))

        self.element = children(sub1, guarded)

    def dispatch(self, raw, adapter, commander=None):
        context = CommandContext()
        args = CommandArgs.tokenize(raw)
        self.element.parse(args, context)
        adapter(commander or Commander(), context)

    def testForwardsToResolvedSpec(self):
        self.dispatch("sub1 arg", executor(self.element))
        self.assertEqual(self.calls, [("sub1", "arg")])

    def testMissingStateIsAnInternalError(self):
        with self.assertRaises(InternalStateError) as fault:
            executor(self.element)(Commander(), CommandContext())
        self.assertEqual(fault.exception.key, self.element.key)
        self.assertIn(self.element.key, str(fault.exception))

    def testPlainAdapterDoesNotEnforce(self):
        self.dispatch("guarded", executor(self.element))
        self.assertEqual(self.calls, [("guarded",)])

    def testEnforcingAdapterChecksChildPermission(self):
        with self.assertRaises(PermissionDeniedError):
            self.dispatch("guarded", executor(self.element, enforce=True))
        self.assertEqual(self.calls, [])
        self.dispatch("guarded", executor(self.element, enforce=True), Commander("secret"))
        self.assertEqual(self.calls, [("guarded",)])

    def testSpecGetsAdapterAutomatically(self):
        root = command("root", element=self.element)
        self.assertIsInstance(root, CommandSpec)
        self.assertIsInstance(root.executor, ChildCommandExecutor)
        self.assertEqual(root.executor.key, self.element.key)
        root.process(Commander(), "sub1 x")
        self.assertEqual(self.calls, [("sub1", "x")])

    def testAdapterNeedsAKeyedElement(self):
        with self.assertRaises(TypeError):
            executor(seq(string("a")))


class KeyAllocatorTest(TestCase):
    def testUniqueAcrossThreads(self):
        allocator = KeyAllocator("child")
        minted = []

        def worker():
            keys = [allocator() for _ in range(200)]
            minted.extend(keys)

        threads = [Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len(minted), 1600)
        self.assertEqual(len(set(minted)), 1600)


if __name__ == "__main__":
    unittest.main()
