"""
Token cursor tests (tokenizing, reading, rewinding, error positions).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from helmsman.faults import MalformedInputError, MissingTokenError, InvalidChoiceError, CommandException
from helmsman.tokens import CommandArgs


class TokenizeTest(TestCase):
    def testShellStyleSplitting(self):
        args = CommandArgs.tokenize('set "group admin" node.a')
        self.assertEqual(args.tokens, ("set", "group admin", "node.a"))
        self.assertEqual(args.raw, 'set "group admin" node.a')
        self.assertEqual(args.position, 0)

    def testEmptyInputHasNoTokens(self):
        self.assertEqual(len(CommandArgs.tokenize("")), 0)
        self.assertEqual(len(CommandArgs.tokenize("   ")), 0)

    def testUnbalancedQuoteIsMalformed(self):
        with self.assertRaises(MalformedInputError) as context:
            CommandArgs.tokenize('set "group admin')
        self.assertEqual(context.exception.index, 0)
        self.assertEqual(context.exception.input, 'set "group admin')
        self.assertTrue(context.exception.hint)

    def testLenientClosesOpenQuote(self):
        self.assertEqual(CommandArgs.tokenize('set "group adm', lenient=True).tokens, ("set", "group adm"))
        self.assertEqual(CommandArgs.tokenize('set "group:ad', lenient=True).tokens, ("set", "group:ad"))
        self.assertEqual(CommandArgs.tokenize("set 'group:ad", lenient=True).tokens, ("set", "group:ad"))

    def testLenientOpenQuoteKeepsTrailingSpace(self):
        self.assertEqual(CommandArgs.tokenize('set "group ', lenient=True).tokens, ("set", "group "))

    def testLenientClosesDanglingEscape(self):
        self.assertEqual(CommandArgs.tokenize("set gr\\", lenient=True).tokens, ("set", "gr\\"))

    def testLenientTrailingSpaceAddsEmptyToken(self):
        self.assertEqual(CommandArgs.tokenize("sub1 ", lenient=True).tokens, ("sub1", ""))
        self.assertEqual(CommandArgs.tokenize("sub1", lenient=True).tokens, ("sub1",))
        self.assertEqual(CommandArgs.tokenize(" ", lenient=True).tokens, ())

    def testLenientEscapedTrailingSpaceStaysInToken(self):
        self.assertEqual(CommandArgs.tokenize("sub1\\ ", lenient=True).tokens, ("sub1 ",))
        self.assertEqual(CommandArgs.tokenize('"sub1 "', lenient=True).tokens, ("sub1 ",))
        self.assertEqual(CommandArgs.tokenize("sub1\\  ", lenient=True).tokens, ("sub1 ", ""))

    def testStrictModeKeepsTrailingSpace(self):
        self.assertEqual(CommandArgs.tokenize("sub1 ").tokens, ("sub1",))

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            CommandArgs.tokenize(["a", "b"])  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            CommandArgs("a", [1])  # type: ignore[list-item]


class CursorTest(TestCase):
    def setUp(self):
        self.args = CommandArgs.tokenize("one two three")

    def testNextConsumesInOrder(self):
        self.assertEqual(self.args.next(), "one")
        self.assertEqual(self.args.next(), "two")
        self.assertEqual(self.args.remaining(), ("three",))
        self.assertEqual(self.args.next(), "three")
        self.assertFalse(self.args.has_next())

    def testNextPastTheEndRaisesMissingToken(self):
        for _ in range(3):
            self.args.next()
        with self.assertRaises(MissingTokenError) as context:
            self.args.next()
        self.assertEqual(context.exception.index, 3)
        self.assertIsNone(context.exception.token)
        self.assertIn("fourth position", str(context.exception))

    def testNextIfPresentAndPeek(self):
        self.assertEqual(self.args.peek(), "one")
        self.assertEqual(self.args.position, 0)
        self.args.position = 3
        self.assertIsNone(self.args.peek())
        self.assertIsNone(self.args.next_if_present())

    def testRewindThroughPosition(self):
        self.args.next()
        saved = self.args.position
        self.args.next()
        self.args.position = saved
        self.assertEqual(self.args.next(), "two")

    def testPositionOutOfRangeIsRejected(self):
        with self.assertRaises(ValueError):
            self.args.position = 4
        with self.assertRaises(ValueError):
            self.args.position = -1

    def testPrevious(self):
        with self.assertRaises(ValueError):
            self.args.previous()
        self.args.next()
        self.assertEqual(self.args.previous(), "one")
        self.assertEqual(self.args.position, 0)


class CreateErrorTest(TestCase):
    def testErrorPointsAtLastConsumedToken(self):
        args = CommandArgs.tokenize("one two")
        args.next()
        args.next()
        fault = args.create_error(InvalidChoiceError, "bad %s", "two")
        self.assertIsInstance(fault, InvalidChoiceError)
        self.assertEqual(str(fault), "bad two")
        self.assertEqual(fault.index, 1)
        self.assertEqual(fault.token, "two")
        self.assertEqual(fault.input, "one two")

    def testErrorBeforeAnyRead(self):
        fault = CommandArgs.tokenize("").create_error(InvalidChoiceError, "nothing")
        self.assertEqual(fault.index, 0)
        self.assertIsNone(fault.token)

    def testOptionsOverrideDefaults(self):
        fault = CommandArgs.tokenize("a b").create_error(InvalidChoiceError, "x", index=1, token="b", hint="h")
        self.assertEqual((fault.index, fault.token, fault.hint), (1, "b", "h"))

    def testOnlyParseFaultsAreAccepted(self):
        with self.assertRaises(TypeError):
            CommandArgs.tokenize("a").create_error(CommandException, "x")


if __name__ == "__main__":
    unittest.main()
