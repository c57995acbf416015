r"""
Helmsman command elements: the parse/complete contract and the generic elements.

Overview
- CommandElement: a named unit with two duties.
  • parse(args, context): consume the tokens it needs from the cursor, compute a
    value through parse_value(args) and append it under its key in the context.
  • tab_complete(commander, args, context): given whatever tokens remain (possibly
    none, possibly a partial last token), return a finite list of candidates.
    Completion never raises and never mutates the context it receives.
  • usage(commander): rich Text fragment describing the accepted input.

- Generic elements (factories)
  • string(key): one verbatim token.
  • choices(key, choices): one token picked from a fixed set.
  • seq(*elements): elements parsed one after the other.
  • optional(element, default=None, *, weak=False): element that may be left out.
  • none(): consumes nothing, stores nothing (commands without arguments).

Domain elements live in helmsman.subjects, the child dispatcher in helmsman.children.

Composition
- Elements are composed by reference (seq/optional wrap other elements); concrete
  elements subclass CommandElement directly and never each other.

Quick example:
    >>> from helmsman.elements import seq, string, optional, choices
    >>> element = seq(string("name"), optional(choices("mode", ["fast", "safe"]), "safe"))
"""
import difflib
import functools
import operator
import re
from collections.abc import Iterable, Mapping

from rich.text import Text

from .faults import ArgumentParseException, InvalidChoiceError
from .utils import *


class ElementType(type):
    """
    Metaclass giving elements a stable identity in diagnostics.

    Responsibilities
    - __typename__ derived from the class name (camel-case split with hyphens).
    - Read-only properties, via mirror(), for every name in __introspectable__.
    - Compact __repr__ and a __rich_repr__ for pretty printers.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            seen = set()
            for klass in type(self).__mro__:
                for name in getattr(klass, "__introspectable__", ()):
                    if name not in seen:
                        seen.add(name)
                        yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class CommandElement(metaclass=ElementType):
    """
    Base of every argument element.

    key
    - the context key values are stored under; None for elements that store
      nothing themselves (sequences, none()).

    subclass contract
    - implement parse_value(args) and tab_complete(commander, args, context).
    - override parse(args, context) only when the element does more than storing a
      single value (the child dispatcher descends into the child afterwards).
    """
    __introspectable__ = ("key",)

    def __init__(self, key, /):
        if key is not None and (not isinstance(key, str) or not key.strip()):
            raise TypeError(f"{type(self).__typename__} key must be a non-empty string")
        self._key = key

    def parse(self, args, context, /):
        value = self.parse_value(args)
        if self._key is not None and value is not None:
            context.put(self._key, value)

    def parse_value(self, args, /):
        raise NotImplementedError(f"{type(self).__typename__} does not implement parse_value()")

    def tab_complete(self, commander, args, context, /):
        raise NotImplementedError(f"{type(self).__typename__} does not implement tab_complete()")

    def usage(self, commander, /):
        return Text(f"<{self._key}>") if self._key else Text("")


class StringElement(CommandElement):
    def parse_value(self, args, /):
        return args.next()

    def tab_complete(self, commander, args, context, /):
        return []


class ChoicesElement(CommandElement):
    """
    One token picked from a fixed set; the stored value is the mapped object.
    """
    __introspectable__ = ("choices",)

    def __init__(self, key, choices, /):
        super().__init__(key)
        if isinstance(choices, Mapping):
            choices = dict(choices)
        elif isinstance(choices, Iterable) and not isinstance(choices, str):
            choices = {choice: choice for choice in choices}
        else:
            raise TypeError(f"{type(self).__typename__} choices must be a mapping or an iterable of strings")
        if not choices or not all(isinstance(choice, str) for choice in choices):
            raise TypeError(f"{type(self).__typename__} choices must be a non-empty collection of strings")
        self._choices = choices

    def parse_value(self, args, /):
        token = args.next()
        try:
            return self._choices[token]
        except KeyError:
            suggestions = difflib.get_close_matches(token, self._choices.keys(), 5)
            raise args.create_error(
                InvalidChoiceError,
                "%r is not a valid choice for %s at %s position",
                token,
                self._key,
                ordinal(args.position),
                suggestions=suggestions,
                hint="did you mean %r?" % suggestions[0] if suggestions else "pick one of %s" % "|".join(self._choices),
            ) from None

    def tab_complete(self, commander, args, context, /):
        return prefixed(self._choices.keys(), args.next_if_present())

    def usage(self, commander, /):
        return Text("|".join(self._choices))


class SequenceElement(CommandElement):
    """
    Elements parsed in order, sharing the cursor and the context.

    completion
    - parse each element on a scratch copy of the context.
    - the first element that fails to parse is the one being typed: rewind and
      complete it.
    - an element that consumed the last token is still being typed (a trailing
      space would have produced an extra empty token): rewind and complete it.
    - an element that parsed without consuming while the last token is pending (an
      optional left out, a weak optional that fell back) adds its candidates to
      those of the element completed next.
    - when every element parsed and tokens are left over, there is nothing to offer.
    """
    __introspectable__ = ("elements",)

    def __init__(self, elements, /):
        super().__init__(None)
        elements = tuple(elements)
        for element in elements:
            if not isinstance(element, CommandElement):
                raise TypeError(f"{type(self).__typename__} members must be command elements")
        self._elements = elements

    def parse(self, args, context, /):
        for element in self._elements:
            element.parse(args, context)

    def parse_value(self, args, /):
        return None

    def tab_complete(self, commander, args, context, /):
        scratch = context.copy()
        skipped = []
        for element in self._elements:
            start = args.position
            try:
                element.parse(args, scratch)
            except ArgumentParseException:
                args.position = start
                return list(dict.fromkeys([*skipped, *element.tab_complete(commander, args, scratch)]))
            if args.position == start:
                if len(args.tokens) == start + 1:
                    # left out, yet the last token may still be meant for it
                    skipped.extend(element.tab_complete(commander, args, scratch))
                    args.position = start
                continue
            if not args.has_next():
                args.position = start
                return list(dict.fromkeys([*skipped, *element.tab_complete(commander, args, scratch)]))
        return list(dict.fromkeys(skipped))

    def usage(self, commander, /):
        return Text(" ").join(usage for element in self._elements if (usage := element.usage(commander)))


class OptionalElement(CommandElement):
    """
    Element that may be left out.

    - no tokens left: store default (when not None) under the wrapped key.
    - weak: a failed parse rewinds the cursor and stores the default instead of
      raising, so the following elements get a chance at the token.
    """
    __introspectable__ = ("element", "default", "weak")

    def __init__(self, element, default=None, /, *, weak=False):
        if not isinstance(element, CommandElement):
            raise TypeError(f"{type(self).__typename__} must wrap a command element")
        super().__init__(element.key)
        self._element = element
        self._default = default
        self._weak = bool(weak)

    def _fallback(self, context):
        if self._key is not None and self._default is not None:
            context.put(self._key, self._default)

    def parse(self, args, context, /):
        if not args.has_next():
            return self._fallback(context)
        start = args.position
        try:
            self._element.parse(args, context)
        except ArgumentParseException:
            if not self._weak:
                raise
            args.position = start
            self._fallback(context)

    def parse_value(self, args, /):
        return self._element.parse_value(args)

    def tab_complete(self, commander, args, context, /):
        return self._element.tab_complete(commander, args, context)

    def usage(self, commander, /):
        return Text.assemble("[", self._element.usage(commander), "]")


class NoneElement(CommandElement):
    def __init__(self):
        super().__init__(None)

    def parse_value(self, args, /):
        return None

    def tab_complete(self, commander, args, context, /):
        return []


def string(key, /):
    """
    Expect one token and store it verbatim under key.
    """
    return StringElement(key)


def choices(key, choices, /):
    """
    Expect one token among choices (a mapping token → value, or an iterable of tokens).
    """
    return ChoicesElement(key, choices)


def seq(*elements):
    """
    Expect every element, in order.
    """
    return SequenceElement(elements)


def optional(element, default=None, /, *, weak=False):
    """
    Make element optional, storing default when it is left out.
    """
    return OptionalElement(element, default, weak=weak)


@functools.cache
def none():
    """
    Expect nothing. Shared instance: the element is stateless.
    """
    return NoneElement()


__all__ = (
    # Contract
    "CommandElement",

    # Generic elements
    "StringElement",
    "ChoicesElement",
    "SequenceElement",
    "OptionalElement",
    "NoneElement",

    # Factories
    "string",
    "choices",
    "seq",
    "optional",
    "none",
)

# The metaclass is an implementation detail of the element classes.
del ElementType
