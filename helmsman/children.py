"""
Subcommand composition: the child dispatcher element and its executor adapter.

children(*specs) folds an ordered list of CommandSpec into one element:
- registry: alias → spec, read-only once built.
  • primary aliases: the first spec (in input order) claiming a name keeps it.
  • secondary aliases: registered only when no spec, primary or secondary, already
    claims the name.
  • specs without aliases cannot be named and are skipped.
- parse: one token selects the child; the resolved CommandSpec is stored under the
  dispatcher's synthetic key and the child's root element parses what is left.
- completion: child names visible to the commander, then the child's own tree.

executor(element) returns the handler that re-dispatches to whichever child the
dispatcher stored. A CommandSpec whose element is a dispatcher and that has no
executor of its own gets one automatically (see __executor__).
"""
import difflib
import logging

from rich.text import Text

from .commands import CommandSpec
from .elements import CommandElement
from .faults import InternalStateError, UnknownSubcommandError, tr
from .utils import KeyAllocator, ordinal, prefixed

logger = logging.getLogger(__name__)

keys = KeyAllocator("child")
"""
Process-wide allocator used when children() is not handed one.
"""


class ChildCommandElement(CommandElement):
    """
    Child dispatcher. Its key is minted by a KeyAllocator and its value is the
    resolved CommandSpec itself, never the typed name.
    """
    __introspectable__ = ("children",)

    def __init__(self, children, /, *, allocator=keys):
        super().__init__(allocator())
        self._children = dict(children)

    def _visible(self, commander):
        return [name for name, spec in self._children.items() if spec.visibility(commander)]

    def parse(self, args, context, /):
        spec = self.parse_value(args)
        context.put(self._key, spec)
        spec.element.parse(args, context)

    def parse_value(self, args, /):
        name = args.next()
        try:
            spec = self._children[name]
        except KeyError:
            suggestions = difflib.get_close_matches(name, self._children.keys(), 5)
            raise args.create_error(
                UnknownSubcommandError,
                "unknown subcommand %r at %s position",
                name,
                ordinal(args.position),
                suggestions=suggestions,
                hint="did you mean %r?" % suggestions[0] if suggestions else "expected one of %s" % "|".join(self._children),
            ) from None
        logger.debug("%s dispatches %r to %r", self._key, name, spec.name)
        return spec

    def tab_complete(self, commander, args, context, /):
        if (name := args.next_if_present()) is None:
            return self._visible(commander)
        if not args.has_next():
            return prefixed(self._visible(commander), name)
        if (spec := self._children.get(name)) is None:
            return []
        return spec.tab_complete(commander, args, context)

    def usage(self, commander, /):
        parts = []
        for name in self._visible(commander):
            if parts:
                parts.append("|")
            parts.append(name)
        return commander.fmt.combined(*parts) if parts else Text("")

    def __executor__(self):
        return executor(self)


class ChildCommandExecutor:
    """
    Handler forwarding to the spec a child dispatcher stored under key.

    - enforce: check the resolved child's permission before running it.
    """
    __slots__ = ("_key", "_enforce")

    def __init__(self, key, /, *, enforce=False):
        if not isinstance(key, str) or not key:
            raise TypeError("ChildCommandExecutor() key must be a non-empty string")
        self._key = key
        self._enforce = bool(enforce)

    @property
    def key(self):
        return self._key

    @property
    def enforce(self):
        return self._enforce

    def __call__(self, commander, context, /):
        try:
            spec = context.one(self._key)
        except KeyError:
            spec = None
        if not isinstance(spec, CommandSpec):
            raise InternalStateError(
                tr("invalid subcommand state -- only one command spec must be provided for child arg %s", self._key),
                key=self._key,
            )
        if self._enforce:
            spec.check_permission(commander)
        spec.execute(commander, context)

    def __repr__(self):
        return f"child-command-executor(key={self._key!r}, enforce={self._enforce!r})"


def children(*specs, allocator=keys):
    """
    Build a child dispatcher from specs, in priority order.

    Parameters
    - *specs: CommandSpec, earlier specs win alias collisions.
    - allocator: KeyAllocator minting the dispatcher key (keyword-only).

    Returns
    - ChildCommandElement
    """
    for spec in specs:
        if not isinstance(spec, CommandSpec):
            raise TypeError("children() arguments must be command specs")
    if not isinstance(allocator, KeyAllocator):
        raise TypeError("children() allocator must be a key allocator")

    registry = {}
    for spec in specs:
        if not spec.aliases:
            logger.debug("skipping unnamable command %r", spec)
            continue
        if spec.name in registry:
            logger.debug("dropping command %r, %r is already taken", spec, spec.name)
            continue
        registry[spec.name] = spec

    for spec in specs:
        for alias in spec.aliases[1:]:
            if alias in registry:
                if registry[alias] is not spec:
                    logger.debug("dropping alias %r of %r, it is already taken", alias, spec.name)
                continue
            registry[alias] = spec

    return ChildCommandElement(registry, allocator=allocator)


def executor(element, /, *, enforce=False):
    """
    Executor re-dispatching to the child resolved by element.
    """
    if not isinstance(element, CommandElement) or element.key is None:
        raise TypeError("executor() argument must be a keyed command element")
    return ChildCommandExecutor(element.key, enforce=enforce)


__all__ = (
    "ChildCommandElement",
    "ChildCommandExecutor",
    "children",
    "executor",
    "keys",
)
