"""
Helmsman command layer: command specs, permission visibility and the run pipeline.

What this module provides
- CommandSpec: immutable description of one command.
  • aliases (first is the primary name), root element, permission, executor, descr.
  • parse/execute/tab_complete: the three passes over the element tree.
  • process(commander, raw): permission check, tokenize, parse, execute; faults
    surface through trigger().
  • complete(commander, raw): completion candidates for a partial input.
- Visibility: result of the permission filter (truthy when visible).
- command(...): build a CommandSpec, or a decorator that turns a handler into one.
- invoke(spec, commander, prompt): run a spec against a string, a token list or argv.

Permission
- None: everybody.
- str: checked through commander.has_permission(permission).
- callable: predicate commander -> bool (or Visibility); may raise
  PermissionDeniedError, which the filter turns into a hidden result.

Quick start
    from helmsman import command, children, string

    @command("greet", element=string("who"), descr="say hello")
    def greet(commander, context):
        print("hello", context.one("who"))

    root = command("demo", element=children(greet))
    root.process(commander, "greet world")
"""
import inspect
import logging
import shlex
import sys
from collections.abc import Iterable
from typing import NamedTuple

from rich.console import Group
from rich.text import Text

from .context import CommandContext
from .elements import CommandElement, none
from .faults import *
from .tokens import CommandArgs
from .utils import *

logger = logging.getLogger(__name__)


class Visibility(NamedTuple):
    """
    whether a command is visible to a commander, and why not when it is hidden.
    """
    visible: bool
    reason: str | None = None

    @classmethod
    def shown(cls):
        return cls(True)

    @classmethod
    def hidden(cls, reason=None, /):
        return cls(False, reason)

    def __bool__(self):
        return self.visible


class CommandSpec:
    """
    Immutable description of one command.

    Fields
    - aliases: tuple[str, ...], may be empty (the spec is then unnamable).
    - element: CommandElement, the root of the argument tree.
    - permission: None | str | Callable[[Commander], bool | Visibility].
    - executor: Callable[[Commander, CommandContext], None] | None.
    - descr: one-line description or None.

    A spec whose element provides __executor__ (child dispatchers do) and that is
    built without an executor re-dispatches to the selected child.
    """
    __introspectable__ = ("aliases", "element", "permission", "executor", "descr")
    __slots__ = tuple("_" + name for name in __introspectable__)

    def __init__(self, aliases=(), /, element=Unset, permission=None, executor=None, descr=None):
        if isinstance(aliases, str) or not isinstance(aliases, Iterable):
            raise TypeError("CommandSpec() aliases must be an iterable of strings")
        aliases = tuple(aliases)
        for alias in aliases:
            if not isinstance(alias, str) or not alias or any(char.isspace() for char in alias):
                raise TypeError("CommandSpec() aliases must be non-empty strings without whitespace")

        element = coalesce(element, none())
        if not isinstance(element, CommandElement):
            raise TypeError("CommandSpec() element must be a command element")

        if permission is not None and not isinstance(permission, str) and not callable(permission):
            raise TypeError("CommandSpec() permission must be None, a string or a predicate")

        if executor is None and callable(getattr(element, "__executor__", None)):
            executor = element.__executor__()
        if executor is not None and not callable(executor):
            raise TypeError("CommandSpec() executor must be callable")

        if descr is not None and not isinstance(descr, str):
            raise TypeError("CommandSpec() descr must be a string")

        for name, value in zip(self.__introspectable__, (aliases, element, permission, executor, descr)):
            object.__setattr__(self, "_" + name, value)

    aliases = mirror("aliases")
    element = mirror("element")
    permission = mirror("permission")
    executor = mirror("executor")
    descr = mirror("descr")

    @property
    def name(self):
        return self._aliases[0] if self._aliases else None

    def __setattr__(self, name, value):
        raise AttributeError(f"command-spec is immutable, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"command-spec is immutable, cannot delete {name!r}")

    def visibility(self, commander, /):
        """
        evaluate the permission against commander without raising.
        """
        permission = self._permission
        if permission is None:
            return Visibility.shown()
        try:
            if isinstance(permission, str):
                allowed = commander.has_permission(permission)
            else:
                allowed = permission(commander)
        except PermissionDeniedError as fault:
            return Visibility.hidden(str(fault))
        if isinstance(allowed, Visibility):
            return allowed
        if allowed:
            return Visibility.shown()
        if isinstance(permission, str):
            return Visibility.hidden(tr("missing permission %s", permission))
        return Visibility.hidden(tr("you are not allowed to use this command"))

    def check_permission(self, commander, /):
        if not (visibility := self.visibility(commander)):
            raise PermissionDeniedError(
                visibility.reason or tr("you are not allowed to use this command"),
                tool=self,
                hint="ask an administrator for access to %s" % (self.name or "this command"),
            )

    def parse(self, args, context, /):
        self._element.parse(args, context)
        if args.has_next():
            raise args.create_error(
                UnparsedTokensError,
                "too many arguments, %r is left over at %s position",
                args.peek(),
                ordinal(args.position + 1),
                index=args.position,
                token=args.peek(),
                hint="remove the extra arguments or quote values containing spaces",
            )

    def execute(self, commander, context, /):
        if self._executor is None:
            raise InternalStateError(tr("command %s has no executor", self.name or "<unnamed>"), key=self.name)
        self._executor(commander, context)

    def tab_complete(self, commander, args, context, /):
        return self._element.tab_complete(commander, args, context)

    def usage(self, commander, /):
        parts = [Text(self.name)] if self.name else []
        if usage := self._element.usage(commander):
            parts.append(usage)
        return Text(" ").join(parts)

    def help(self, commander, /):
        renders = [self.usage(commander)]
        if self._descr:
            renders.append(Text(self._descr, "dim"))
        if len(self._aliases) > 1:
            renders.append(Text(tr("aliases: %s", ", ".join(self._aliases[1:])), "dim"))
        return Group(*renders)

    def process(self, commander, raw, /, **options):
        """
        run the full pipeline on raw input.

        options (forwarded to trigger())
        - shell: print faults instead of raising them.
        - fancy/colorful/console: rendering switches.

        returns
        - the populated CommandContext, or None when a fault was printed.
        """
        options.setdefault("tool", self)
        context = CommandContext()
        try:
            self.check_permission(commander)
            args = CommandArgs.tokenize(raw)
            self.parse(args, context)
            logger.debug("%s parsed %r into %r", self.name, raw, context)
            self.execute(commander, context)
        except CommandException as fault:
            trigger(fault, **options)
            return None
        except Exception as exception:
            logger.debug("%s handler failed", self.name, exc_info=True)
            trigger(
                DelegatedCommandError(
                    tr("command %s failed: %s", self.name or "<unnamed>", exception),
                    exception=exception,
                    hint="the handler raised %s" % type(exception).__name__,
                ),
                **options,
            )
            return None
        return context

    def complete(self, commander, raw, /):
        """
        completion candidates for partial raw input, [] when the command is hidden.
        """
        if not self.visibility(commander):
            return []
        args = CommandArgs.tokenize(raw, lenient=True)
        return self.tab_complete(commander, args, CommandContext())

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return f"command-spec(aliases={self._aliases!r}, element={self._element!r}, permission={self._permission!r})"


def visible(spec, commander, /):
    """
    whether spec is visible to commander.
    """
    return bool(spec.visibility(commander))


def command(*aliases, element=Unset, permission=None, executor=Unset, descr=Unset):
    """
    Create a CommandSpec or return a decorator to build it later.

    Invocation modes
    - Direct:
        spec = command("list", "ls", element=..., executor=handler)
    - Dispatcher: an element built with children() needs no executor.
        spec = command("group", element=children(add, remove))
    - Decorator:
        @command("list", "ls", element=...)
        def handler(commander, context): ...
      The decorated handler's docstring (first line) is the default descr.
    """
    @rename("command")
    def wrapper(executor, /):
        if not callable(executor):
            raise TypeError("@command() must be applied to a callable")
        doc = inspect.getdoc(executor)
        return CommandSpec(
            aliases,
            element=element,
            permission=permission,
            executor=executor,
            descr=coalesce(descr, doc.splitlines()[0] if doc else None),
        )

    if executor is not Unset or callable(getattr(element, "__executor__", None)):
        return CommandSpec(aliases, element=element, permission=permission, executor=coalesce(executor), descr=coalesce(descr))
    return wrapper


def invoke(spec, commander, prompt=Unset, /, **options):
    """
    Convenience runner for a spec.

    - prompt Unset: sys.argv[1:] is used.
    - prompt str: parsed as typed.
    - prompt Iterable[str]: tokens, re-quoted so they survive tokenizing.
    """
    if not isinstance(spec, CommandSpec):
        raise TypeError("invoke() argument must be a command spec")
    if prompt is Unset:
        prompt = shlex.join(sys.argv[1:])
    elif not isinstance(prompt, str):
        if not isinstance(prompt, Iterable):
            raise TypeError("invoke() prompt must be a string or an iterable of strings")
        prompt = list(prompt)
        if not all(isinstance(token, str) for token in prompt):
            raise TypeError("invoke() prompt must be a string or an iterable of strings")
        prompt = shlex.join(prompt)
    return spec.process(commander, prompt, **options)


__all__ = (
    "Visibility",
    "CommandSpec",
    "visible",
    "command",
    "invoke",
)
