"""
Helmsman faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain to keep copy consistent and make logs/searches predictable.
- CommandException: base type that carries message + options and knows how to render
  itself in a friendly, lowercased and actionable way.
- ArgumentParseException and its variants: parse errors tied to a token position.
- InternalStateError / PermissionDeniedError / DelegatedCommandError: non-parse faults.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- tr(): localizable message templates resolved through the host application.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: parse errors name the ordinal position of the offending
  token (“at second position”) so users can learn by trying.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.

Integration
- Elements raise parse errors through CommandArgs.create_error(...).
- CommandSpec.process(...) catches CommandException and calls trigger(fault, **options).
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via rich.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .console import console
from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_SUBCOMMAND
    - tokens (1111x)
      • MALFORMED_INPUT, MISSING_TOKEN, UNPARSED_TOKENS
    - values (1112x)
      • INVALID_CHOICE, INVALID_SUBJECT_TYPE, MALFORMED_CONTEXT
    - access (1113x)
      • PERMISSION_DENIED
    - delegated (1114x)
      • DELEGATED_ERROR
    - engine (119xx)
      • INTERNAL_STATE
    """
    # --- routing errors ---
    UNKNOWN_SUBCOMMAND          = 11102

    # --- token stream errors ---
    MALFORMED_INPUT             = 11111
    MISSING_TOKEN               = 11112
    UNPARSED_TOKENS             = 11113

    # --- value errors ---
    INVALID_CHOICE              = 11121
    INVALID_SUBJECT_TYPE        = 11122
    MALFORMED_CONTEXT           = 11123

    # --- access errors ---
    PERMISSION_DENIED           = 11131

    # --- delegated errors ---
    DELEGATED_ERROR             = 11141

    # --- engine errors ---
    INTERNAL_STATE              = 11901

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def tr(template, /, *args):
    """
    resolve a message template through the host and format it.

    the host application can provide a __translations__ mapping in __main__ from
    the english template to a localized one; both use %-style placeholders.
    """
    template = getattr(__import__("__main__"), "__translations__", {}).get(template, template)
    return template % args if args else template


class CommandException(Exception):
    """
    base fault of the engine.

    options (all optional, read-only after construction)
    - code: FaultCode, title: str, hint: str, docs: str
    - tool: the CommandSpec being processed (used for the header)
    - shell/fancy/colorful: rendering switches (see trigger())
    - console: rich Console to print on in shell mode
    """
    __code__ = Unset
    __title__ = "command error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", self.__code__)

    @property
    def title(self):
        return self.options.get("title", self.__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return str(self.message) if self.message is not Unset else self.title

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        tool = self.options.get("tool")
        prog = text(getattr(main, "__prog__", getattr(tool, "name", None) or "helmsman"), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "?"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from self.options.get("exception")
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ArgumentParseException(CommandException):
    """
    user input malformed or semantically invalid at a specific token.

    extra options
    - index: 0-based token index of the offending token (cursor position)
    - token: the offending token, when there is one
    - input: the raw input being parsed
    """
    __title__ = "invalid argument"

    @property
    def index(self):
        return self.options.get("index")

    @property
    def token(self):
        return self.options.get("token")

    @property
    def input(self):
        return self.options.get("input")


class UnknownSubcommandError(ArgumentParseException):
    __code__ = FaultCode.UNKNOWN_SUBCOMMAND
    __title__ = "unknown subcommand"


class MalformedInputError(ArgumentParseException):
    __code__ = FaultCode.MALFORMED_INPUT
    __title__ = "malformed input"


class MissingTokenError(ArgumentParseException):
    __code__ = FaultCode.MISSING_TOKEN
    __title__ = "not enough arguments"


class UnparsedTokensError(ArgumentParseException):
    __code__ = FaultCode.UNPARSED_TOKENS
    __title__ = "too many arguments"


class InvalidChoiceError(ArgumentParseException):
    __code__ = FaultCode.INVALID_CHOICE
    __title__ = "invalid choice"


class InvalidSubjectTypeError(ArgumentParseException):
    __code__ = FaultCode.INVALID_SUBJECT_TYPE
    __title__ = "invalid subject type"


class MalformedContextError(ArgumentParseException):
    __code__ = FaultCode.MALFORMED_CONTEXT
    __title__ = "malformed context"


class PermissionDeniedError(CommandException):
    __code__ = FaultCode.PERMISSION_DENIED
    __title__ = "permission denied"


class DelegatedCommandError(CommandException):
    __code__ = FaultCode.DELEGATED_ERROR
    __title__ = "delegated command error"


class InternalStateError(CommandException):
    """
    engine invariant violation (not caused by the user).

    raised, for instance, when a child executor runs against a context that holds
    no resolved command spec for its key. the offending key is kept in options.
    """
    __code__ = FaultCode.INTERNAL_STATE
    __title__ = "internal error"

    @property
    def key(self):
        return self.options.get("key")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, the fault is raised.

    typical options
    - tool, shell, fancy, colorful, console, and any other context the reporter may
      want to show (index/token/input/key).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "CommandException",
    "ArgumentParseException",
    "UnknownSubcommandError",
    "MalformedInputError",
    "MissingTokenError",
    "UnparsedTokensError",
    "InvalidChoiceError",
    "InvalidSubjectTypeError",
    "MalformedContextError",
    "PermissionDeniedError",
    "DelegatedCommandError",
    "InternalStateError",
    "trigger",
    "tr",
    "getdoc",
)
