"""
Token cursor over a raw command line.

CommandArgs is the positional, rewindable view every element reads from. It is
created fresh for each parse or completion pass and must not be shared.

Tokenizing
- shell-style splitting (shlex): quotes group words, backslashes escape.
- strict mode (parsing): an unterminated quote is a MalformedInputError.
- lenient mode (completion): an unterminated quote or escape is closed at the
  end of the input, so the partial last token carries no quote character. Input
  that still cannot be split falls back to whitespace splitting. An unescaped
  trailing space yields an empty last token so the element that comes next
  completes against "".

Positions
- position is the 0-based index of the next token to read; faults carry it as
  'index' and render it as an ordinal ("at second position").
"""
import logging
import shlex

from .faults import ArgumentParseException, MalformedInputError, MissingTokenError, tr
from .utils import ordinal

logger = logging.getLogger(__name__)


class CommandArgs:
    """
    rewindable cursor over the tokens of one raw input.

    reading
    - next(): consume the next token or fail with MissingTokenError.
    - next_if_present(): consume the next token or return None.
    - peek(): look at the next token without consuming it.
    - has_next(): whether any token remains.

    moving
    - position: read to save, assign to rewind (0 <= position <= len(tokens)).
    - previous(): step back one token.

    errors
    - create_error(fault, message, *args, **options): build a parse error tied to
      the current position (the last consumed token when there is one).
    """
    __slots__ = ("_raw", "_tokens", "_position")

    def __init__(self, raw, tokens, /):
        if not isinstance(raw, str):
            raise TypeError("CommandArgs() raw input must be a string")
        self._raw = raw
        self._tokens = tuple(tokens)
        for token in self._tokens:
            if not isinstance(token, str):
                raise TypeError("CommandArgs() tokens must be strings")
        self._position = 0

    @classmethod
    def tokenize(cls, raw, /, *, lenient=False):
        """
        split raw input into a fresh cursor.

        parameters
        - raw: str, the text typed after the command alias.
        - lenient: bool (keyword-only), completion mode (see module docstring).

        raises
        - MalformedInputError in strict mode when quoting is unbalanced.
        """
        if not isinstance(raw, str):
            raise TypeError("tokenize() argument must be a string")
        try:
            tokens = shlex.split(raw)
        except ValueError as exception:
            if not lenient:
                raise MalformedInputError(
                    tr("input could not be split into arguments (%s)", str(exception).lower()),
                    input=raw,
                    index=0,
                    hint="close every quote you open, or escape it with a backslash",
                ) from None
            tokens, trailing = cls._salvage(raw)
        else:
            # an escaped or quoted trailing space belongs to the last token
            trailing = lenient and raw[-1:].isspace() and len(shlex.split(raw + "x")) > len(tokens)

        if tokens and trailing:
            # the user is about to type a new token
            tokens.append("")
        return cls(raw, tokens)

    @staticmethod
    def _salvage(raw, /):
        """
        split input whose last quote or escape is still open.

        returns (tokens, trailing) where trailing tells whether raw ends on a
        token separator.
        """
        for closer in ("\\", '"', "'"):
            try:
                tokens = shlex.split(raw + closer)
            except ValueError:
                continue
            logger.debug("lenient tokenize closed %r for %r", closer, raw)
            # the open quote or escape swallows any trailing space
            return tokens, False
        logger.debug("lenient tokenize fell back to whitespace splitting for %r", raw)
        tokens = raw.split()
        if tokens and tokens[-1][:1] in ('"', "'"):
            tokens[-1] = tokens[-1][1:]
        return tokens, raw[-1:].isspace()

    @property
    def raw(self):
        return self._raw

    @property
    def tokens(self):
        return self._tokens

    @property
    def position(self):
        return self._position

    @position.setter
    def position(self, position):
        if not isinstance(position, int) or not 0 <= position <= len(self._tokens):
            raise ValueError("position must be an integer within the token range")
        self._position = position

    def has_next(self):
        return self._position < len(self._tokens)

    def peek(self):
        return self._tokens[self._position] if self.has_next() else None

    def next(self):
        if not self.has_next():
            raise self.create_error(
                MissingTokenError,
                "not enough arguments at %s position",
                ordinal(self._position + 1),
                index=self._position,
                token=None,
                hint="complete the command, usage lists every expected argument",
            )
        token = self._tokens[self._position]
        self._position += 1
        return token

    def next_if_present(self):
        return self.next() if self.has_next() else None

    def previous(self):
        if self._position == 0:
            raise ValueError("cursor is already at the first token")
        self._position -= 1
        return self._tokens[self._position]

    def remaining(self):
        return self._tokens[self._position:]

    def create_error(self, fault, message, /, *args, **options):
        """
        build (not raise) a parse error at the current position.

        the reported index is the last consumed token, since elements validate a
        token after reading it; before anything is read it is the first token.
        the message is a tr() template formatted with args.
        """
        if not isinstance(fault, type) or not issubclass(fault, ArgumentParseException):
            raise TypeError("create_error() fault must be an argument parse exception type")
        index = max(self._position - 1, 0)
        options.setdefault("index", index)
        options.setdefault("token", self._tokens[index] if index < len(self._tokens) else None)
        options.setdefault("input", self._raw)
        return fault(tr(message, *args), **options)

    def __len__(self):
        return len(self._tokens)

    def __repr__(self):
        return f"command-args(tokens={self._tokens!r}, position={self._position!r})"


__all__ = (
    "CommandArgs",
)
