"""
Helmsman utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the cursor, context, elements and command layers.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the higher-level elements/commands modules.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr) as an immutable view.

- ordinal(number)
  • Human-friendly ordinal used by position-first fault messages ("third", "12th").

- prefixed(candidates, prefix)
  • Case-sensitive prefix filter used by every completion routine.

- KeyAllocator
  • Thread-safe allocator of unique synthetic element keys ("child0", "child1", ...).

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> ordinal(2)
    'second'
    >>> prefixed(["sub1", "sub2", "other"], "su")
    ['sub1', 'sub2']
"""
import builtins
import functools
import itertools
from collections.abc import Sequence, Mapping, Set
from threading import Lock
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None” (e.g. a command built
    without an executor versus one whose executor was explicitly cleared).

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is Unset, in which case the provided
    default is returned. Falsey values like None, 0, "" or [] are preserved.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - Function form: rename(callable, name) -> callable
    - Decorator form: rename(name) -> (decorator)

    Notes
    - This utility does not alter behavior beyond metadata.
    - Built-in or C-implemented callables are not updatable and raise TypeError.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Return a shallow, read-only view of a container value.

    - Sequence (non-str) → tuple
    - Mapping           → MappingProxyType
    - Set               → frozenset
    - other types       → returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns a
    read-only view for container types, so specs and registries published
    after construction cannot be mutated through their public surface.

    Example
    - Given self._aliases, declare aliases = mirror("aliases") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def prefixed(candidates, prefix, /):
    """
    Keep the candidates starting with prefix (case-sensitive), dropping duplicates.

    Order of first appearance is preserved so completion lists are stable for a
    given registry. A None prefix matches everything.
    """
    prefix = prefix or ""
    return list(dict.fromkeys(candidate for candidate in candidates if candidate.startswith(prefix)))


@final
class KeyAllocator:
    """
    Thread-safe source of unique synthetic element keys.

    Child dispatchers need keys that never collide inside one parse context, no
    matter how many dispatchers a tree holds. Whoever builds a command tree may own
    an allocator and hand it to children(); otherwise the process-wide default is
    used. Keys are unique per allocator, not necessarily contiguous.
    """
    __slots__ = ("_prefix", "_counter", "_lock")

    def __init__(self, prefix="child", /):
        if not isinstance(prefix, str) or not prefix.strip():
            raise TypeError("KeyAllocator() prefix must be a non-empty string")
        self._prefix = prefix.strip()
        self._counter = itertools.count()
        self._lock = Lock()

    @property
    def prefix(self):
        return self._prefix

    def __call__(self):
        with self._lock:
            return self._prefix + str(next(self._counter))

    def __repr__(self):
        return f"key-allocator(prefix={self._prefix!r})"


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "prefixed",

    # Types
    "UnsetType",
    "KeyAllocator",

    # Constants
    "Unset",
)
