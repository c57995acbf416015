"""
Parse context: the multi-valued accumulator filled during one parse pass.

Every element appends the value it produced under its own key; a key used more
than once (e.g. an element inside a repeated sequence) receives one value per
successful parse, in order. Values are opaque to the engine: each element
decides its own value shape (a string, a (type, identifier) pair, a resolved
CommandSpec, ...).
"""
from collections import defaultdict


class CommandContext:
    """
    mapping from element key to the ordered values produced for it.

    operations
    - put(key, value): append a value under key.
    - all(key): tuple of every value under key (empty when absent).
    - one(key): the first value under key; KeyError when there is none.
    - has(key) / key in context: whether at least one value exists.
    - copy(): independent copy, used as scratch space by completion.
    """
    __slots__ = ("_values",)

    def __init__(self):
        self._values = defaultdict(list)

    def put(self, key, value, /):
        if not isinstance(key, str):
            raise TypeError("context keys must be strings")
        self._values[key].append(value)

    def all(self, key, /):
        return tuple(self._values.get(key, ()))

    def one(self, key, /):
        if not (values := self._values.get(key)):
            raise KeyError(key)
        return values[0]

    def has(self, key, /):
        return bool(self._values.get(key))

    def keys(self):
        return tuple(key for key, values in self._values.items() if values)

    def copy(self):
        clone = type(self)()
        for key, values in self._values.items():
            clone._values[key] = list(values)
        return clone

    def __contains__(self, key, /):
        return self.has(key)

    def __len__(self):
        return len(self.keys())

    def __rich_repr__(self):
        for key in self.keys():
            yield key, self._values[key]

    def __repr__(self):
        return f"command-context({", ".join("%s=%r" % (key, self._values[key]) for key in self.keys())})"


__all__ = (
    "CommandContext",
)
