"""
In-memory subject registry.

The engine only reads a registry through four calls:
- registered_subject_types() -> set of type names
- subjects(type) / transient_subjects(type) -> collections answering
  is_registered(identifier) and all_identifiers()
- name_transformer(type) -> callable mapping a typed name to an identifier, or None

MemorySubjectRegistry implements them over plain dictionaries. It is meant for
hosts without a permission backend, demos and tests; registration is expected to
happen before the command tree is published.
"""
import logging

logger = logging.getLogger(__name__)


def _no_transform(name, /):
    return None


class SubjectCollection:
    """
    ordered set of identifiers for one subject type in one store.
    """
    __slots__ = ("_type", "_identifiers")

    def __init__(self, type, identifiers=(), /):
        self._type = type
        self._identifiers = dict.fromkeys(identifiers)

    @property
    def type(self):
        return self._type

    def add(self, identifier, /):
        if not isinstance(identifier, str) or not identifier:
            raise TypeError("subject identifiers must be non-empty strings")
        self._identifiers[identifier] = None

    def discard(self, identifier, /):
        self._identifiers.pop(identifier, None)

    def is_registered(self, identifier, /):
        return identifier in self._identifiers

    def all_identifiers(self):
        return tuple(self._identifiers)

    def __len__(self):
        return len(self._identifiers)

    def __repr__(self):
        return f"subject-collection(type={self._type!r}, identifiers={tuple(self._identifiers)!r})"


class MemorySubjectRegistry:
    """
    dictionary-backed registry of subject types.

    - register_type(type, transformer=None): declare a type; transformer maps a
      typed name to a canonical identifier (returning None or "" keeps it).
    - subjects(type) / transient_subjects(type): persistent and transient stores;
      unknown types get empty, unregistered stores.
    """

    def __init__(self):
        self._types = {}

    def register_type(self, type, /, transformer=None):
        if not isinstance(type, str) or not type or ":" in type or any(char.isspace() for char in type):
            raise TypeError("subject types must be non-empty words without ':'")
        if transformer is not None and not callable(transformer):
            raise TypeError("register_type() transformer must be callable")
        if type in self._types:
            logger.debug("subject type %r registered again, keeping its stores", type)
            persistent, transient, _ = self._types[type]
        else:
            persistent, transient = SubjectCollection(type), SubjectCollection(type)
        self._types[type] = persistent, transient, transformer or _no_transform
        return self

    def registered_subject_types(self):
        return self._types.keys()

    def subjects(self, type, /):
        try:
            return self._types[type][0]
        except KeyError:
            return SubjectCollection(type)

    def transient_subjects(self, type, /):
        try:
            return self._types[type][1]
        except KeyError:
            return SubjectCollection(type)

    def name_transformer(self, type, /):
        try:
            return self._types[type][2]
        except KeyError:
            return _no_transform

    def __repr__(self):
        return f"memory-subject-registry(types={sorted(self._types)!r})"


__all__ = (
    "SubjectCollection",
    "MemorySubjectRegistry",
)
