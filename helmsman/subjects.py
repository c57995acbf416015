"""
Leaf elements for the permission domain.

Grammars
- subject type: a single bare word naming a registered subject type ("user").
- subject reference, one of:
  • type:identifier        ("group:admin")
  • type identifier        ("group admin")
  • identifier             ("admin", only with a default type configured)
- context pair: key=value, split on the first "=" ("a=b=c" → ("a", "b=c")).

The subject registry is consulted through its public surface only:
registered_subject_types(), subjects(type), transient_subjects(type) and
name_transformer(type).
"""
import itertools
import logging

from .elements import CommandElement
from .faults import InvalidSubjectTypeError, MalformedContextError
from .utils import ordinal, prefixed

logger = logging.getLogger(__name__)


def _identifiers(registry, type):
    """
    raw identifiers of both stores followed by their transformed forms, in order.
    """
    raw = list(itertools.chain(
        registry.subjects(type).all_identifiers(),
        registry.transient_subjects(type).all_identifiers(),
    ))
    transform = registry.name_transformer(type)
    return raw + [name for name in map(transform, raw) if name]


class SubjectTypeElement(CommandElement):
    __introspectable__ = ("registry",)

    def __init__(self, key, registry, /):
        super().__init__(key)
        self._registry = registry

    def parse_value(self, args, /):
        token = args.next()
        types = self._registry.registered_subject_types()
        if token not in types:
            raise args.create_error(
                InvalidSubjectTypeError,
                "subject type %s was not valid at %s position",
                token,
                ordinal(args.position),
                hint="known subject types are %s" % ", ".join(sorted(types)) if types else "no subject type is registered",
            )
        return token

    def tab_complete(self, commander, args, context, /):
        return prefixed(self._registry.registered_subject_types(), args.next_if_present())


class SubjectElement(CommandElement):
    """
    Subject reference; the value is a (type, identifier) pair.

    When neither store of the type knows the identifier, the type's name
    transformer is applied and a non-empty result replaces it (a player name
    becoming a uuid, for instance).
    """
    __introspectable__ = ("registry", "default_type")

    def __init__(self, key, registry, default_type=None, /):
        super().__init__(key)
        self._registry = registry
        self._default_type = default_type

    def parse_value(self, args, /):
        type = args.next()
        if ":" in type:
            type, identifier = type.split(":", 1)
        elif self._default_type is not None and not args.has_next():
            type, identifier = self._default_type, type
        else:
            identifier = args.next()

        registry = self._registry
        if not (
            registry.subjects(type).is_registered(identifier) or
            registry.transient_subjects(type).is_registered(identifier)
        ):
            if transformed := registry.name_transformer(type)(identifier):
                logger.debug("subject %s:%s resolved to %s:%s", type, identifier, type, transformed)
                identifier = transformed
        return type, identifier

    def tab_complete(self, commander, args, context, /):
        registry = self._registry
        if (type := args.next_if_present()) is None:
            return list(registry.registered_subject_types())

        if (identifier := args.next_if_present()) is None:
            if ":" not in type:
                return prefixed(registry.registered_subject_types(), type)
            type, identifier = type.split(":", 1)
            return [f"{type}:{name}" for name in prefixed(_identifiers(registry, type), identifier)]

        return prefixed(_identifiers(registry, type), identifier)


class ContextPairElement(CommandElement):
    """
    Context pair; the value is a (key, value) pair. Values are not completable.
    """

    def parse_value(self, args, /):
        token = args.next()
        key, separator, value = token.partition("=")
        if not separator:
            raise args.create_error(
                MalformedContextError,
                "context must be of the form <key>=<value> at %s position",
                ordinal(args.position),
                hint="try %s=<value>" % token if token else "try world=nether",
            )
        return key, value

    def tab_complete(self, commander, args, context, /):
        return []


def subject_type(key, registry, /):
    """
    Expect one registered subject type name.
    """
    return SubjectTypeElement(key, registry)


def subject(key, registry, default_type=None, /):
    """
    Expect a subject reference, optionally defaulting its type.
    """
    return SubjectElement(key, registry, default_type)


def context_pair(key, /):
    """
    Expect one key=value context pair.
    """
    return ContextPairElement(key)


__all__ = (
    "SubjectTypeElement",
    "SubjectElement",
    "ContextPairElement",
    "subject_type",
    "subject",
    "context_pair",
)
