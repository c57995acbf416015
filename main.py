import logging
import sys

from rich.console import Console

from helmsman import *

__prog__ = "pex"

console = Console()

registry = MemorySubjectRegistry()
registry.register_type("user", transformer=lambda name: {"notch": "069a79f4-44e9-4726-a5be-fca90e38aaf5"}.get(name))
registry.register_type("group")
for name in ("admin", "moderator", "default"):
    registry.subjects("group").add(name)
registry.subjects("user").add("069a79f4-44e9-4726-a5be-fca90e38aaf5")
registry.transient_subjects("user").add("guest")


class ConsoleCommander:
    def __init__(self, name, *permissions):
        self.name = name
        self.fmt = RichFormatter()
        self._permissions = frozenset(permissions)

    def has_permission(self, permission, /):
        return any(permission == granted or permission.startswith(granted + ".") for granted in self._permissions)


@command("info", "i", element=subject("subject", registry, "user"))
def info(commander, context):
    """show what is known about a subject"""
    type, identifier = context.one("subject")
    known = registry.subjects(type).is_registered(identifier) or registry.transient_subjects(type).is_registered(identifier)
    console.print(commander.fmt.combined(context.one("subject"), " is ", "registered" if known else "unknown"))


@command(
    "set",
    element=seq(
        subject("subject", registry),
        string("permission"),
        optional(choices("value", {"true": 1, "false": -1, "none": 0}), 1, weak=True),
        optional(context_pair("context")),
    ),
    permission="pex.permission.set",
)
def assign(commander, context):
    """set a permission on a subject"""
    scope = " in %s=%s" % context.one("context") if context.has("context") else ""
    console.print(commander.fmt.combined(
        context.one("subject"), " → ", context.one("permission"), " = ", str(context.one("value")), scope,
    ))


@command("types", descr="list registered subject types")
def types(commander, context):
    console.print(", ".join(registry.registered_subject_types()))


root = command("pex", "permissionsex", element=children(info, assign, types))


def main():
    if "--debug" in sys.argv:
        install_logging(logging.DEBUG)
    commander = ConsoleCommander("console", "pex.permission")
    console.print(root.help(commander))
    while True:
        try:
            line = console.input("[bold]pex> [/bold]")
        except EOFError:
            break
        if line.strip() in ("exit", "quit"):
            break
        # a trailing '?' lists completions instead of running the command
        if line.endswith("?"):
            console.print(root.complete(commander, line[:-1]))
            continue
        root.process(commander, line, shell=True, fancy=True, colorful=True)


if __name__ == '__main__':
    main()
