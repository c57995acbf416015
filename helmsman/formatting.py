"""
Rich formatter handed to commanders as commander.fmt.

Only two operations are needed by the engine and its handlers:
- combined(*items): one Text out of strings, Text fragments and subjects.
- subject((type, identifier)): a subject reference rendered as "type:identifier".

Styles default to a small palette and can be overridden by the host through
__styles__ in __main__ ("subject-type", "subject-identifier", "separator").
"""
from collections import defaultdict

from rich.text import Text


class RichFormatter:
    __slots__ = ("_colorful",)

    def __init__(self, *, colorful=True):
        self._colorful = bool(colorful)

    @property
    def colorful(self):
        return self._colorful

    def _style(self, name):
        if not self._colorful:
            return ""
        return defaultdict(str, {
            "subject-type": "#9CA3AF",
            "subject-identifier": "bold #00E5FF",
            "separator": "dim",
        } | getattr(__import__("__main__"), "__styles__", {}))[name]

    def subject(self, subject, /):
        type, identifier = subject
        return Text.assemble(
            (str(type), self._style("subject-type")),
            (":", self._style("separator")),
            (str(identifier), self._style("subject-identifier")),
        )

    def combined(self, *items):
        text = Text()
        for item in items:
            if isinstance(item, Text):
                text.append_text(item if self._colorful else Text(item.plain))
            elif isinstance(item, tuple) and len(item) == 2:
                text.append_text(self.subject(item))
            else:
                text.append(str(item))
        return text

    def __repr__(self):
        return f"rich-formatter(colorful={self._colorful!r})"


__all__ = (
    "RichFormatter",
)
