__title__ = 'helmsman'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

__import__("logging").getLogger(__name__).addHandler(__import__("logging").NullHandler())

from . import tokens, context, elements, subjects, commands, children, faults, formatting, registry

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
    "install_logging",
)

# Load the exposed API of the token cursor
__all__ += tokens.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parse context
__all__ += context.__all__  # type: ignore[attr-defined]
# Load the exposed API of the generic elements
__all__ += elements.__all__  # type: ignore[attr-defined]
# Load the exposed API of the subject elements
__all__ += subjects.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the child dispatcher
__all__ += children.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the formatter
__all__ += formatting.__all__  # type: ignore[attr-defined]
# Load the exposed API of the in-memory registry
__all__ += registry.__all__  # type: ignore[attr-defined]

# The star imports come last: children() shadows the submodule of the same name.
from .tokens import *
from .context import *
from .elements import *
from .subjects import *
from .commands import *
from .children import *
from .faults import *
from .formatting import *
from .registry import *
from .console import install_logging
