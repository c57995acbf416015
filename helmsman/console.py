"""
Shared rich console and opt-in logging setup.

- console: the stderr Console used to render faults in shell mode.
- install_logging(level): attach a RichHandler on the package logger so hosts get
  the same look for debug records (dispatch decisions, dropped aliases, ...).

The package itself only ships a NullHandler; nothing is printed unless the host
asks for it.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def install_logging(level=logging.INFO, /, *, console=console):
    """
    route "helmsman" log records through rich.

    parameters
    - level: logging level for the package logger (int or level name).
    - console: target Console (defaults to the shared stderr console).

    returns
    - the installed RichHandler, so callers can remove it later.

    calling it twice replaces the previous handler instead of stacking them.
    """
    logger = logging.getLogger("helmsman")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


__all__ = (
    "console",
    "install_logging",
)
