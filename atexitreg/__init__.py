"""atexitreg: C-style atexit() for Python (register, unregister, drain in LIFO order)."""

from atexitreg._hooks import exit_scope, install, is_installed, uninstall
from atexitreg._registry import CallbackEntry, ExitRegistry
from atexitreg.registry import (
    drain,
    get_ignore_during_drain,
    get_registry,
    is_draining,
    register,
    set_ignore_during_drain,
    unregister,
)
from atexitreg.version import version as __version__


def version() -> str:
    return __version__


__all__ = [
    "register",
    "unregister",
    "drain",
    "is_draining",
    "get_ignore_during_drain",
    "set_ignore_during_drain",
    "get_registry",
    "install",
    "uninstall",
    "is_installed",
    "exit_scope",
    "ExitRegistry",
    "CallbackEntry",
    "version",
    "__version__",
]
