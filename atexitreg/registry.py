"""
Process-wide exit registry and module-level register/unregister/drain.

The singleton is created on first use from load_config(). Nothing is hooked into
interpreter shutdown here; see atexitreg.install() and atexitreg.exit_scope.
"""
import logging
import sys
import threading
from typing import Any, Callable

from atexitreg._registry import CallbackEntry, ExitRegistry
from atexitreg.config import load_config

log = logging.getLogger(__name__)

_registry: ExitRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> ExitRegistry:
    """Return the process-wide ExitRegistry, creating it on first call."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                config = load_config()
                _registry = ExitRegistry(
                    ignore_during_drain=config.ignore_during_drain,
                    on_error=config.on_error,
                )
                log.debug(
                    "created exit registry (ignore_during_drain=%s, on_error=%s)",
                    config.ignore_during_drain,
                    config.on_error,
                )
    return _registry


def register(callback: Callable[..., Any] | str, *args: Any, **kwargs: Any) -> CallbackEntry | None:
    """
    Register *callback* to be called at exit as callback(*args, **kwargs).

    Callbacks run in reverse order of registration. A name is resolved in the
    caller's module unless qualified as "pkg.mod:func". Returns a handle for
    unregister(), or None if the callback could not be registered (unknown name,
    or exit callbacks are already running and registration during drain is off).
    """
    return get_registry()._register(callback, args, kwargs, sys._getframe(1).f_globals)


def unregister(*handles: object) -> int:
    """Unregister handles returned by register(). Returns the number actually removed."""
    return get_registry().unregister(*handles)


def drain() -> None:
    """Run all pending exit callbacks now, most recently registered first."""
    get_registry().drain()


def is_draining() -> bool:
    """True while exit callbacks are being invoked."""
    return get_registry().draining


def get_ignore_during_drain() -> bool:
    return get_registry().ignore_during_drain


def set_ignore_during_drain(flag: bool) -> None:
    """Whether register() calls made from running exit callbacks are ignored."""
    get_registry().ignore_during_drain = bool(flag)


def _reset_test_registry() -> None:
    """Discard the singleton so the next get_registry() builds a fresh one. For tests only."""
    global _registry
    with _registry_lock:
        _registry = None
