"""
Shutdown collaborators: the pieces that decide when drain() runs.

install() hooks a registry into the interpreter's own atexit machinery.
exit_scope wraps main (or any block) and drains when the outermost scope ends,
whether it returned or raised.
No hook is installed on import; callers opt in explicitly.
"""
import atexit
import logging
from contextlib import ContextDecorator
from contextvars import ContextVar
from types import TracebackType
from typing import Any, Callable

from atexitreg._registry import ExitRegistry
from atexitreg.registry import get_registry

log = logging.getLogger(__name__)

_installed: list[ExitRegistry] = []
_scope_depth_var: ContextVar[int] = ContextVar("atexitreg_scope_depth", default=0)


def install(registry: ExitRegistry | None = None) -> bool:
    """
    Register registry.drain with the stdlib atexit module (default: the process-wide registry).
    Returns True if installed now, False if it was already installed.
    """
    reg = registry if registry is not None else get_registry()
    if any(r is reg for r in _installed):
        return False
    atexit.register(reg.drain)
    _installed.append(reg)
    log.debug("installed interpreter exit hook for %r", reg)
    return True


def uninstall(registry: ExitRegistry | None = None) -> bool:
    """Undo install(). Returns True if a hook was removed."""
    reg = registry if registry is not None else get_registry()
    for i, r in enumerate(_installed):
        if r is reg:
            atexit.unregister(reg.drain)
            del _installed[i]
            log.debug("removed interpreter exit hook for %r", reg)
            return True
    return False


def is_installed(registry: ExitRegistry | None = None) -> bool:
    reg = registry if registry is not None else get_registry()
    return any(r is reg for r in _installed)


class _ExitScope(ContextDecorator):
    """Drains the registry when the outermost active scope exits."""

    def __init__(self, registry: ExitRegistry | None = None) -> None:
        self._registry = registry

    def __enter__(self) -> "_ExitScope":
        _scope_depth_var.set(_scope_depth_var.get() + 1)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        depth = _scope_depth_var.get() - 1
        _scope_depth_var.set(depth)
        if depth == 0:
            reg = self._registry if self._registry is not None else get_registry()
            if exc_type is None:
                reg.drain()
                return
            # The body's exception wins; a callback failure is only logged.
            try:
                reg.drain()
            except Exception:
                log.exception("exit callback failed while %s was propagating", exc_type.__name__)


def exit_scope(
    f: Callable[..., Any] | None = None,
    *,
    registry: ExitRegistry | None = None,
) -> Any:
    """
    Drain exit callbacks when the wrapped function or block finishes.

    Usage: @exit_scope, @exit_scope(), @exit_scope(registry=r), with exit_scope(): ...
    Nested scopes only drain at the outermost one. Exceptions from the body still
    propagate after draining; if a callback also fails meanwhile, that failure is
    logged and the body's exception is the one raised. With a clean body a
    callback failure propagates as drain() raises it.
    """
    scope = _ExitScope(registry)
    if f is None:
        return scope
    return scope(f)
