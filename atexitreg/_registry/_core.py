"""
ExitRegistry: ordered pending callbacks, register/unregister, and the drain loop.
Depends: _entry, _resolve.

New entries go to the front of the queue, so draining front-to-back runs them
last-registered first. Each entry is popped before it is invoked.
"""
import logging
import sys
import threading
from collections import deque
from typing import Any, Callable

from atexitreg._registry._entry import CallbackEntry
from atexitreg._registry._resolve import resolve_callback

log = logging.getLogger(__name__)

ON_ERROR_RAISE = "raise"
ON_ERROR_LOG = "log"
ON_ERROR_CHOICES = (ON_ERROR_RAISE, ON_ERROR_LOG)


class ExitRegistry:
    """
    Pending exit callbacks plus the Idle/Draining state.

    ignore_during_drain: refuse register() calls made while draining (C atexit behaviour).
    on_error: "raise" propagates the first callback failure and stops the drain,
    leaving later entries pending; "log" logs each failure and keeps going.
    """

    def __init__(self, ignore_during_drain: bool = True, on_error: str = ON_ERROR_RAISE) -> None:
        if on_error not in ON_ERROR_CHOICES:
            raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}")
        # Reentrant so a signal handler running drain/register on this thread cannot deadlock.
        self._lock = threading.RLock()
        self._pending: deque[CallbackEntry] = deque()
        self._draining = False
        self.ignore_during_drain = ignore_during_drain
        self.on_error = on_error

    @property
    def draining(self) -> bool:
        return self._draining

    @property
    def pending(self) -> tuple[CallbackEntry, ...]:
        """Snapshot of the queue, next-to-run first."""
        with self._lock:
            return tuple(self._pending)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            return any(entry is handle for entry in tuple(self._pending))

    def register(self, callback: Callable[..., Any] | str, *args: Any, **kwargs: Any) -> CallbackEntry | None:
        """
        Register *callback* to run at exit with *args*/*kwargs* bound now.

        *callback* may be a name, resolved in the caller's module unless qualified
        ("pkg.mod:func"). Returns the entry (the handle for unregister), or None
        when registration is refused or the name does not resolve.
        """
        return self._register(callback, args, kwargs, sys._getframe(1).f_globals)

    def _register(
        self,
        callback: Callable[..., Any] | str,
        args: tuple,
        kwargs: dict[str, Any],
        caller_globals: dict[str, Any] | None,
    ) -> CallbackEntry | None:
        if self._draining and self.ignore_during_drain:
            log.debug("register(%r) ignored: exit callbacks are running", callback)
            return None
        func = resolve_callback(callback, caller_globals)
        if func is None:
            log.warning("register(%r) failed: not a callable or resolvable name", callback)
            return None
        entry = CallbackEntry(func, args, kwargs)
        with self._lock:
            if self._draining and self.ignore_during_drain:
                log.debug("register(%r) ignored: exit callbacks are running", callback)
                return None
            self._pending.appendleft(entry)
        log.debug("registered %r", entry)
        return entry

    def unregister(self, *handles: object) -> int:
        """
        Remove the first pending entry matching each handle. Returns how many were removed.
        Unknown, already removed, or already invoked handles are skipped.
        """
        removed = 0
        with self._lock:
            for handle in handles:
                if not isinstance(handle, CallbackEntry):
                    continue
                # CallbackEntry compares by identity, so remove() drops exactly this entry.
                try:
                    self._pending.remove(handle)
                except ValueError:
                    continue
                removed += 1
        if removed:
            log.debug("unregistered %d of %d handle(s)", removed, len(handles))
        return removed

    def _pop_next(self) -> CallbackEntry | None:
        with self._lock:
            if not self._pending:
                return None
            return self._pending.popleft()

    def drain(self) -> None:
        """
        Invoke every pending entry, most recently registered first, until the queue is empty.
        A drain() from inside a running callback is a no-op.
        """
        with self._lock:
            if self._draining:
                log.debug("drain() called while already draining; ignored")
                return
            self._draining = True
        log.debug("draining exit callbacks")
        try:
            while True:
                entry = self._pop_next()
                if entry is None:
                    break
                log.debug("running %r", entry)
                if self.on_error == ON_ERROR_LOG:
                    try:
                        entry()
                    except Exception:
                        log.exception("exit callback %r failed", entry)
                else:
                    entry()
        finally:
            with self._lock:
                self._draining = False
        log.debug("exit callbacks drained")

    def _clear(self) -> None:
        """Drop all pending entries without running them. For tests only."""
        with self._lock:
            self._pending.clear()
            self._draining = False
