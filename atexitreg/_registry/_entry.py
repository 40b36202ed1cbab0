"""
CallbackEntry: a registered exit callback with its arguments bound.
The entry is the handle returned by register(); unregister() matches on identity.
"""
import itertools
from typing import Any, Callable

_idents = itertools.count(1)


class CallbackEntry:
    """Zero-argument callable wrapping func(*args, **kwargs), captured at registration time."""

    __slots__ = ("ident", "func", "args", "kwargs")

    def __init__(self, func: Callable[..., Any], args: tuple = (), kwargs: dict[str, Any] | None = None) -> None:
        self.ident = next(_idents)
        self.func = func
        # Own copies: rebinding the caller's variables later has no effect.
        self.args = tuple(args)
        self.kwargs = dict(kwargs) if kwargs else {}

    def __call__(self) -> Any:
        return self.func(*self.args, **self.kwargs)

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", None) or getattr(self.func, "__name__", None) or repr(self.func)

    def __repr__(self) -> str:
        return f"<CallbackEntry #{self.ident} {self.name}>"
