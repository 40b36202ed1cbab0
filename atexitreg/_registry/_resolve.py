"""
Resolve a callback given by name to a callable.

Unqualified names are looked up in the registering caller's module globals.
"pkg.mod:func" imports pkg.mod and walks the attribute path after the colon;
a dotted "pkg.mod.func" that is not a caller global is split on the last dot.
"""
import importlib
from typing import Any, Callable


def _walk(obj: Any, path: str) -> Any:
    for part in path.split("."):
        obj = getattr(obj, part)
    return obj


def _from_module(module_name: str, attr_path: str) -> Any:
    module = importlib.import_module(module_name)
    return _walk(module, attr_path)


def resolve_callback(
    callback: Callable[..., Any] | str,
    caller_globals: dict[str, Any] | None,
) -> Callable[..., Any] | None:
    """Return a callable for *callback*, or None if it cannot be resolved."""
    if not isinstance(callback, str):
        return callback if callable(callback) else None

    name = callback.strip()
    if not name:
        return None
    try:
        if ":" in name:
            module_name, _, attr_path = name.partition(":")
            target = _from_module(module_name, attr_path)
        else:
            head, _, rest = name.partition(".")
            if caller_globals is not None and head in caller_globals:
                target = caller_globals[head]
                if rest:
                    target = _walk(target, rest)
            elif "." in name:
                module_name, _, attr = name.rpartition(".")
                target = _from_module(module_name, attr)
            else:
                return None
    except (ImportError, AttributeError, ValueError, TypeError):
        return None
    return target if callable(target) else None
