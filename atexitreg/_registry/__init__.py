"""
Exit-callback registry internals: CallbackEntry, name resolution, and ExitRegistry.
Dependencies: stdlib only.
"""
from atexitreg._registry._core import ON_ERROR_CHOICES, ON_ERROR_LOG, ON_ERROR_RAISE, ExitRegistry
from atexitreg._registry._entry import CallbackEntry
from atexitreg._registry._resolve import resolve_callback

__all__ = [
    "ExitRegistry",
    "CallbackEntry",
    "resolve_callback",
    "ON_ERROR_RAISE",
    "ON_ERROR_LOG",
    "ON_ERROR_CHOICES",
]
