"""
Process-exit hook registration.

Registries hand their flush callback to a ``ShutdownHooks`` instance. The
default instance runs its callbacks from ``atexit``, so only a normal
interpreter exit flushes pending changes; a killed process loses them.
"""

from __future__ import annotations

from typing import Callable, List, Optional
import atexit

from .logger import log_error

ShutdownCallback = Callable[[], None]


class ShutdownHooks:
    """Callbacks run once, in registration order, when the process exits."""

    def __init__(self) -> None:
        self._callbacks: List[ShutdownCallback] = []
        self._ran = False

    def register(self, callback: ShutdownCallback) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister(self, callback: ShutdownCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    @property
    def callbacks(self) -> List[ShutdownCallback]:
        return list(self._callbacks)

    def run(self) -> None:
        """Invoke every callback; failures are logged and never propagate."""
        if self._ran:
            return
        self._ran = True
        for callback in list(self._callbacks):
            try:
                callback()
            except Exception as exc:
                log_error(
                    "shutdown",
                    f"Shutdown callback {getattr(callback, '__qualname__', callback)} failed",
                    exception=exc,
                )


_default_hooks: Optional[ShutdownHooks] = None


def get_shutdown_hooks() -> ShutdownHooks:
    """Return the process-wide hooks, binding them to ``atexit`` on first use."""
    global _default_hooks
    if _default_hooks is None:
        _default_hooks = ShutdownHooks()
        atexit.register(_default_hooks.run)
    return _default_hooks
