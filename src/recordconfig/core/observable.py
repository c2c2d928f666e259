"""Field-level change notification for record instances."""

from __future__ import annotations

from typing import Any, Callable, List, Protocol, runtime_checkable

ChangeListener = Callable[[Any, str], None]


@runtime_checkable
class SupportsChangeNotification(Protocol):
    """Records that report each field assignment to subscribers."""

    def subscribe(self, listener: ChangeListener) -> None: ...

    def unsubscribe(self, listener: ChangeListener) -> None: ...


class ObservableRecord:
    """
    Mixin that notifies listeners after a public attribute is assigned.

    Combine with ``@dataclass``:

        @dataclass
        class WindowSettings(ObservableRecord):
            width: int = 800
            title: str = ""

    Listeners are called as ``listener(instance, field_name)`` once the new
    value is in place. Assignments made in ``__init__`` happen before anyone
    can subscribe and therefore notify nobody.
    """

    def subscribe(self, listener: ChangeListener) -> None:
        listeners = self._listeners()
        if listener not in listeners:
            listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        listeners = self._listeners()
        if listener in listeners:
            listeners.remove(listener)

    def _listeners(self) -> List[ChangeListener]:
        try:
            return object.__getattribute__(self, "_change_listeners")
        except AttributeError:
            listeners: List[ChangeListener] = []
            object.__setattr__(self, "_change_listeners", listeners)
            return listeners

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name.startswith("_"):
            return
        for listener in list(self._listeners()):
            listener(self, name)


def supports_change_notification(instance: Any) -> bool:
    return isinstance(instance, SupportsChangeNotification)
