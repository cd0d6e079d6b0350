"""
Host lifecycle protocols.

The host environment (UI toolkit, service manager, test) reports foreground
and background transitions through an ILifecycleSource; anything that reacts
to them implements ILifecycleObserver.
"""

from typing import Any, Protocol

from secure_app.models.enums import LifecycleSignal


class ILifecycleObserver(Protocol):
    """
    Receives host lifecycle transitions.

    Methods may be coroutines; the source awaits them.
    """

    def on_foreground(self) -> Any:
        """Host is back in the foreground (RESUMED)"""
        ...

    def on_background(self) -> Any:
        """Host moved to the background (PAUSED)"""
        ...

    def on_other(self, signal: LifecycleSignal) -> Any:
        """Any other transition (INACTIVE, DETACHED)"""
        ...


class ILifecycleSource(Protocol):

    def add_observer(self, observer: ILifecycleObserver) -> None:
        ...

    def remove_observer(self, observer: ILifecycleObserver) -> None:
        ...
