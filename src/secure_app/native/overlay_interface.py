from typing import Protocol


class INativeOverlay(Protocol):
    """
    Bridge to the platform's opaque protective overlay.

    The platform shows the overlay on its own while the host is backgrounded;
    the secure application only asks for removal once a resumed pass has been
    processed.
    """

    def lock(self) -> None:
        """Show the opaque overlay"""
        ...

    def unlock(self) -> None:
        """Remove the opaque overlay"""
        ...
