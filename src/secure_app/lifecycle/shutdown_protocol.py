"""
Shutdown handler protocol for component-based graceful shutdown.
"""

from typing import Protocol


class IShutdownHandler(Protocol):
    """
    Protocol for components that need graceful shutdown.

    The ShutdownCoordinator calls shutdown() on each handler in priority
    order (highest first).

    Example:
        class SecureApplication:
            @property
            def shutdown_priority(self) -> int:
                return 100

            async def shutdown(self) -> None:
                for subscription in self._subscriptions:
                    subscription.cancel()
                self._lifecycle_source.remove_observer(self.coordinator)
    """

    @property
    def shutdown_priority(self) -> int:
        """
        Higher priority shuts down earlier.
        """
        ...

    async def shutdown(self) -> None:
        """
        Called during coordinated shutdown.
        """
        ...
