"""
Secure application - host scope composition

Wires one SecureController, the lifecycle coordinator, the post-pass
scheduler and the native overlay bridge for a protected scope, and routes
authentication outcomes to the host's callbacks.
"""

import asyncio
import inspect
from typing import Any, Callable, List, Optional

from secure_app.lifecycle.lifecycle_protocol import ILifecycleSource
from secure_app.lifecycle.secure_lifecycle_coordinator import (
    NeedUnlockCallback,
    SecureLifecycleCoordinator,
)
from secure_app.lifecycle.task_registry import create_tracked_task, TaskCategory
from secure_app.models.config import SecureAppConfig
from secure_app.models.enums import AuthenticationStatus
from secure_app.models.events import AuthenticationEvent
from secure_app.native.overlay_factory import create_native_overlay
from secure_app.native.overlay_interface import INativeOverlay
from secure_app.services.event_bus import Subscription
from secure_app.services.post_pass_scheduler import PostPassScheduler
from secure_app.services.secure_controller import SecureController
from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)

OutcomeCallback = Callable[[], Any]


class SecureApplication:
    """
    Protected scope: exactly one controller governs it.

    A controller passed in is used as-is (custom starting values, owned by the
    caller); otherwise one is created from config.initial_state and owned here.

    Example:
        app = SecureApplication(
            on_need_unlock=ask_biometrics,
            on_authentication_failed=show_retry,
            native_remove_delay_ms=150,
        )
        app.start(lifecycle_dispatcher)
        ...
        await app.shutdown()
    """

    def __init__(
        self,
        controller: Optional[SecureController] = None,
        on_need_unlock: Optional[NeedUnlockCallback] = None,
        on_authentication_failed: Optional[OutcomeCallback] = None,
        on_authentication_succeed: Optional[OutcomeCallback] = None,
        on_logout: Optional[OutcomeCallback] = None,
        auto_unlock_native: Optional[bool] = None,
        native_remove_delay_ms: Optional[int] = None,
        native_overlay: Optional[INativeOverlay] = None,
        config: Optional[SecureAppConfig] = None,
        scheduler: Optional[PostPassScheduler] = None,
    ):
        """
        Args:
            controller: Externally supplied controller (overrides the default one)
            on_need_unlock: Authentication callback invoked on foreground while locked
            on_authentication_failed: Called on FAILED outcomes
            on_authentication_succeed: Called on SUCCESS outcomes
            on_logout: Called on LOGOUT outcomes
            auto_unlock_native: Remove the native overlay after resume (default from config)
            native_remove_delay_ms: Delay before overlay removal (default from config)
            native_overlay: Overlay bridge (default built from config.native_overlay)
            config: Settings; explicit arguments win over config values
            scheduler: Post-pass scheduler (default: a new one on the running loop)
        """
        self.config = config or SecureAppConfig()

        self._owns_controller = controller is None
        self.controller = controller or SecureController(
            self.config.initial_state,
            handler_timeout=self.config.event_handler_timeout,
        )

        self.on_authentication_failed = on_authentication_failed
        self.on_authentication_succeed = on_authentication_succeed
        self.on_logout = on_logout

        self.auto_unlock_native = (
            self.config.auto_unlock_native if auto_unlock_native is None else auto_unlock_native
        )
        delay = self.config.native_remove_delay_ms if native_remove_delay_ms is None else native_remove_delay_ms
        if delay < 0:
            raise ValueError(f"native_remove_delay_ms must be >= 0, got {delay}")
        self.native_remove_delay_ms = delay
        self.native_overlay = native_overlay or create_native_overlay(self.config.native_overlay)

        self.scheduler = scheduler or PostPassScheduler()
        self.coordinator = SecureLifecycleCoordinator(
            self.controller,
            self.scheduler,
            on_need_unlock=on_need_unlock,
            on_native_removal=self._on_native_removal,
        )

        self._lifecycle_source: Optional[ILifecycleSource] = None
        self._subscriptions: List[Subscription] = []
        self._native_tasks: List[asyncio.Task] = []
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def owns_controller(self) -> bool:
        return self._owns_controller

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, lifecycle_source: Optional[ILifecycleSource] = None) -> None:
        """
        Subscribe outcome callbacks and start observing host lifecycle

        Args:
            lifecycle_source: Where foreground/background signals come from
                (None = the host calls coordinator.handle_signal() itself)
        """
        if self._started:
            return

        self._subscriptions.append(
            self.controller.subscribe_authentication(self._on_authentication_event)
        )

        if lifecycle_source is not None:
            lifecycle_source.add_observer(self.coordinator)
            self._lifecycle_source = lifecycle_source

        self._started = True
        log.info("SecureApplication started", **self.controller.value.to_dict())

    async def _on_authentication_event(self, event: AuthenticationEvent) -> None:
        if event.status == AuthenticationStatus.FAILED:
            callback = self.on_authentication_failed
        elif event.status == AuthenticationStatus.SUCCESS:
            callback = self.on_authentication_succeed
        else:
            callback = self.on_logout

        if callback is None:
            return

        result = callback()
        if inspect.isawaitable(result):
            await result

    # ------------------------------------------------------------------
    # Native overlay
    # ------------------------------------------------------------------

    def _on_native_removal(self) -> None:
        if not self.auto_unlock_native:
            return

        task = create_tracked_task(
            self._remove_native_overlay(),
            category=TaskCategory.NATIVE,
            description=f"Native overlay removal ({self.native_remove_delay_ms}ms)",
        )
        self._native_tasks.append(task)
        task.add_done_callback(self._forget_native_task)

    def _forget_native_task(self, task: asyncio.Task) -> None:
        if task in self._native_tasks:
            self._native_tasks.remove(task)

    async def _remove_native_overlay(self) -> None:
        if self.native_remove_delay_ms:
            await asyncio.sleep(self.native_remove_delay_ms / 1000)
        self.native_overlay.unlock()

    @property
    def pending_native_removals(self) -> int:
        return len(self._native_tasks)

    # ------------------------------------------------------------------
    # Shutdown (IShutdownHandler)
    # ------------------------------------------------------------------

    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        """
        Release subscriptions, stop observing lifecycle, drop pending work

        A supplied controller stays open for its owner; an owned one is closed.
        """
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()

        if self._lifecycle_source is not None:
            self._lifecycle_source.remove_observer(self.coordinator)
            self._lifecycle_source = None

        self.scheduler.cancel()

        tasks = list(self._native_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        if self._owns_controller:
            self.controller.close()

        self._started = False
        log.info("SecureApplication shut down")
