"""
Secure lifecycle coordinator

Drives the SecureController from host lifecycle transitions:
- background: lock if secured
- foreground: if secured and locked, pause, ask the authentication callback,
  forward its outcome, then unpause after the current pass
"""

import inspect
from typing import Awaitable, Callable, Optional, Union

from secure_app.models.enums import AuthenticationStatus, LifecycleSignal
from secure_app.services.post_pass_scheduler import PostPassScheduler
from secure_app.services.secure_controller import SecureController
from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.LIFECYCLE)

NeedUnlockCallback = Callable[
    [SecureController],
    Union[Awaitable[Optional[AuthenticationStatus]], Optional[AuthenticationStatus]],
]


class SecureLifecycleCoordinator:
    """
    ILifecycleObserver that turns lifecycle signals into controller commands

    The controller's `paused` flag is the only coordination mechanism. While
    the authentication callback is outstanding the controller is paused, so
    every other foreground/background signal that arrives meanwhile skips its
    automatic transition instead of prompting twice or re-locking mid-check.
    There is no timeout and no cancellation: once invoked, the callback runs
    to completion.

    unpause() is queued on the PostPassScheduler rather than called inline:
    the outcome is committed and emitted first, dependents see it, and only
    then do automatic transitions resume.

    Every foreground signal also marks the native overlay for removal on the
    next pass; `on_native_removal` performs it.
    """

    def __init__(
        self,
        controller: SecureController,
        scheduler: PostPassScheduler,
        on_need_unlock: Optional[NeedUnlockCallback] = None,
        on_native_removal: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            controller: Controller to drive (not owned)
            scheduler: Post-pass scheduler shared with the host scope
            on_need_unlock: Authentication callback, (controller) -> status | None
            on_native_removal: Called on the pass after a foreground signal
        """
        self._controller = controller
        self._scheduler = scheduler
        self._on_need_unlock = on_need_unlock
        self._on_native_removal = on_native_removal
        self._remove_native_on_next_pass = False
        self._authentication_count = 0

    @property
    def controller(self) -> SecureController:
        return self._controller

    @property
    def authentication_count(self) -> int:
        """How many times the authentication callback was invoked"""
        return self._authentication_count

    @property
    def native_removal_pending(self) -> bool:
        return self._remove_native_on_next_pass

    async def handle_signal(self, signal: LifecycleSignal) -> None:
        if signal == LifecycleSignal.RESUMED:
            await self.on_foreground()
        elif signal == LifecycleSignal.PAUSED:
            self.on_background()
        else:
            self.on_other(signal)

    # ------------------------------------------------------------------
    # ILifecycleObserver
    # ------------------------------------------------------------------

    async def on_foreground(self) -> None:
        controller = self._controller

        if controller.paused:
            log.debug("Foreground while paused, authentication already in flight")
        else:
            if controller.secured and controller.locked and self._on_need_unlock is not None:
                controller.pause()
                try:
                    await self._authenticate()
                finally:
                    self._scheduler.add_post_pass_callback(controller.unpause)
            elif controller.secured and controller.locked:
                log.debug("Locked with no authentication callback, staying locked")
            controller.resumed()

        self._remove_native_on_next_pass = True
        self._scheduler.add_post_pass_callback(self._process_native_removal)

    def on_background(self) -> None:
        controller = self._controller
        if controller.paused:
            log.debug("Background while paused, lock skipped")
            return
        if controller.secured:
            controller.lock()
            log.info("Backgrounded, content locked")

    def on_other(self, signal: LifecycleSignal) -> None:
        log.debug(f"Lifecycle signal {signal.name} passed through")

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _authenticate(self) -> None:
        self._authentication_count += 1
        log.info("Authentication required, waiting for callback", category=LogCategory.AUTH)

        try:
            status = self._on_need_unlock(self._controller)
            if inspect.isawaitable(status):
                status = await status
        except Exception as e:
            # Same as an unresolved check: the lock stays as it is
            log.error("Authentication callback failed", category=LogCategory.AUTH, exception=e)
            return

        if status is None:
            log.info("Authentication unresolved, lock unchanged", category=LogCategory.AUTH)
            return

        try:
            await self._controller.send_authentication_event(status)
        except Exception as e:
            log.error(
                "Authentication outcome delivery failed",
                category=LogCategory.AUTH,
                status=getattr(status, "name", status),
                exception=e,
            )

    def _process_native_removal(self) -> None:
        if not self._remove_native_on_next_pass:
            return
        self._remove_native_on_next_pass = False
        if self._on_native_removal is not None:
            self._on_native_removal()
