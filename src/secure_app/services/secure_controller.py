"""Secure controller - owns SecureState and the authentication event stream"""

from typing import Any, Callable, List, Optional

from secure_app.models.domain.secure_state import SecureState
from secure_app.models.enums import AuthenticationStatus
from secure_app.models.events import (
    AuthenticationEvent,
    EventType,
    ResumedEvent,
    StateChangedEvent,
)
from secure_app.services.event_bus import EventBus, Subscription
from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.STATE)


class SecureController:
    """
    Sole mutator of SecureState.

    Every command builds a new SecureState snapshot, commits it, then notifies
    listeners with a StateChangedEvent. A command that would not change the
    snapshot commits nothing and notifies nobody, which makes pause()/unpause()
    idempotent and lock() a no-op when already locked.

    Commands never fail and never check preconditions: unlock() while not
    secured, or lock() while not secured, simply record the requested bit.
    Callers compose `locked` with `secured` (see SecureState.content_hidden).

    Authentication outcomes go out on a controller-owned EventBus. Listeners
    are synchronous; outcome handlers may be sync or async.

    Example:
        controller = SecureController(SecureState(secured=True))
        controller.add_listener(lambda e: render(e.current))
        controller.subscribe_authentication(on_auth)

        controller.lock()
        await controller.send_authentication_event(AuthenticationStatus.SUCCESS)
    """

    def __init__(
        self,
        initial_state: Optional[SecureState] = None,
        *,
        handler_timeout: Optional[float] = 1.0,
    ):
        """
        Args:
            initial_state: Starting snapshot (default: not secured, not locked, not paused)
            handler_timeout: Bound for async authentication handlers, see EventBus
        """
        self._value = initial_state if initial_state is not None else SecureState()
        self._authentication_events = EventBus(handler_timeout=handler_timeout)
        self._listeners: List[Callable[[StateChangedEvent], Any]] = []
        self._resume_listeners: List[Callable[[ResumedEvent], Any]] = []
        self._resume_count = 0
        self._closed = False

        log.debug("SecureController created", **self._value.to_dict())

    # === Read access ===

    @property
    def value(self) -> SecureState:
        """Current snapshot"""
        return self._value

    @property
    def secured(self) -> bool:
        return self._value.secured

    @property
    def locked(self) -> bool:
        return self._value.locked

    @property
    def paused(self) -> bool:
        return self._value.paused

    @property
    def resume_count(self) -> int:
        return self._resume_count

    @property
    def closed(self) -> bool:
        return self._closed

    # === Observers ===

    def add_listener(self, listener: Callable[[StateChangedEvent], Any]) -> Subscription:
        """Call listener with a StateChangedEvent after every committed change"""
        self._listeners.append(listener)
        return Subscription(
            lambda: self._listeners.remove(listener) if listener in self._listeners else None,
            name=f"state:{getattr(listener, '__name__', 'listener')}",
        )

    def add_resume_listener(self, listener: Callable[[ResumedEvent], Any]) -> Subscription:
        """Call listener each time resumed() is signalled"""
        self._resume_listeners.append(listener)
        return Subscription(
            lambda: self._resume_listeners.remove(listener) if listener in self._resume_listeners else None,
            name=f"resumed:{getattr(listener, '__name__', 'listener')}",
        )

    def subscribe_authentication(
        self,
        handler: Callable[[AuthenticationEvent], Any],
        status: Optional[AuthenticationStatus] = None,
        priority: int = 0,
    ) -> Subscription:
        """
        Subscribe to authentication outcomes

        Args:
            handler: Sync or async callable receiving AuthenticationEvent
            status: Only deliver this outcome (None = all outcomes)
            priority: Higher runs first
        """
        filter_fn = None
        if status is not None:
            filter_fn = lambda e: e.status == status
        return self._authentication_events.subscribe(
            EventType.AUTHENTICATION, handler, priority=priority, filter_fn=filter_fn
        )

    def add_event_middleware(self, middleware: Callable) -> None:
        self._authentication_events.add_middleware(middleware)

    @property
    def authentication_subscriber_count(self) -> int:
        return self._authentication_events.subscriber_count(EventType.AUTHENTICATION)

    def _notify(self, listeners: List[Callable], event) -> None:
        for listener in list(listeners):
            try:
                listener(event)
            except Exception as e:
                log.error(
                    f"Listener failed: {getattr(listener, '__name__', listener)}",
                    event_type=event.type.name,
                    exception=e
                )

    def _commit(self, reason: str, **changes) -> SecureState:
        previous = self._value
        current = previous.copy_with(**changes)
        if current == previous:
            return current

        self._value = current
        log.debug(reason, **current.to_dict())
        self._notify(self._listeners, StateChangedEvent(previous, current))
        return current

    # === Commands ===

    def secure(self) -> SecureState:
        """Activate protection; lock state is kept as-is"""
        return self._commit("Secured", secured=True)

    def unsecure(self) -> SecureState:
        """Deactivate protection; lock state is kept as-is"""
        return self._commit("Unsecured", secured=False)

    def open(self) -> SecureState:
        """Alias of unsecure()"""
        return self.unsecure()

    def lock(self) -> SecureState:
        """Hide protected content. Records the bit even when not secured."""
        if not self._value.secured:
            log.debug("lock() while not secured, recording bit only")
        return self._commit("Locked", locked=True)

    def lock_if_secured(self) -> SecureState:
        if self._value.secured:
            return self.lock()
        return self._value

    def unlock(self) -> SecureState:
        return self._commit("Unlocked", locked=False)

    def pause(self) -> SecureState:
        """Suspend lifecycle-driven transitions"""
        return self._commit("Paused", paused=True)

    def unpause(self) -> SecureState:
        return self._commit("Unpaused", paused=False)

    def resumed(self) -> SecureState:
        """
        Foreground reached and no authentication prompt is outstanding.

        Bookkeeping only: bumps resume_count and notifies resume listeners.
        Never touches `locked`.
        """
        self._resume_count += 1
        log.debug("Resumed", resume_count=self._resume_count)
        self._notify(self._resume_listeners, ResumedEvent(self._resume_count, self._value))
        return self._value

    async def send_authentication_event(self, status: AuthenticationStatus) -> SecureState:
        """
        Apply an authentication outcome, then broadcast it

        - SUCCESS: unlock, emit SUCCESS
        - FAILED: state untouched (stays locked), emit FAILED
        - LOGOUT: unsecure + unlock, emit LOGOUT

        The new snapshot is committed (and listeners notified) before any
        outcome handler runs.
        """
        if status == AuthenticationStatus.SUCCESS:
            self.unlock()
        elif status == AuthenticationStatus.LOGOUT:
            self.unsecure()
            self.unlock()

        log.info(f"Authentication {status.name}", category=LogCategory.AUTH, **self._value.to_dict())
        await self._authentication_events.publish(AuthenticationEvent(status))
        return self._value

    # === Teardown ===

    def close(self) -> None:
        """
        Release every subscriber and listener.

        State stays readable and commands keep working; outcomes emitted after
        close() reach nobody.
        """
        if self._closed:
            return
        self._closed = True
        self._authentication_events.clear()
        self._listeners.clear()
        self._resume_listeners.clear()
        log.debug("SecureController closed")
