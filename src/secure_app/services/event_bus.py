"""
Event Bus - Authentication outcome broadcast

Implements pub-sub pattern:
- Publishers: publish(event)
- Subscribers: subscribe(event_type, handler, priority, filter_fn) -> Subscription
- Middleware: add_middleware(middleware_fn)

No history and no replay: an event published while nobody listens is dropped.
"""

import asyncio
import inspect
from typing import Any, Callable, List, Dict, Optional
from dataclasses import dataclass
from secure_app.models.events import Event, EventType
from secure_app.lifecycle.task_registry import create_tracked_task, TaskCategory
from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


class Subscription:
    """
    Handle returned by subscribe()/add_listener()

    cancel() stops delivery; calling it again is a no-op.
    """

    def __init__(self, cancel_fn: Callable[[], None], name: str = ""):
        self._cancel_fn = cancel_fn
        self._active = True
        self.name = name

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._cancel_fn()

    def __repr__(self) -> str:
        state = "active" if self._active else "cancelled"
        return f"<Subscription {self.name or '?'} {state}>"


@dataclass(eq=False)
class EventHandler:
    """Event handler registration"""
    handler: Callable[[Event], Any]
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


class EventBus:
    """
    Event bus for pub-sub event handling

    Features:
    - Priority-based handler execution (high priority first)
    - Per-handler filtering
    - Middleware pipeline (logging, blocking)
    - Async/sync handler support (auto-detected from the handler's return value)
    - Fault tolerance (one handler crash doesn't stop others)
    - Bounded delivery: an async handler may hold up emission for at most
      `handler_timeout` seconds, after that it keeps running as a tracked task
      and the next handler is served

    Example:
        bus = EventBus(handler_timeout=1.0)

        sub = bus.subscribe(
            EventType.AUTHENTICATION,
            on_auth,
            filter_fn=lambda e: e.status == AuthenticationStatus.FAILED
        )

        await bus.publish(AuthenticationEvent(AuthenticationStatus.FAILED))
        sub.cancel()
    """

    def __init__(self, handler_timeout: Optional[float] = 1.0):
        """
        Args:
            handler_timeout: Seconds an async handler may block emission
                (None = wait for every handler to finish)
        """
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._middleware: List[Callable[[Event], Optional[Event]]] = []
        self._handler_timeout = handler_timeout

    def subscribe(
        self,
        event_type: EventType,
        handler: Callable[[Event], Any],
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> Subscription:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for
            handler: Function to call (can be async or sync)
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)

        Returns:
            Subscription whose cancel() removes the handler
        """
        entry = EventHandler(handler, priority, filter_fn)
        handlers = self._handlers.setdefault(event_type, [])
        handlers.append(entry)

        # Sort by priority (descending - highest first); stable for equal priority
        handlers.sort(key=lambda h: h.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=_handler_name(handler),
            priority=priority
        )

        return Subscription(
            lambda: self._unsubscribe(event_type, entry),
            name=f"{event_type.name}:{_handler_name(handler)}",
        )

    def _unsubscribe(self, event_type: EventType, entry: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if entry in handlers:
            handlers.remove(entry)
            log.debug(
                "Event handler unsubscribed",
                event_type=event_type.name,
                handler=_handler_name(entry.handler)
            )

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add middleware to event processing pipeline

        Middleware can modify events (return modified event), block events
        (return None) or just log them. Runs in registration order.
        """
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=_handler_name(middleware))

    def subscriber_count(self, event_type: Optional[EventType] = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(h) for h in self._handlers.values())

    def clear(self) -> None:
        """Drop every handler (teardown)."""
        count = self.subscriber_count()
        self._handlers.clear()
        log.debug("Event bus cleared", handlers=count)

    async def publish(self, event: Event) -> None:
        """
        Publish event to all current subscribers

        Flow:
        1. Apply middleware (can modify or block event)
        2. Snapshot handlers for event type (subscribe/cancel during delivery is safe)
        3. Execute handlers by priority, applying per-handler filters
        4. Bound async handlers by handler_timeout
        5. Catch and log handler exceptions (fault tolerance)
        """
        for middleware in self._middleware:
            try:
                processed_event = middleware(event)
            except Exception as e:
                log.error(
                    f"Event middleware failed: {_handler_name(middleware)}, event passed through",
                    exception=e
                )
                continue
            if processed_event is None:
                return
            event = processed_event

        handlers = list(self._handlers.get(event.type, []))
        if not handlers:
            log.debug("No handlers for event, dropped", event_type=event.type.name)
            return

        for handler_entry in handlers:
            if handler_entry not in self._handlers.get(event.type, []):
                # Cancelled by an earlier handler during this emission
                continue

            name = _handler_name(handler_entry.handler)
            try:
                if handler_entry.filter_fn and not handler_entry.filter_fn(event):
                    continue
                result = handler_entry.handler(event)
            except Exception as e:
                log.error(
                    f"Event handler failed: {name} for {event.type.name}",
                    exception=e
                )
                continue

            if inspect.isawaitable(result):
                await self._await_handler(name, event, result)

    async def _await_handler(self, name: str, event: Event, awaitable) -> None:
        if self._handler_timeout is None:
            await self._run_async_handler(name, event, awaitable)
            return

        task = create_tracked_task(
            self._run_async_handler(name, event, awaitable),
            category=TaskCategory.EVENTBUS,
            description=f"EventBus: {name} for {event.type.name}",
        )
        done, _ = await asyncio.wait({task}, timeout=self._handler_timeout)
        if not done:
            log.warn(
                f"Event handler exceeded {self._handler_timeout}s, continuing emission",
                handler=name,
                event_type=event.type.name
            )

    async def _run_async_handler(self, name: str, event: Event, awaitable) -> None:
        try:
            await awaitable
        except Exception as e:
            log.error(
                f"Event handler failed: {name} for {event.type.name}",
                exception=e
            )
