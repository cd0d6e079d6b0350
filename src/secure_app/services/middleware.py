"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from secure_app.models.events import Event
from secure_app.utils.enum_helper import EnumHelper
from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = EnumHelper.to_name(event.source) if event.source else "-"
    data_str = ", ".join(
        f"{k}={EnumHelper.to_name(v)}" for k, v in event.to_data().items()
    )

    log.info(f"Event: {event.type.name} from {source_str} | {data_str}")
    return event
