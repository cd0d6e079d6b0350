"""
Application configuration model

Built by ConfigManager from secure_app.yaml (or factory defaults) and consumed
by SecureApplication and the demo entry point.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from secure_app.models.domain.secure_state import SecureState
from secure_app.models.enums import LogLevel, NativeOverlayMode
from secure_app.utils.enum_helper import EnumHelper


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"'{key}' must be true/false, got {value!r}")


def _parse_non_negative(key: str, value: Any, cast=float):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' must be a number, got {value!r}")
    if value < 0:
        raise ValueError(f"'{key}' must be >= 0, got {value}")
    return cast(value)


@dataclass
class SecureAppConfig:
    """
    Host scope settings

    Attributes:
        initial_state: Starting SecureState for a controller created by the host scope
        auto_unlock_native: Remove the native overlay automatically after resume
        native_remove_delay_ms: Delay before removing the native overlay
        native_overlay: Which native overlay bridge to build
        event_handler_timeout: Seconds an async outcome handler may block emission
        log_level: Minimum console log level
        use_colors: ANSI colours in console output
    """

    initial_state: SecureState = field(default_factory=SecureState)
    auto_unlock_native: bool = True
    native_remove_delay_ms: int = 0
    native_overlay: NativeOverlayMode = NativeOverlayMode.NONE
    event_handler_timeout: Optional[float] = 1.0
    log_level: LogLevel = LogLevel.INFO
    use_colors: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SecureAppConfig":
        """
        Build config from a parsed YAML mapping

        Missing keys keep their defaults; invalid values raise ValueError.
        """
        data = data or {}
        config = cls()

        state = data.get("initial_state") or {}
        if not isinstance(state, dict):
            raise ValueError(f"'initial_state' must be a mapping, got {state!r}")
        config.initial_state = SecureState(
            secured=_parse_bool("initial_state.secured", state.get("secured", False)),
            locked=_parse_bool("initial_state.locked", state.get("locked", False)),
            paused=_parse_bool("initial_state.paused", state.get("paused", False)),
        )

        native = data.get("native") or {}
        if "auto_unlock" in native:
            config.auto_unlock_native = _parse_bool("native.auto_unlock", native["auto_unlock"])
        if "remove_delay_ms" in native:
            config.native_remove_delay_ms = _parse_non_negative(
                "native.remove_delay_ms", native["remove_delay_ms"], cast=int
            )
        if "overlay" in native:
            config.native_overlay = EnumHelper.to_enum(NativeOverlayMode, native["overlay"])

        events = data.get("events") or {}
        if "handler_timeout" in events:
            timeout = events["handler_timeout"]
            config.event_handler_timeout = (
                None if timeout is None
                else _parse_non_negative("events.handler_timeout", timeout)
            )

        logging = data.get("logging") or {}
        if "level" in logging:
            config.log_level = EnumHelper.to_enum(LogLevel, logging["level"])
        if "use_colors" in logging:
            config.use_colors = _parse_bool("logging.use_colors", logging["use_colors"])

        return config
