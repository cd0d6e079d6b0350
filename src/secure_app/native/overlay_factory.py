from secure_app.models.enums import NativeOverlayMode
from secure_app.native.overlay_interface import INativeOverlay
from secure_app.native.overlay_mock import NullNativeOverlay, LoggingNativeOverlay


def create_native_overlay(mode: NativeOverlayMode = NativeOverlayMode.NONE) -> INativeOverlay:
    if mode == NativeOverlayMode.LOG:
        return LoggingNativeOverlay()
    return NullNativeOverlay()
