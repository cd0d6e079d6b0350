"""
main.py - Demo entry point for the secure application
----------------------------------------------------

Responsible for:
- loading configuration and configuring the logger
- wiring SecureApplication to an in-process lifecycle dispatcher
- driving lifecycle signals from the terminal
- graceful shutdown on quit, EOF, Ctrl+C or SIGTERM
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from secure_app.input.stdin_adapter import StdinLifecycleAdapter
from secure_app.lifecycle import LifecycleDispatcher, ShutdownCoordinator
from secure_app.lifecycle.handlers import TrackedTaskCancellationHandler
from secure_app.lifecycle.task_registry import create_tracked_task, TaskCategory
from secure_app.managers.config_manager import ConfigManager
from secure_app.models.enums import AuthenticationStatus, LogCategory
from secure_app.secure_application import SecureApplication
from secure_app.services.middleware import log_middleware
from secure_app.services.secure_controller import SecureController
from secure_app.utils.enum_helper import EnumHelper
from secure_app.utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.SYSTEM)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="secure_app",
        description="Drive the secure application state machine from the terminal.",
    )
    parser.add_argument("--config", default=None, help="Path to secure_app.yaml")
    parser.add_argument(
        "--auth-result",
        default="success",
        choices=EnumHelper.list_names(AuthenticationStatus, lowercase=True) + ["none"],
        help="Outcome the demo authentication callback answers with",
    )
    parser.add_argument(
        "--auth-delay",
        type=float,
        default=1.0,
        help="Seconds the demo authentication callback takes to answer",
    )
    return parser.parse_args(argv)


def make_demo_authenticator(result: str, delay: float):
    """Stand-in for a real biometric/credential check"""
    status = None if result == "none" else EnumHelper.to_enum(AuthenticationStatus, result)

    async def authenticate(controller: SecureController) -> Optional[AuthenticationStatus]:
        log.info(f"Demo authentication running ({delay:.1f}s)...", category=LogCategory.AUTH)
        await asyncio.sleep(delay)
        return status

    return authenticate


async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    config = ConfigManager(args.config).load()
    configure_logger(config.log_level, config.use_colors)

    shutdown = ShutdownCoordinator()
    loop = asyncio.get_running_loop()
    if sys.platform != "win32":
        shutdown.setup_signal_handlers(loop)

    app = SecureApplication(
        on_need_unlock=make_demo_authenticator(args.auth_result, args.auth_delay),
        on_authentication_succeed=lambda: log.info("Welcome back"),
        on_authentication_failed=lambda: log.warn("Authentication failed, content stays hidden"),
        on_logout=lambda: log.info("Logged out"),
        config=config,
    )
    app.controller.add_event_middleware(log_middleware)
    app.controller.add_listener(
        lambda e: log.info("State", category=LogCategory.STATE, **e.current.to_dict())
    )

    dispatcher = LifecycleDispatcher()
    app.start(dispatcher)

    adapter = StdinLifecycleAdapter(
        dispatcher,
        app.controller,
        on_quit=lambda: loop.call_soon_threadsafe(shutdown.request_shutdown, "quit"),
    )
    create_tracked_task(adapter.run(), category=TaskCategory.INPUT, description="STDIN lifecycle adapter")

    shutdown.register(app)
    shutdown.register(TrackedTaskCancellationHandler())

    await shutdown.wait_for_shutdown()
    await shutdown.shutdown_all()
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)
