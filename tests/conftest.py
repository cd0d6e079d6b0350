"""
Shared pytest fixtures for secure_app tests.
"""

import pytest

from secure_app.lifecycle.task_registry import TaskRegistry
from secure_app.models.domain.secure_state import SecureState
from secure_app.models.enums import LogLevel
from secure_app.services.post_pass_scheduler import PostPassScheduler
from secure_app.services.secure_controller import SecureController
from secure_app.utils.logger import configure_logger, get_logger


@pytest.fixture(autouse=True)
def fresh_task_registry():
    """Each test (and its event loop) gets its own registry"""
    TaskRegistry.reset()
    yield
    TaskRegistry.reset()


@pytest.fixture(autouse=True)
def plain_logger():
    configure_logger(LogLevel.DEBUG, use_colors=False)
    yield
    configure_logger(LogLevel.INFO, use_colors=True)


@pytest.fixture
def log_records():
    """Captured LogRecords emitted during the test"""
    records = []
    get_logger().add_sink(records.append)
    yield records
    get_logger().remove_sink(records.append)


@pytest.fixture
def controller():
    return SecureController()


@pytest.fixture
def locked_controller():
    return SecureController(SecureState(secured=True, locked=True))


@pytest.fixture
def scheduler():
    return PostPassScheduler()


@pytest.fixture
def outcomes():
    """Factory: subscribe a recorder to a controller, returns the recorded statuses"""
    def attach(ctrl: SecureController):
        received = []
        ctrl.subscribe_authentication(lambda e: received.append(e.status))
        return received
    return attach


@pytest.fixture
def authenticator():
    """
    Factory: async authentication callback answering `result`.

    Every invocation appends the controller snapshot it saw to `calls`.
    """
    def make(result, calls=None):
        async def authenticate(ctrl):
            if calls is not None:
                calls.append(ctrl.value)
            return result
        return authenticate
    return make
