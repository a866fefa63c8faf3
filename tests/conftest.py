import pytest
import logging

from fakes import FakeClock
from receptionist.services.switchboard import Switchboard
from receptionist.websocket_manager import WebSocketManager


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def switchboard(clock):
    return Switchboard(clock=clock)


@pytest.fixture
def manager(switchboard):
    return WebSocketManager(switchboard)
