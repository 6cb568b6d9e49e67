"""
Pytest configuration for PayHere SDK tests

Configures:
- asyncio marker (tests run with pytest-asyncio)
- Common fixtures: fake clock, client with test credentials
"""
import pytest

from payhere import PayHere


MERCHANT_ID = "1211149"
MERCHANT_SECRET = "MERCHANT_SECRET_1"
APP_ID = "4OVxzvEFHAQ4JFnJxrjd8C3D4"
APP_SECRET = "8cUPiCrAGxD8m1jSGgzJvN4ybMZxWZXl08Nlz8fDVzl0"


def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


class FakeClock:
    """Manually advanced clock for token expiry tests"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def payhere(clock):
    """Sandbox client with test credentials and a fake clock"""
    return PayHere(
        merchant_id=MERCHANT_ID,
        merchant_secret=MERCHANT_SECRET,
        app_id=APP_ID,
        app_secret=APP_SECRET,
        sandbox_enabled=True,
        timer=clock,
    )
