"""
Shared fixtures for the convergence test suite.

Pollers never really sleep in tests: every harness is built with a
``RecordingSleep`` and a small attempt budget.
"""

import pytest
import pytest_asyncio

from convergence.env import Env
from convergence.harness import Harness
from convergence.polling import PollConfig

from tests.unit.mocks import FakeRemoteCaller, RecordingSleep, make_cluster


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


@pytest.fixture
def quiet_env() -> Env:
    return Env(CONVERGENCE_LOG_LEVEL="critical", CONVERGENCE_SOFTCOMMIT="0s")


@pytest.fixture
def cluster():
    return make_cluster("dev1", "dev2", "dev3")


@pytest.fixture
def caller() -> FakeRemoteCaller:
    return FakeRemoteCaller()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def poll_config() -> PollConfig:
    return PollConfig(max_attempts=5, delay=0.5)


@pytest_asyncio.fixture
async def harness(cluster, caller, sleep, poll_config, quiet_env):
    harness = Harness.create(
        cluster,
        env=quiet_env,
        caller=caller,
        poll_config=poll_config,
        sleep=sleep,
    )
    yield harness
    await harness.close()
