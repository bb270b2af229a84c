import pytest

import scopeprof
from scopeprof import ProfilerState


class FakeClock:
    """Manually advanced clock, in seconds."""
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, dt: float):
        self.now += dt


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def state(clock):
    return ProfilerState(clock=clock)


@pytest.fixture(autouse=True)
def clean_thread_state():
    # the main thread's registry state outlives single tests
    scopeprof.reset()
    yield
    scopeprof.reset()
