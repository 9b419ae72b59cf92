import pytest


@pytest.fixture
def fake_clock():
    class _Clock:
        def __init__(self) -> None:
            self.now = 1000.0
            self.sleeps: list[float] = []

        def __call__(self) -> float:
            return self.now

        def sleep(self, seconds: float) -> None:
            self.sleeps.append(seconds)
            self.now += seconds

    return _Clock()
