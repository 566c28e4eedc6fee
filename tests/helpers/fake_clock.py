"""
Deterministic clock for deadline and countdown tests.
"""


class FakeClock:
    """Callable epoch clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now
