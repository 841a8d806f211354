from datetime import datetime, timedelta


class FakeClock:
    """Callable clock for use cases; advance() moves time forward"""

    def __init__(self, now: datetime = datetime(2026, 3, 2, 9, 30, 0)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now
