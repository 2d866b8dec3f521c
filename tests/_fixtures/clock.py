"""Deterministic clock for TTL and eviction tests."""

from __future__ import annotations

from datetime import datetime, timedelta


class FakeClock:
    """Callable returning a fixed instant until advanced."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


__all__ = ["FakeClock"]
