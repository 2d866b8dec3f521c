"""Tests for repolens.stores.pool."""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from repolens.stores.pool import CachePool, approximate_size
from tests._fixtures.clock import FakeClock


def test_approximate_size_is_utf8_json_length() -> None:
    assert approximate_size("abc") == 5
    assert approximate_size({"a": 1}) == 7
    assert approximate_size("é") == 4


def test_put_and_get(fake_clock: FakeClock) -> None:
    pool: CachePool[str] = CachePool("descriptions", clock=fake_clock)

    assert pool.put("k", "value", timedelta(hours=1)) is True

    assert pool.get("k") == "value"
    assert "k" in pool
    assert len(pool) == 1
    assert pool.total_bytes == approximate_size("value")
    assert pool.get("missing") is None


def test_entry_expires_exactly_at_ttl(fake_clock: FakeClock) -> None:
    pool: CachePool[str] = CachePool("descriptions", clock=fake_clock)
    pool.put("k", "value", timedelta(hours=1))

    fake_clock.advance(minutes=59)
    assert pool.get("k") == "value"

    fake_clock.advance(minutes=1)
    assert pool.get("k") is None
    assert len(pool) == 0
    assert pool.total_bytes == 0


def test_reads_do_not_refresh_lifetime(fake_clock: FakeClock) -> None:
    pool: CachePool[str] = CachePool("descriptions", clock=fake_clock)
    pool.put("k", "value", timedelta(hours=1))

    for _ in range(3):
        fake_clock.advance(minutes=20)
        pool.get("k")

    assert pool.get("k") is None


def test_overwrite_replaces_size_and_moves_key_to_end(fake_clock: FakeClock) -> None:
    pool: CachePool[str] = CachePool("descriptions", clock=fake_clock, sizer=len)
    pool.put("a", "x" * 10, timedelta(hours=1))
    pool.put("b", "y" * 5, timedelta(hours=1))

    pool.put("a", "z" * 3, timedelta(hours=1))

    assert pool.total_bytes == 8
    assert len(pool) == 2
    assert [key for key, _ in pool.entries()] == ["b", "a"]


def test_sweep_expired_removes_only_expired(fake_clock: FakeClock) -> None:
    pool: CachePool[str] = CachePool("descriptions", clock=fake_clock, sizer=len)
    pool.put("short", "aa", timedelta(minutes=5))
    pool.put("long", "bbb", timedelta(hours=5))

    fake_clock.advance(minutes=5)

    assert pool.sweep_expired() == 1
    assert list(pool) == ["long"]
    assert pool.total_bytes == 3


def test_evict_oldest_until_target(fake_clock: FakeClock) -> None:
    pool: CachePool[str] = CachePool("descriptions", clock=fake_clock, sizer=len)
    for key in ("a", "b", "c"):
        pool.put(key, key * 10, timedelta(hours=1))
        fake_clock.advance(seconds=1)

    assert pool.evict_oldest_until(15) == 2
    assert list(pool) == ["c"]
    assert pool.total_bytes == 10
    assert pool.evict_oldest_until(15) == 0


def test_delete_and_clear(fake_clock: FakeClock) -> None:
    pool: CachePool[str] = CachePool("descriptions", clock=fake_clock, sizer=len)
    pool.put("a", "aaa", timedelta(hours=1))
    pool.put("b", "bb", timedelta(hours=1))

    assert pool.delete("a") is True
    assert pool.delete("a") is False
    assert pool.total_bytes == 2

    pool.clear()
    assert len(pool) == 0
    assert pool.total_bytes == 0


@pytest.mark.parametrize("make_value", [lambda: object(), lambda: _circular()])
def test_unsizable_value_is_skipped_with_warning(
    fake_clock: FakeClock,
    make_value,
    caplog: pytest.LogCaptureFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(logging.getLogger("repolens"), "propagate", True)
    pool: CachePool[object] = CachePool("analyses", clock=fake_clock)
    pool.put("keep", "existing", timedelta(hours=1))
    before = pool.total_bytes

    with caplog.at_level(logging.WARNING):
        assert pool.put("bad", make_value(), timedelta(hours=1)) is False

    assert "bad" not in pool
    assert pool.get("keep") == "existing"
    assert pool.total_bytes == before
    assert "Skipping cache write" in caplog.text


def _circular() -> list:
    value: list = []
    value.append(value)
    return value


def test_ttl_beyond_date_range_is_skipped_with_warning(
    fake_clock: FakeClock,
    caplog: pytest.LogCaptureFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(logging.getLogger("repolens"), "propagate", True)
    pool: CachePool[str] = CachePool("descriptions", clock=fake_clock)
    pool.put("k", "old", timedelta(hours=1))
    before = pool.total_bytes

    with caplog.at_level(logging.WARNING):
        assert pool.put("k", "new", timedelta.max) is False

    assert pool.get("k") == "old"
    assert pool.total_bytes == before
    assert "Skipping cache write for descriptions/k" in caplog.text
