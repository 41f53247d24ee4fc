import time
import pytest

from tryon import main


@pytest.fixture
def buckets(monkeypatch):
    fresh = {}
    monkeypatch.setattr(main, "_buckets", fresh)
    monkeypatch.setattr(main, "_last_sweep", 0.0)
    return fresh


def test_burst_exhausted_raises(buckets):
    for _ in range(3):
        main._rate_limit("10.0.0.1", requests_per_min=60, burst=3)
    with pytest.raises(main.RateLimited):
        main._rate_limit("10.0.0.1", requests_per_min=60, burst=3)


def test_refilled_buckets_are_swept(buckets):
    now = time.time()
    # idle for an hour: fully refilled
    buckets["10.0.0.1"] = (0.0, now - 3600)
    # just drained: still limited
    buckets["10.0.0.2"] = (0.0, now)

    main._rate_limit("10.0.0.3", requests_per_min=60, burst=30)

    assert "10.0.0.1" not in buckets
    assert "10.0.0.2" in buckets
    assert "10.0.0.3" in buckets


def test_sweep_runs_at_most_once_per_interval(buckets, monkeypatch):
    now = time.time()
    monkeypatch.setattr(main, "_last_sweep", now)
    buckets["10.0.0.1"] = (0.0, now - 3600)

    main._rate_limit("10.0.0.3", requests_per_min=60, burst=30)

    assert "10.0.0.1" in buckets
