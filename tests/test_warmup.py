from conftest import FakeSession, url_config
from lineup.capture.jobs import BEFORE, Job
from lineup.capture.sessions import WorkerContext
from lineup.capture.warmup import CacheWarmupTracker


def _jobs(warmup, widths=(600, 1000), paths=("/",)):
    cfg = url_config(window_widths=list(widths), paths=list(paths), warmup_browser_cache_time=warmup)
    return [Job("http://a.com", p, w, BEFORE, cfg) for p in paths for w in widths]


def test_warmup_runs_once_per_worker_and_url():
    tracker = CacheWarmupTracker()
    session = FakeSession()
    ctx = WorkerContext("w1")
    jobs = _jobs(0.01, widths=(600, 800, 1000))
    results = [tracker.ensure_warm(ctx, session, "http://a.com/", job, 700) for job in jobs]
    assert results == [True, False, False]
    assert session.navigations == ["http://a.com/"]
    assert tracker.is_warm("w1", "http://a.com/")


def test_warmup_resizes_to_max_width_and_back():
    tracker = CacheWarmupTracker()
    session = FakeSession()
    job = _jobs(0.01)[0]
    tracker.ensure_warm(WorkerContext("w1"), session, "http://a.com/", job, 700)
    assert session.window_sizes == [(1000, 700), (600, 700)]


def test_other_worker_warms_independently():
    tracker = CacheWarmupTracker()
    job = _jobs(0.01)[0]
    s1, s2 = FakeSession(), FakeSession()
    assert tracker.ensure_warm(WorkerContext("w1"), s1, "http://a.com/", job, 700)
    assert tracker.ensure_warm(WorkerContext("w2"), s2, "http://a.com/", job, 700)
    assert not tracker.is_warm("w3", "http://a.com/")


def test_no_warmup_when_disabled():
    tracker = CacheWarmupTracker()
    session = FakeSession()
    assert not tracker.ensure_warm(WorkerContext("w1"), session, "http://a.com/", _jobs(0)[0], 700)
    assert session.navigations == []
    assert not tracker.is_warm("w1", "http://a.com/")
