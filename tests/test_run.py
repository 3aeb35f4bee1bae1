import pytest

from conftest import FakeFactory, lineup_config, url_config
from lineup.capture.jobs import AFTER
from lineup.run import capture_all


def test_no_urls_exits_with_status_one(settings, capsys):
    factory = FakeFactory()
    with pytest.raises(SystemExit) as exc:
        capture_all(settings, lineup_config(None), AFTER, factory=factory)
    assert exc.value.code == 1
    assert factory.sessions == []
    assert "No hay urls configuradas" in capsys.readouterr().err


def test_capture_all_writes_tiles_to_disk(settings, tmp_path):
    cfg = lineup_config({"http://a.com": url_config(window_widths=[600, 1000])})
    factory = FakeFactory(page_heights=(1000,), viewport=800)
    capture_all(settings, cfg, AFTER, factory=factory)
    written = sorted(p.name for p in (tmp_path / "screenshots").glob("*.png"))
    assert written == [
        "http_a_com_1000_0_after.png", "http_a_com_1000_800_after.png",
        "http_a_com_600_0_after.png", "http_a_com_600_800_after.png",
    ]
    assert factory.sessions[0].quit_calls == 1


def test_capture_all_propagates_job_error(settings):
    cfg = lineup_config({"http://a.com": url_config()})
    factory = FakeFactory(page_heights=(500,), fail_on="a.com")
    with pytest.raises(RuntimeError):
        capture_all(settings, cfg, AFTER, factory=factory)
    assert factory.sessions[0].quit_calls == 1
