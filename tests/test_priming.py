from datetime import datetime, timezone

from conftest import FakeSession, url_config
from lineup.browser.session import Capabilities
from lineup.capture.priming import (
    cookie_script, format_cookie_expiry, prime_storage, set_cookies, set_local_storage,
    set_session_storage,
)
from lineup.lineup_config import Cookie

EXPIRY = datetime(2017, 3, 5, 7, 8, 9, tzinfo=timezone.utc)


def test_native_cookies_are_added_as_dicts():
    session = FakeSession()
    set_cookies(session, [
        Cookie("a", "1"),
        Cookie("b", "2", domain=".a.com", path="/x", expiry=EXPIRY, secure=True),
    ])
    assert session.cookies == [
        {"name": "a", "value": "1", "secure": False},
        {"name": "b", "value": "2", "secure": True, "domain": ".a.com", "path": "/x",
         "expiry": int(EXPIRY.timestamp())},
    ]
    assert session.scripts == []


def test_cookie_fallback_uses_document_cookie():
    session = FakeSession(caps=Capabilities(native_cookies=False))
    set_cookies(session, [Cookie("b", "2", domain=".a.com", path="/x", expiry=EXPIRY, secure=True)])
    assert session.cookies == []
    assert session.scripts == [
        "document.cookie = 'b=2;path=/x;domain=.a.com;secure;expires=05 Mar 2017 07:08:09 GMT;'"
    ]


def test_cookie_script_minimal():
    assert cookie_script(Cookie("n", "v")) == "document.cookie = 'n=v;'"


def test_format_cookie_expiry():
    assert format_cookie_expiry(datetime(2030, 12, 31, 23, 59, 0, tzinfo=timezone.utc)) == "31 Dec 2030 23:59:00 GMT"


def test_storage_single_quotes_become_double_quotes():
    session = FakeSession()
    set_local_storage(session, {"key": "it's"})
    set_session_storage(session, {"s": "{'a':1}"})
    assert session.scripts == [
        "localStorage.setItem('key','it\"s')",
        "sessionStorage.setItem('s','{\"a\":1}')",
    ]


def test_prime_storage_runs_everything():
    session = FakeSession()
    cfg = url_config(cookies=[Cookie("c", "v")], local_storage={"l": "1"}, session_storage={"s": "2"})
    prime_storage(session, cfg)
    assert len(session.cookies) == 1
    assert session.scripts == ["localStorage.setItem('l','1')", "sessionStorage.setItem('s','2')"]
