# cookies + localStorage/sessionStorage antes de la captura

from __future__ import annotations
from typing import Iterable, Mapping

from lineup.common.log import debug, warn

JS_SET_LOCAL_STORAGE_CALL = "localStorage.setItem('%s','%s')"
JS_SET_SESSION_STORAGE_CALL = "sessionStorage.setItem('%s','%s')"

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_cookie_expiry(dt) -> str:
    """'DD Mon YYYY HH:MM:SS GMT' (independiente del locale)."""
    return f"{dt.day:02d} {_MONTHS[dt.month - 1]} {dt.year:04d} {dt:%H:%M:%S} GMT"


def cookie_to_dict(cookie) -> dict:
    data = {"name": cookie.name, "value": cookie.value, "secure": bool(cookie.secure)}
    if cookie.domain is not None:
        data["domain"] = cookie.domain
    if cookie.path is not None:
        data["path"] = cookie.path
    if cookie.expiry is not None:
        data["expiry"] = int(cookie.expiry.timestamp())
    return data


def cookie_script(cookie) -> str:
    js = f"document.cookie = '{cookie.name}={cookie.value};"
    if cookie.path is not None:
        js += f"path={cookie.path};"
    if cookie.domain is not None:
        js += f"domain={cookie.domain};"
    if cookie.secure:
        js += "secure;"
    if cookie.expiry is not None:
        js += f"expires={format_cookie_expiry(cookie.expiry)};"
    return js + "'"


def set_cookies(session, cookies: Iterable) -> None:
    cookies = list(cookies or [])
    if not cookies:
        return
    if session.caps.native_cookies:
        debug("STORAGE", f"Añadiendo {len(cookies)} cookie(s)")
        for cookie in cookies:
            session.add_cookie(cookie_to_dict(cookie))
        return

    warn("STORAGE", "El navegador no admite cookies nativas; se usan vía document.cookie")
    for cookie in cookies:
        session.execute_script(cookie_script(cookie))


def _set_storage(session, template: str, entries: Mapping[str, str]) -> None:
    for key, value in (entries or {}).items():
        # sin más escapado: claves/valores con caracteres de JS rompen el script
        js = template % (key, str(value).replace("'", '"'))
        session.execute_script(js)
        debug("STORAGE", f"Storage call: {js}")


def set_local_storage(session, entries: Mapping[str, str]) -> None:
    _set_storage(session, JS_SET_LOCAL_STORAGE_CALL, entries)


def set_session_storage(session, entries: Mapping[str, str]) -> None:
    _set_storage(session, JS_SET_SESSION_STORAGE_CALL, entries)


def prime_storage(session, url_config) -> None:
    set_cookies(session, url_config.cookies)
    set_local_storage(session, url_config.local_storage)
    set_session_storage(session, url_config.session_storage)
