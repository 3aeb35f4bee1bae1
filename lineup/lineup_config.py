# lectura del lineup.json (urls, anchos, cookies, esperas...)

from __future__ import annotations
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

LINEUP_CONFIG_DEFAULT_PATH = "./lineup.json"

DEFAULT_BROWSER = "chrome"
DEFAULT_WINDOW_HEIGHT = 800
DEFAULT_WINDOW_WIDTHS = (800,)
DEFAULT_PATHS = ("/",)
DEFAULT_MAX_SCROLL_HEIGHT = 100000
DEFAULT_THREADS = 1
SUPPORTED_BROWSERS = ("chrome", "edge", "firefox")


@dataclass(frozen=True)
class Cookie:
    name: str
    value: str
    domain: Optional[str] = None
    path: Optional[str] = None
    expiry: Optional[datetime] = None
    secure: bool = False


@dataclass(frozen=True)
class UrlConfig:
    paths: List[str] = field(default_factory=lambda: list(DEFAULT_PATHS))
    window_widths: List[int] = field(default_factory=lambda: list(DEFAULT_WINDOW_WIDTHS))
    max_diff: float = 0.0
    cookies: List[Cookie] = field(default_factory=list)
    env_mapping: Dict[str, str] = field(default_factory=dict)
    local_storage: Dict[str, str] = field(default_factory=dict)
    session_storage: Dict[str, str] = field(default_factory=dict)
    max_scroll_height: int = DEFAULT_MAX_SCROLL_HEIGHT
    wait_after_page_load: float = 0
    wait_after_scroll: float = 0
    wait_for_no_animation_after_scroll: float = 0
    warmup_browser_cache_time: float = 0
    javascript: Optional[str] = None
    wait_for_fonts_time: float = 0

    def has_cookies_or_storage(self) -> bool:
        return bool(self.cookies or self.local_storage or self.session_storage)


@dataclass(frozen=True)
class LineupConfig:
    urls: Optional[Dict[str, UrlConfig]]
    browser: str = DEFAULT_BROWSER
    user_agent: Optional[str] = None
    global_wait_after_page_load: float = 0.0
    window_height: int = DEFAULT_WINDOW_HEIGHT
    threads: int = DEFAULT_THREADS
    debug: bool = False


def _parse_expiry(raw) -> Optional[datetime]:
    """Acepta epoch en segundos o ISO-8601; siempre devuelve UTC."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"expiry inválido: {raw!r}")
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    if isinstance(raw, str):
        try:
            dt = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"expiry inválido: {raw!r}") from e
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    raise ValueError(f"expiry inválido: {raw!r}")


def _parse_cookie(raw: dict) -> Cookie:
    if not isinstance(raw, dict) or "name" not in raw or "value" not in raw:
        raise ValueError(f"cookie sin name/value: {raw!r}")
    return Cookie(
        name=str(raw["name"]),
        value=str(raw["value"]),
        domain=raw.get("domain"),
        path=raw.get("path"),
        expiry=_parse_expiry(raw.get("expiry")),
        secure=bool(raw.get("secure", False)),
    )


def _str_map(raw, key: str) -> Dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"'{key}' debe ser un objeto JSON")
    return {str(k): str(v) for k, v in raw.items()}


def parse_url_config(raw: dict) -> UrlConfig:
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ValueError(f"configuración de url inválida: {raw!r}")

    widths = raw.get("window-widths", list(DEFAULT_WINDOW_WIDTHS))
    paths = raw.get("paths", list(DEFAULT_PATHS))
    if not isinstance(widths, list) or not widths:
        raise ValueError("'window-widths' debe ser una lista no vacía")
    if not isinstance(paths, list) or not paths:
        raise ValueError("'paths' debe ser una lista no vacía")

    return UrlConfig(
        paths=[str(p) for p in paths],
        window_widths=[int(w) for w in widths],
        max_diff=float(raw.get("max-diff", 0)),
        cookies=[_parse_cookie(c) for c in (raw.get("cookies") or [])],
        env_mapping=_str_map(raw.get("env-mapping"), "env-mapping"),
        local_storage=_str_map(raw.get("local-storage"), "local-storage"),
        session_storage=_str_map(raw.get("session-storage"), "session-storage"),
        max_scroll_height=int(raw.get("max-scroll-height", DEFAULT_MAX_SCROLL_HEIGHT)),
        wait_after_page_load=float(raw.get("wait-after-page-load", 0)),
        wait_after_scroll=float(raw.get("wait-after-scroll", 0)),
        wait_for_no_animation_after_scroll=float(raw.get("wait-for-no-animation-after-scroll", 0)),
        warmup_browser_cache_time=float(raw.get("warmup-browser-cache-time", 0)),
        javascript=raw.get("javascript"),
        wait_for_fonts_time=float(raw.get("wait-for-fonts-time", 0)),
    )


def parse_config(data: dict) -> LineupConfig:
    if not isinstance(data, dict):
        raise ValueError("el lineup.json debe contener un objeto JSON")

    urls = None
    if data.get("urls") is not None:
        if not isinstance(data["urls"], dict):
            raise ValueError("'urls' debe ser un objeto JSON (url -> config)")
        urls = {str(u): parse_url_config(c) for u, c in data["urls"].items()}

    browser = str(data.get("browser", DEFAULT_BROWSER)).strip().lower()
    if browser not in SUPPORTED_BROWSERS:
        raise ValueError(f"browser no soportado: {browser!r} (opciones: {', '.join(SUPPORTED_BROWSERS)})")

    global_wait = data.get("wait-after-page-load", data.get("async-wait", 0))

    return LineupConfig(
        urls=urls,
        browser=browser,
        user_agent=data.get("user-agent") or None,
        global_wait_after_page_load=float(global_wait or 0),
        window_height=int(data.get("window-height", DEFAULT_WINDOW_HEIGHT)),
        threads=max(1, int(data.get("threads", DEFAULT_THREADS))),
        debug=bool(data.get("debug", False)),
    )


def read_config(working_dir: str, file_name: str) -> LineupConfig:
    """
    Busca el fichero en working_dir/file_name, luego file_name y por último
    ./lineup.json. Lanza FileNotFoundError con las rutas probadas.
    """
    candidates = [Path(working_dir) / file_name, Path(file_name), Path(LINEUP_CONFIG_DEFAULT_PATH)]
    for path in candidates:
        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                raise ValueError(f"{path}: JSON inválido ({e})") from e
            return parse_config(data)
    searched = ", ".join(str(p) for p in candidates)
    raise FileNotFoundError(f"No se encontró el fichero de configuración. Rutas probadas: [{searched}]")
