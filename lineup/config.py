from __future__ import annotations
import os
from pathlib import Path
from dataclasses import dataclass
from dotenv import load_dotenv

def _getenv_bool(name: str, default: bool) -> bool:
    v = os.getenv(name, str(default)).strip().lower()
    return v in ("1", "true", "yes", "y", "on")

def _parse_replacements(s: str) -> dict[str, str]:
    """
    Convierte 'desde=hacia,desde2=hacia2' en dict.
    Entradas sin '=' se ignoran.
    """
    result: dict[str, str] = {}
    for part in (s or "").split(","):
        part = part.strip()
        if not part or "=" not in part:
            continue
        src, dst = part.split("=", 1)
        if src.strip():
            result[src.strip()] = dst.strip()
    return result

@dataclass(frozen=True)
class Settings:
    # lineup.json
    LINEUP_CONFIG: str
    LINEUP_WORKING_DIR: str

    # salida
    SCREENSHOT_DIR: str

    # navegador
    BROWSER: str
    HEADLESS: bool
    PAGE_LOAD_TIMEOUT_SEC: int

    # sustituciones de dominio (p.ej. www -> staging)
    URL_REPLACEMENTS: dict

    DEBUG: bool

def load_settings() -> Settings:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv()

    return Settings(
        LINEUP_CONFIG=os.getenv("LINEUP_CONFIG", "lineup.json").strip(),
        LINEUP_WORKING_DIR=os.getenv("LINEUP_WORKING_DIR", ".").strip(),
        SCREENSHOT_DIR=os.getenv("SCREENSHOT_DIR", "report/screenshots").strip(),
        BROWSER=os.getenv("BROWSER", "").strip().lower(),
        HEADLESS=_getenv_bool("HEADLESS", True),
        PAGE_LOAD_TIMEOUT_SEC=int(os.getenv("PAGE_LOAD_TIMEOUT_SEC", "120")),
        URL_REPLACEMENTS=_parse_replacements(os.getenv("URL_REPLACEMENTS", "")),
        DEBUG=_getenv_bool("LINEUP_DEBUG", False),
    )
