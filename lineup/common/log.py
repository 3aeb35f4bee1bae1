# trazas por consola con prefijo [TAG]

from __future__ import annotations
import os
import sys

_debug_enabled = os.getenv("LINEUP_DEBUG", "false").strip().lower() in ("1", "true", "yes", "y", "on")


def set_debug(enabled: bool) -> None:
    global _debug_enabled
    _debug_enabled = bool(enabled)


def info(tag: str, msg: str) -> None:
    print(f"[{tag}] {msg}")


def warn(tag: str, msg: str) -> None:
    print(f"[{tag}][WARN] {msg}", file=sys.stderr)


def error(tag: str, msg: str) -> None:
    print(f"[{tag}][ERR] {msg}", file=sys.stderr)


def debug(tag: str, msg: str) -> None:
    """Solo se imprime con LINEUP_DEBUG=true o 'debug': true en el lineup.json."""
    if _debug_enabled:
        print(f"[{tag}][DEBUG] {msg}")
