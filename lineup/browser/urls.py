# construir URLs de captura (entornos, paths, sustituciones)

from __future__ import annotations
from typing import Mapping, Optional

def apply_env_mapping(url: str, env_mapping: Optional[Mapping[str, str]]) -> str:
    """
    Cambia el subdominio de entorno: {"live": "www"} convierte
    https://live.example.com en https://www.example.com.
    Solo sustituye segmentos completos (livex.example.com no cambia).
    """
    for src, dst in (env_mapping or {}).items():
        url = url.replace(f"https://{src}.", f"https://{dst}.")
        url = url.replace(f"http://{src}.", f"http://{dst}.")
        url = url.replace(f".{src}.", f".{dst}.")
    return url

def join_url(url: str, path: Optional[str]) -> str:
    if path is None:
        path = "/"
    if path.startswith("/"):
        path = path[1:]
    if not url.endswith("/"):
        url = url + "/"
    return url + path

def build_url(url: str, path: Optional[str], env_mapping: Optional[Mapping[str, str]] = None) -> str:
    return join_url(apply_env_mapping(url, env_mapping), path)

def prepare_domain(url: str, replacements: Optional[Mapping[str, str]]) -> str:
    """Sustituciones literales sobre la url base (p.ej. apuntar 'before' a staging)."""
    for src, dst in (replacements or {}).items():
        url = url.replace(src, dst)
    return url
