# expansión del lineup.json en trabajos de captura

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Mapping, Optional

from lineup.browser.urls import prepare_domain
from lineup.lineup_config import LineupConfig, UrlConfig

BEFORE = "before"
AFTER = "after"
PHASES = (BEFORE, AFTER)


@dataclass(frozen=True)
class Job:
    """Una captura: (url, path, ancho, fase) + su UrlConfig."""
    url: str
    path: str
    width: int
    phase: str
    url_config: UrlConfig


def plan_jobs(config: LineupConfig, phase: str,
              url_replacements: Optional[Mapping[str, str]] = None) -> List[Job]:
    """
    Producto paths x anchos de cada url, en el orden del fichero.
    Sin filtrar ni deduplicar.
    """
    if phase not in PHASES:
        raise ValueError(f"fase inválida: {phase!r}")
    jobs: List[Job] = []
    for url, url_config in (config.urls or {}).items():
        base = prepare_domain(url, url_replacements)
        for path in url_config.paths:
            for width in url_config.window_widths:
                jobs.append(Job(url=base, path=path, width=width, phase=phase, url_config=url_config))
    return jobs
