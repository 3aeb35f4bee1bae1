from __future__ import annotations
import sys
from pathlib import Path

from lineup.browser.factory import session_factory
from lineup.capture.jobs import plan_jobs
from lineup.capture.orchestrator import Orchestrator
from lineup.capture.sessions import SessionPool
from lineup.common.log import error, set_debug
from lineup.files.writer import ScreenshotWriter


def capture_all(settings, config, phase: str, factory=None, writer=None) -> None:
    """
    Captura todas las urls del lineup.json para la fase indicada (before/after).
    Bloquea hasta terminar; propaga el primer error de cualquier job.
    """
    if not config.urls:
        error("RUN", "No hay urls configuradas en el lineup.json")
        sys.exit(1)

    if config.debug or settings.DEBUG:
        set_debug(True)

    jobs = plan_jobs(config, phase, settings.URL_REPLACEMENTS)
    print(f"▶ Capturando {len(jobs)} job(s) [{phase}] con {config.threads} hilo(s)")

    pool = SessionPool(factory or session_factory(settings, config))
    writer = writer or ScreenshotWriter(Path(settings.SCREENSHOT_DIR))
    with Orchestrator(config, writer, pool) as orchestrator:
        orchestrator.run(jobs)

    print(f"✅ Capturas [{phase}] en {writer.base_dir}")
