# calentamiento de caché: una vez por (worker, url) y run

from __future__ import annotations
import threading
import time
from typing import Dict, Set

from lineup.browser.session import resize_window
from lineup.common.log import debug, info


class CacheWarmupTracker:

    def __init__(self):
        self._marks: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def _marks_for(self, worker_id: str) -> Set[str]:
        with self._lock:
            return self._marks.setdefault(worker_id, set())

    def is_warm(self, worker_id: str, url: str) -> bool:
        return url in self._marks_for(worker_id)

    def ensure_warm(self, ctx, session, url: str, job, window_height: int) -> bool:
        """
        Carga url al ancho máximo configurado y espera warmup-browser-cache-time.
        Devuelve True si se hizo el calentamiento en esta llamada.
        """
        warmup_time = job.url_config.warmup_browser_cache_time
        if warmup_time <= 0:
            return False
        marks = self._marks_for(ctx.worker_id)
        if url in marks:
            return False

        max_width = max(job.url_config.window_widths)
        info("WARMUP", f"Navegando a {url} con ventana {max_width}x{window_height} para calentar caché")
        resize_window(session, max_width, window_height)
        session.navigate(url)
        marks.add(url)
        debug("WARMUP", f"Primera carga de {url}: esperando {warmup_time}s")
        time.sleep(warmup_time)
        resize_window(session, job.width, window_height)
        debug("WARMUP", f"Calentamiento de {url} terminado")
        return True
