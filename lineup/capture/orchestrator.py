# reparto de jobs entre workers + protocolo de captura por job

from __future__ import annotations
import queue
import threading
import time
import traceback
from typing import List, Optional

from selenium.common.exceptions import WebDriverException

from lineup.browser.session import resize_window
from lineup.browser.urls import build_url
from lineup.capture.priming import prime_storage
from lineup.capture.scroll import (
    page_height, viewport_height, scroll_to_top, scroll_and_capture, Tile,
)
from lineup.capture.sessions import SessionPool, WorkerContext
from lineup.capture.warmup import CacheWarmupTracker
from lineup.common.log import debug, error, info, warn

# escalonado entre envíos: evita arrancar todos los navegadores a la vez
SUBMIT_STAGGER_SEC = 0.233
AWAIT_TERMINATION_SEC = 15 * 60
SLEEP_AFTER_SCRIPT_SEC = 0.05

JS_FONTS_LOADED_CALL = "return document.fonts.status === 'loaded';"

_STOP = object()


class Orchestrator:
    """
    Ejecuta los jobs en un pool fijo de hilos. Cada hilo tiene su WorkerContext
    y, a través de SessionPool, su propia sesión de navegador.
    Al primer fallo deja de enviar jobs; los ya encolados terminan.
    """

    def __init__(self, config, writer, pool: SessionPool,
                 warmup: Optional[CacheWarmupTracker] = None,
                 submit_delay: float = SUBMIT_STAGGER_SEC,
                 await_timeout: float = AWAIT_TERMINATION_SEC):
        self.config = config
        self.writer = writer
        self.pool = pool
        self.warmup = warmup or CacheWarmupTracker()
        self.submit_delay = submit_delay
        self.await_timeout = await_timeout
        self._banner_pending = True
        self._banner_lock = threading.Lock()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self) -> None:
        self.pool.release_all()

    # -------- pool --------

    def run(self, jobs) -> None:
        jobs = list(jobs)
        if not jobs:
            return

        work: "queue.Queue" = queue.Queue()
        stop = threading.Event()
        failures: List[BaseException] = []
        failures_lock = threading.Lock()

        def _worker(ctx: WorkerContext) -> None:
            while True:
                job = work.get()
                if job is _STOP:
                    return
                try:
                    self.take_screenshots_for_job(ctx, job)
                except Exception as e:
                    traceback.print_exc()
                    error("POOL", f"{ctx.worker_id}: fallo en {job.url}{job.path} @ {job.width}px: {e!r}")
                    with failures_lock:
                        failures.append(e)
                    stop.set()

        n_threads = max(1, int(self.config.threads))
        threads = [
            threading.Thread(target=_worker, args=(WorkerContext(f"BrowserThread-{i + 1}"),),
                             name=f"BrowserThread-{i + 1}", daemon=True)
            for i in range(n_threads)
        ]
        for t in threads:
            t.start()

        submitted = 0
        for job in jobs:
            if stop.is_set():
                warn("POOL", f"Fallo detectado: no se envían los {len(jobs) - submitted} job(s) restantes")
                break
            work.put(job)
            submitted += 1
            time.sleep(self.submit_delay)

        for _ in threads:
            work.put(_STOP)

        deadline = time.time() + self.await_timeout
        for t in threads:
            t.join(max(0.0, deadline - time.time()))
        alive = [t.name for t in threads if t.is_alive()]
        if alive:
            error("POOL", f"Tiempo de espera agotado; siguen activos: {', '.join(alive)}")

        with failures_lock:
            first = failures[0] if failures else None
        if first is not None:
            raise first
        if alive:
            raise TimeoutError(f"jobs sin terminar tras {self.await_timeout}s")

    # -------- protocolo por job --------

    def take_screenshots_for_job(self, ctx: WorkerContext, job) -> List[Tile]:
        cfg = job.url_config
        height = self.config.window_height
        session = self.pool.acquire(ctx.worker_id)

        self._print_banner_once(session)
        self._move_pointer_out_of_the_way(session)

        session.set_window_position(0, 0)
        resize_window(session, job.width, height)

        url = build_url(job.url, job.path, cfg.env_mapping)
        root_url = build_url(job.url, "/", cfg.env_mapping)

        if cfg.has_cookies_or_storage():
            # cookies/storage requieren un documento cargado del dominio
            info("JOB", f"Cargando {root_url} para fijar cookies, local y session storage")
            session.navigate(root_url)
            prime_storage(session, cfg)

        self.warmup.ensure_warm(ctx, session, url, job, height)

        info("JOB", f"{ctx.worker_id}: navegando a {url} con ventana {job.width}x{height}")
        session.navigate(url)

        page_h = page_height(session)
        viewport_h = viewport_height(session)

        if cfg.wait_after_page_load > 0:
            debug("JOB", f"Esperando {cfg.wait_after_page_load}s (wait-after-page-load)")
            time.sleep(cfg.wait_after_page_load)
        if self.config.global_wait_after_page_load > 0:
            debug("JOB", f"Esperando {self.config.global_wait_after_page_load}s (global wait-after-page-load)")
            time.sleep(self.config.global_wait_after_page_load)

        debug("JOB", f"Alto de página antes del scroll: {page_h}, viewport: {viewport_h}")
        scroll_to_top(session)

        if cfg.javascript:
            debug("JOB", f"Ejecutando JavaScript: {cfg.javascript}")
            session.execute_script(cfg.javascript)
            time.sleep(SLEEP_AFTER_SCRIPT_SEC)

        if cfg.wait_for_fonts_time > 0:
            self._wait_for_fonts(session, cfg.wait_for_fonts_time)

        return scroll_and_capture(session, job, page_h, viewport_h, self.writer)

    def _print_banner_once(self, session) -> None:
        with self._banner_lock:
            if not self._banner_pending:
                return
            self._banner_pending = False
        try:
            agent = session.user_agent()
        except WebDriverException as e:
            agent = f"? ({e.__class__.__name__})"
        print("\n" + "=" * 52 + f"\nUser agent: {agent}\n" + "=" * 52 + "\n")

    def _move_pointer_out_of_the_way(self, session) -> None:
        # best-effort: aparta el puntero de los enlaces; no se garantiza ausencia de :hover
        if not session.caps.pointer_control:
            warn("JOB", f"{session.name}: sin control de puntero; no se aparta el ratón")
            return
        try:
            session.move_pointer_to_origin()
        except WebDriverException as e:
            warn("JOB", f"No se pudo mover el puntero a 0,0: {e!r}")

    def _wait_for_fonts(self, session, timeout: float) -> None:
        if not session.caps.conditional_wait:
            warn("FONTS", f"'wait-for-fonts-time' ignorado: {session.name} no soporta esperas condicionales")
            return
        loaded = session.wait_until(lambda s: bool(s.execute_script(JS_FONTS_LOADED_CALL)), timeout)
        if loaded:
            debug("FONTS", "Fuentes cargadas")
        else:
            warn("FONTS", f"Las fuentes no terminaron de cargar en {timeout}s; se captura igualmente")
