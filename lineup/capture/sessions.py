# una sesión de navegador por worker

from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Callable, Dict

from lineup.common.log import debug, error, info

IMPLICIT_WAIT_SEC = 60


@dataclass(frozen=True)
class WorkerContext:
    """Identidad explícita del worker; se crea una vez por hilo y viaja con cada job."""
    worker_id: str


class SessionPool:
    """
    Crea la sesión de cada worker la primera vez que la pide y la reutiliza
    para todos sus jobs. release_all() las cierra todas al final del run.
    """

    def __init__(self, factory: Callable[[], object]):
        self._factory = factory
        self._sessions: Dict[str, object] = {}
        self._lock = threading.Lock()

    def acquire(self, worker_id: str):
        with self._lock:
            session = self._sessions.get(worker_id)
        if session is not None:
            return session

        # cada worker_id solo lo usa su propio hilo: no hay carrera por la misma clave
        session = self._factory()
        # se registra antes de configurarla: release_all() la cierra aunque falle lo siguiente
        with self._lock:
            self._sessions[worker_id] = session
        session.set_implicit_wait(IMPLICIT_WAIT_SEC)
        debug("SESSION", f"Sesión creada para {worker_id}")
        return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def release_all(self) -> None:
        with self._lock:
            sessions = list(self._sessions.items())
            self._sessions.clear()
        for worker_id, session in sessions:
            try:
                session.quit()
            except Exception as e:
                # la sesión puede estar ya muerta; se siguen cerrando las demás
                error("SESSION", f"No se pudo cerrar la sesión de {worker_id}: {e!r}")
        if sessions:
            info("SESSION", f"{len(sessions)} sesión(es) cerrada(s)")
