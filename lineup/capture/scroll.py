# bucle de scroll + captura por viewport

from __future__ import annotations
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from lineup.common.log import debug, warn
from lineup.vision.stability import decode_frame, wait_for_no_animation

JS_DOCUMENT_HEIGHT_CALL = (
    "return Math.max( document.body.scrollHeight, document.body.offsetHeight, "
    "document.documentElement.clientHeight, document.documentElement.scrollHeight, "
    "document.documentElement.offsetHeight );"
)
JS_CLIENT_VIEWPORT_HEIGHT_CALL = "return document.documentElement.clientHeight"
JS_SCROLL_CALL = "window.scrollBy(0,%d)"
JS_SCROLL_TO_TOP_CALL = "window.scrollTo(0, 0);"

SLEEP_AFTER_SCROLL_SEC = 0.05


@dataclass
class Tile:
    frame: Any
    url: str
    path: str
    width: int
    offset: int
    phase: str
    location: Optional[Path] = None


def page_height(session) -> int:
    return int(session.execute_script(JS_DOCUMENT_HEIGHT_CALL) or 0)


def viewport_height(session) -> int:
    return int(session.execute_script(JS_CLIENT_VIEWPORT_HEIGHT_CALL) or 0)


def scroll_to_top(session) -> None:
    session.execute_script(JS_SCROLL_TO_TOP_CALL)
    time.sleep(SLEEP_AFTER_SCROLL_SEC)


def scroll_by(session, pixels: int) -> None:
    session.execute_script(JS_SCROLL_CALL % pixels)
    time.sleep(SLEEP_AFTER_SCROLL_SEC)


def take_screenshot(session):
    return decode_frame(session.capture_screenshot())


def scroll_and_capture(session, job, height: int, viewport: int, writer) -> List[Tile]:
    """
    Un tile por cada offset 0, V, 2V... mientras offset < alto de página y
    offset <= max-scroll-height. El alto se vuelve a leer tras cada scroll
    (páginas con scroll infinito crecen).
    """
    cfg = job.url_config
    single = not session.caps.per_viewport_screenshot
    if single:
        warn("SCROLL", f"{session.name}: sin capturas por viewport, se toma una sola captura")
    elif viewport <= 0:
        warn("SCROLL", f"Alto de viewport {viewport} inválido en {job.url}{job.path}; una sola captura")
        single = True

    tiles: List[Tile] = []
    offset = 0
    while offset < height and offset <= cfg.max_scroll_height:
        frame = take_screenshot(session)
        if cfg.wait_for_no_animation_after_scroll > 0:
            frame = wait_for_no_animation(lambda: take_screenshot(session), frame,
                                          cfg.wait_for_no_animation_after_scroll)
        tile = Tile(frame, job.url, job.path, job.width, offset, job.phase)
        tile.location = writer.write_screenshot(frame, job.url, job.path, job.width, offset, job.phase)
        tiles.append(tile)

        if single:
            break

        debug("SCROLL", f"topOfViewport: {offset}, pageHeight: {height}")
        scroll_by(session, viewport)
        if cfg.wait_after_scroll > 0:
            debug("SCROLL", f"Esperando {cfg.wait_after_scroll}s (wait-after-scroll)")
            time.sleep(cfg.wait_after_scroll)

        height = page_height(session)
        debug("SCROLL", f"Alto de página: {height}")
        offset += viewport
    return tiles
