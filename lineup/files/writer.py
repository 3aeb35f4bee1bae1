# escritura de tiles a disco (PNG, atómico)

from __future__ import annotations
import os
import re
from pathlib import Path

import cv2

from lineup.common.log import debug

_UNSAFE = re.compile(r"[^\w\-]")


def _ensure_dir(p: Path) -> Path:
    p.mkdir(parents=True, exist_ok=True)
    return p


def screenshot_file_name(url: str, path: str, width: int, offset: int, phase: str) -> str:
    """http://a.com + /foo -> http_a_com_foo_800_0_before.png"""
    base = _UNSAFE.sub("_", f"{url.rstrip('/')}{path or ''}").strip("_")
    base = re.sub(r"_+", "_", base) or "root"
    return f"{base}_{width}_{offset}_{phase}.png"


class ScreenshotWriter:

    def __init__(self, base_dir: Path):
        self.base_dir = _ensure_dir(Path(base_dir))

    def write_screenshot(self, frame, url: str, path: str, width: int, offset: int, phase: str) -> Path:
        """
        Guardado ATÓMICO: imencode → .tmp → os.replace()
        Devuelve la ruta final.
        """
        dst = self.base_dir / screenshot_file_name(url, path, width, offset, phase)
        tmp = dst.with_suffix(dst.suffix + ".tmp")

        ok, buf = cv2.imencode(".png", frame)
        if not ok:
            raise IOError(f"imencode falló para {dst.name}")
        try:
            with open(tmp, "wb") as f:
                f.write(buf.tobytes())
            os.replace(tmp, dst)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        debug("WRITE", f"{dst}")
        return dst
