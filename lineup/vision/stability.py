from __future__ import annotations
import time
from typing import Callable

import cv2
import numpy as np

STABLE_FRAME_COUNT = 10

def decode_frame(data: bytes) -> np.ndarray:
    """PNG/JPEG en bytes -> ndarray BGR. ValueError si no se puede decodificar."""
    if not data:
        raise ValueError("captura vacía")
    arr = np.frombuffer(data, dtype=np.uint8)
    frame = cv2.imdecode(arr, cv2.IMREAD_COLOR)
    if frame is None:
        raise ValueError("imdecode devolvió None")
    return frame

def frames_equal_quick(a: np.ndarray, b: np.ndarray) -> bool:
    """Comparación barata: mismas dimensiones y mismo buffer, sin diff perceptual."""
    if a is None or b is None:
        return False
    if a.shape != b.shape:
        return False
    return a.tobytes() == b.tobytes()

def wait_for_no_animation(grab_frame: Callable[[], np.ndarray], frame: np.ndarray,
                          max_duration: float) -> np.ndarray:
    """
    Captura frames hasta acumular STABLE_FRAME_COUNT comparaciones iguales con
    el frame anterior o hasta que pase max_duration (segundos).
    El contador es acumulado: un frame distinto no lo reinicia.
    Devuelve el último frame capturado.
    """
    if max_duration <= 0:
        return frame
    begin = time.time()
    same_counter = 0
    current = frame
    while same_counter < STABLE_FRAME_COUNT and (time.time() - begin) <= max_duration:
        new_frame = grab_frame()
        if frames_equal_quick(new_frame, current):
            same_counter += 1
        current = new_frame
    return current
