import threading
import time
from pathlib import Path

import cv2
import numpy as np
import pytest

from lineup.browser.session import Capabilities
from lineup.capture.orchestrator import JS_FONTS_LOADED_CALL
from lineup.capture.scroll import JS_CLIENT_VIEWPORT_HEIGHT_CALL, JS_DOCUMENT_HEIGHT_CALL
from lineup.config import Settings
from lineup.lineup_config import LineupConfig, UrlConfig


def frame(value, shape=(4, 6, 3)):
    return np.full(shape, value, dtype=np.uint8)


def png(value, shape=(4, 6, 3)):
    ok, buf = cv2.imencode(".png", frame(value, shape))
    assert ok
    return buf.tobytes()


class FakeSession:
    """Sesión guionizada: registra llamadas y devuelve altos/capturas fijos."""

    def __init__(self, page_heights=(2000,), viewport=800, caps=None, fail_on=None,
                 fonts_loaded=True, shots=None, name="fake", navigate_delay=0.0):
        self.caps = caps or Capabilities()
        self.name = name
        self.page_heights = list(page_heights)
        self.viewport = viewport
        self.fail_on = fail_on
        self.fonts_loaded = fonts_loaded
        self.shots = list(shots) if shots else None
        self.navigations = []
        self.navigated_at = []
        self.used_by = set()
        self.navigate_delay = navigate_delay
        self.scripts = []
        self.cookies = []
        self.window_sizes = []
        self.window_positions = []
        self.pointer_moves = 0
        self.screenshots_taken = 0
        self.implicit_wait = None
        self.quit_calls = 0

    def navigate(self, url):
        self.navigations.append(url)
        self.navigated_at.append(time.time())
        self.used_by.add(threading.current_thread().name)
        if self.navigate_delay:
            time.sleep(self.navigate_delay)
        if self.fail_on and self.fail_on in url:
            raise RuntimeError(f"boom {url}")

    def execute_script(self, src):
        self.scripts.append(src)
        if src == JS_DOCUMENT_HEIGHT_CALL:
            if len(self.page_heights) > 1:
                return self.page_heights.pop(0)
            return self.page_heights[0]
        if src == JS_CLIENT_VIEWPORT_HEIGHT_CALL:
            return self.viewport
        if src == JS_FONTS_LOADED_CALL:
            return self.fonts_loaded
        return None

    def capture_screenshot(self):
        self.screenshots_taken += 1
        if self.shots:
            return self.shots.pop(0) if len(self.shots) > 1 else self.shots[0]
        return png(self.screenshots_taken % 255)

    def set_window_size(self, width, height):
        self.window_sizes.append((width, height))

    def set_window_position(self, x, y):
        self.window_positions.append((x, y))

    def add_cookie(self, cookie):
        self.cookies.append(cookie)

    def set_implicit_wait(self, seconds):
        self.implicit_wait = seconds

    def move_pointer_to_origin(self):
        self.pointer_moves += 1

    def wait_until(self, condition, timeout_sec):
        end = time.time() + timeout_sec
        while time.time() <= end:
            if condition(self):
                return True
            time.sleep(0.01)
        return False

    def user_agent(self):
        return "FakeAgent/1.0"

    def quit(self):
        self.quit_calls += 1


class FakeWriter:

    def __init__(self):
        self.base_dir = Path("memory")
        self.calls = []
        self._lock = threading.Lock()

    def write_screenshot(self, frame, url, path, width, offset, phase):
        with self._lock:
            self.calls.append((url, path, width, offset, phase))
        return Path(f"{url}|{path}|{width}|{offset}|{phase}")


class FakeFactory:

    def __init__(self, **session_kwargs):
        self.session_kwargs = session_kwargs
        self.sessions = []

    def __call__(self):
        session = FakeSession(**self.session_kwargs)
        self.sessions.append(session)
        return session


def url_config(**kwargs):
    return UrlConfig(**kwargs)


def lineup_config(urls, **kwargs):
    return LineupConfig(urls=urls, **kwargs)


@pytest.fixture
def writer():
    return FakeWriter()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        LINEUP_CONFIG="lineup.json",
        LINEUP_WORKING_DIR=str(tmp_path),
        SCREENSHOT_DIR=str(tmp_path / "screenshots"),
        BROWSER="",
        HEADLESS=True,
        PAGE_LOAD_TIMEOUT_SEC=30,
        URL_REPLACEMENTS={},
        DEBUG=False,
    )
