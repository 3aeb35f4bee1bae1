# sesión de navegador (Selenium) + capacidades por backend

from __future__ import annotations
import random
import time
from dataclasses import dataclass
from typing import Callable

from selenium.common.exceptions import TimeoutException
from selenium.webdriver.common.actions.action_builder import ActionBuilder
from selenium.webdriver.support.ui import WebDriverWait

from lineup.common.log import debug

RESIZE_JITTER_PX = 10
RESIZE_SETTLE_SEC = 0.025


@dataclass(frozen=True)
class Capabilities:
    """
    Lo que cada backend sabe hacer. El código de captura decide por
    capacidad, nunca por el nombre del navegador.
    """
    per_viewport_screenshot: bool = True
    native_cookies: bool = True
    conditional_wait: bool = True
    pointer_control: bool = True
    # ignora set_window_size si el tamaño no cambia (Firefox)
    resize_quirk: bool = False


class BrowserSession:
    """Envuelve un WebDriver de Selenium con la interfaz mínima que usa la captura."""

    def __init__(self, driver, caps: Capabilities, name: str = "browser") -> None:
        self._driver = driver
        self.caps = caps
        self.name = name

    def navigate(self, url: str) -> None:
        # get() bloquea hasta el evento load
        self._driver.get(url)

    def execute_script(self, src: str):
        return self._driver.execute_script(src)

    def capture_screenshot(self) -> bytes:
        return self._driver.get_screenshot_as_png()

    def set_window_size(self, width: int, height: int) -> None:
        self._driver.set_window_size(width, height)

    def set_window_position(self, x: int, y: int) -> None:
        self._driver.set_window_position(x, y)

    def add_cookie(self, cookie: dict) -> None:
        self._driver.add_cookie(cookie)

    def set_implicit_wait(self, seconds: float) -> None:
        self._driver.implicitly_wait(seconds)

    def move_pointer_to_origin(self) -> None:
        """
        Aparca el puntero WebDriver en la esquina (0,0) del viewport. Es lo más
        neutro disponible, pero si hay un elemento ahí puede quedar en :hover.
        """
        action = ActionBuilder(self._driver)
        action.pointer_action.move_to_location(0, 0)
        action.perform()

    def wait_until(self, condition: Callable[["BrowserSession"], bool], timeout_sec: float) -> bool:
        """Sondea condition hasta que sea cierta; False si vence el tiempo."""
        try:
            WebDriverWait(self._driver, timeout_sec).until(lambda _d: condition(self))
            return True
        except TimeoutException:
            return False

    def user_agent(self) -> str:
        return str(self._driver.execute_script("return navigator.userAgent;") or "")

    def quit(self) -> None:
        self._driver.quit()


def resize_window(session, width: int, height: int) -> None:
    """
    Redimensiona la ventana. En backends con resize_quirk primero se pasa por
    un tamaño aleatorio cercano para que el tamaño final siempre sea un cambio.
    """
    debug("SESSION", f"Resize a {width}x{height}")
    if session.caps.resize_quirk:
        session.set_window_size(
            width + random.randrange(-RESIZE_JITTER_PX, RESIZE_JITTER_PX),
            height + random.randrange(-RESIZE_JITTER_PX, RESIZE_JITTER_PX),
        )
        time.sleep(RESIZE_SETTLE_SEC)
    session.set_window_size(width, height)
