# creación de sesiones Selenium por tipo de navegador

from __future__ import annotations
from typing import Callable, Optional

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.edge.options import Options as EdgeOptions
from selenium.webdriver.edge.service import Service as EdgeService
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.firefox import GeckoDriverManager
from webdriver_manager.microsoft import EdgeChromiumDriverManager

from lineup.browser.session import BrowserSession, Capabilities
from lineup.common.log import info

BACKEND_CAPABILITIES = {
    "chrome": Capabilities(),
    "edge": Capabilities(),
    "firefox": Capabilities(resize_quirk=True),
}


def _chromium_args(opts, headless: bool, user_agent: Optional[str]):
    if headless:
        opts.add_argument("--headless=new")
        opts.add_argument("--disable-gpu")
    opts.add_argument("--no-sandbox")
    opts.add_argument("--hide-scrollbars")
    if user_agent:
        opts.add_argument(f"--user-agent={user_agent}")
    return opts


def create_driver(browser: str, headless: bool = True, user_agent: Optional[str] = None,
                  page_load_timeout: int = 120):
    browser = (browser or "chrome").lower()
    if browser == "edge":
        opts = _chromium_args(EdgeOptions(), headless, user_agent)
        driver = webdriver.Edge(service=EdgeService(EdgeChromiumDriverManager().install()), options=opts)
    elif browser == "firefox":
        opts = FirefoxOptions()
        if headless:
            opts.add_argument("-headless")
        if user_agent:
            opts.set_preference("general.useragent.override", user_agent)
        driver = webdriver.Firefox(service=FirefoxService(GeckoDriverManager().install()), options=opts)
    elif browser == "chrome":
        opts = _chromium_args(ChromeOptions(), headless, user_agent)
        driver = webdriver.Chrome(service=ChromeService(ChromeDriverManager().install()), options=opts)
    else:
        raise ValueError(f"browser no soportado: {browser!r}")

    if page_load_timeout and page_load_timeout > 0:
        driver.set_page_load_timeout(page_load_timeout)
    return driver


def session_factory(settings, config) -> Callable[[], BrowserSession]:
    """
    Devuelve un callable sin argumentos que abre una sesión nueva; lo usa
    SessionPool la primera vez que un worker pide la suya.
    """
    browser = settings.BROWSER or config.browser
    caps = BACKEND_CAPABILITIES.get(browser, Capabilities())

    def _open() -> BrowserSession:
        info("SESSION", f"Abriendo {browser} (headless={settings.HEADLESS})")
        driver = create_driver(browser, settings.HEADLESS, config.user_agent, settings.PAGE_LOAD_TIMEOUT_SEC)
        return BrowserSession(driver, caps, name=browser)

    return _open
