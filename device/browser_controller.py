"""Browser Controller - Low-level Playwright operations for the game client."""

import logging

import cv2
import numpy as np
from playwright.sync_api import sync_playwright

import config
from game_profile import ViewportGeometry

logger = logging.getLogger(__name__)

# Normalized labels of every element that can act as a control
_LABELS_JS = """() => Array.from(document.querySelectorAll('button, div'))
    .map(el => (el.textContent || '').trim().toUpperCase())"""

_CLICK_TEXT_JS = """(marker) => {
    for (const el of document.querySelectorAll('*')) {
        if (el.innerText && el.innerText.toUpperCase().includes(marker)) {
            el.click();
            return true;
        }
    }
    return false;
}"""

_INJECT_TOKEN_JS = """([token, prefix, defaultKey, expires]) => {
    const existing = Object.keys(localStorage).filter(k => k.includes(prefix));
    if (existing.length > 0) {
        const value = JSON.parse(localStorage.getItem(existing[0]));
        value.token = token;
        localStorage.setItem(existing[0], JSON.stringify(value));
        return existing[0];
    }
    localStorage.setItem(defaultKey, JSON.stringify({token: token, expires: expires}));
    return defaultKey;
}"""


class BrowserController:
    """Low-level browser operations: launch, read text, pointer, navigate.

    These primitives are the whole surface the battle automation depends on.
    ``page`` may be supplied directly (e.g. an already open Playwright page);
    otherwise :meth:`launch` creates one.
    """

    def __init__(self, geometry: ViewportGeometry | None = None,
                 page=None) -> None:
        self.geometry = geometry or ViewportGeometry()
        self.page = page
        self._playwright = None
        self._browser = None

    def launch(self, headless: bool = False,
               user_agent: str = config.USER_AGENT) -> None:
        """Start Chromium with a page sized to the geometry's viewport.

        Raises:
            ValueError: if the rendered viewport differs from the geometry.
        """
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=headless,
            args=[
                "--no-sandbox",
                "--disable-setuid-sandbox",
                "--disable-dev-shm-usage",
            ],
        )
        context = self._browser.new_context(
            viewport={"width": self.geometry.width, "height": self.geometry.height},
            user_agent=user_agent,
        )
        self.page = context.new_page()

        width, height = self.surface_size()
        if not self.geometry.matches_surface(width, height):
            self.close()
            raise ValueError(
                f"Viewport {width}x{height} does not match geometry "
                f"{self.geometry.width}x{self.geometry.height}"
            )
        logger.info(f"Browser launched ({width}x{height}, headless={headless})")

    def surface_size(self) -> tuple[int, int]:
        size = self.page.viewport_size or {}
        return size.get("width", 0), size.get("height", 0)

    def close(self) -> None:
        """Close the browser and stop Playwright. Safe to call twice."""
        if self._browser is not None:
            try:
                self._browser.close()
            except Exception as e:
                logger.warning(f"Browser close failed: {e}")
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    # -- Perception primitives ------------------------------------------------

    def body_text(self) -> str:
        """Full visible text of the current view."""
        return self.page.inner_text("body")

    def element_labels(self) -> list[str]:
        """Trimmed, upper-cased text of every button/div on the page."""
        return self.page.evaluate(_LABELS_JS)

    # -- Pointer primitives ---------------------------------------------------

    def mouse_move(self, x: int, y: int) -> None:
        self.page.mouse.move(x, y)

    def mouse_down(self) -> None:
        self.page.mouse.down()

    def mouse_up(self) -> None:
        self.page.mouse.up()

    def click(self, x: int, y: int) -> None:
        """Click at viewport coordinate (x, y)."""
        logger.debug(f"Click at ({x}, {y})")
        self.page.mouse.click(x, y)

    def click_text(self, marker: str) -> bool:
        """Click the first element whose text contains ``marker`` (upper case)."""
        return bool(self.page.evaluate(_CLICK_TEXT_JS, marker.upper()))

    # -- Navigation -----------------------------------------------------------

    def goto(self, url: str, wait_until: str = "networkidle",
             timeout: int = config.NAVIGATION_TIMEOUT_MS) -> None:
        logger.debug(f"Navigate to {url} (wait_until={wait_until})")
        self.page.goto(url, wait_until=wait_until, timeout=timeout)

    def reload(self, wait_until: str = "networkidle") -> None:
        self.page.reload(wait_until=wait_until)

    def inject_token(self, token: str, prefix: str, default_key: str,
                     expires: str) -> str:
        """Store the auth token in localStorage. Returns the key used."""
        return self.page.evaluate(
            _INJECT_TOKEN_JS, [token, prefix, default_key, expires]
        )

    # -- Debug capture --------------------------------------------------------

    def screenshot(self) -> np.ndarray:
        """Capture the page, return as BGR numpy array (OpenCV format)."""
        png_data = self.page.screenshot(type="png")
        if not png_data:
            raise RuntimeError("Screenshot returned empty data")

        img_array = np.frombuffer(png_data, dtype=np.uint8)
        image = cv2.imdecode(img_array, cv2.IMREAD_COLOR)
        if image is None:
            raise RuntimeError("Failed to decode screenshot image")

        return image
