"""Playwright page driver: traces and screenshots for one URL at a time.

Example usage:

    from tourist.config import TouristConfig, load_devices
    from tourist.driver import PageDriver
    from tourist.paths import OutputPaths

    config = TouristConfig(out="./out")
    devices = load_devices(config.viewports_file, desktop=True)
    async with PageDriver(config) as driver:
        url = "https://example.com"
        await driver.capture(url, OutputPaths.for_url(config.out, url), devices)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .config import Device, TouristConfig
from .paths import OutputPaths

LOGGER = logging.getLogger(__name__)

_VIEWPORT_OPTIONS = {
    "deviceScaleFactor": "device_scale_factor",
    "isMobile": "is_mobile",
    "hasTouch": "has_touch",
}
_DESCRIPTOR_OPTIONS = ("device_scale_factor", "is_mobile", "has_touch", "user_agent")


def build_context_options(
    device: Device,
    descriptors: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    """Translate a device into ``Browser.new_context`` keyword arguments."""
    if device.viewport:
        viewport = device.viewport
        options: Dict[str, Any] = {
            "viewport": {"width": int(viewport["width"]), "height": int(viewport["height"])}
        }
        for key, option in _VIEWPORT_OPTIONS.items():
            if key in viewport:
                options[option] = viewport[key]
        return options

    if device.alias and descriptors and device.alias in descriptors:
        descriptor = descriptors[device.alias]
        options = {"viewport": dict(descriptor["viewport"])}
        for option in _DESCRIPTOR_OPTIONS:
            if option in descriptor:
                options[option] = descriptor[option]
        return options

    raise ValueError(
        f"Device {device.short_name!r} has no viewport and no known alias"
    )


class PageDriver:
    """Owns a headless Chromium instance for a batch of URLs."""

    def __init__(self, config: TouristConfig) -> None:
        self.config = config
        self._playwright_cm: Any = None
        self._playwright: Any = None
        self._browser: Any = None

    async def __aenter__(self) -> "PageDriver":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.close()
        return False

    async def start(self) -> None:
        try:
            from playwright.async_api import async_playwright
        except ImportError as exc:
            raise RuntimeError(
                "Playwright is required for crawling. "
                "Install it with: pip install playwright && playwright install chromium"
            ) from exc

        self._playwright_cm = async_playwright()
        self._playwright = await self._playwright_cm.__aenter__()
        self._browser = await self._playwright.chromium.launch(
            headless=self.config.headless
        )
        LOGGER.debug("Launched Chromium (headless=%s)", self.config.headless)

    async def close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright_cm is not None:
                await self._playwright_cm.__aexit__(None, None, None)
            self._playwright_cm = None
            self._playwright = None

    async def capture(
        self,
        url: str,
        paths: OutputPaths,
        devices: List[Device],
    ) -> None:
        """Load ``url`` once per device and write its artifacts.

        The first device's load is traced and also produces the
        above-the-fold and full-page screenshots.
        """
        if self._browser is None:
            raise RuntimeError("PageDriver used before start()")

        paths.output_dir.mkdir(parents=True, exist_ok=True)
        descriptors = getattr(self._playwright, "devices", None)
        timeout_ms = self.config.navigation_timeout * 1000

        for index, device in enumerate(devices):
            trace = index == 0
            paths.device_dir(device.short_name).mkdir(parents=True, exist_ok=True)
            context = await self._browser.new_context(
                ignore_https_errors=True,
                **build_context_options(device, descriptors),
            )
            try:
                page = await context.new_page()
                page.set_default_navigation_timeout(timeout_ms)
                if trace:
                    await self._browser.start_tracing(
                        page=page, path=str(paths.trace_file)
                    )
                try:
                    LOGGER.debug("Loading %s as %s", url, device.short_name)
                    await page.goto(url, wait_until=self.config.wait_until)
                    await page.screenshot(
                        path=str(paths.device_screenshot(device.short_name))
                    )
                except Exception:
                    if trace:
                        await self._browser.stop_tracing()
                    raise

                if trace:
                    await self._browser.stop_tracing()
                    await page.screenshot(path=str(paths.aft_screenshot))
                    await page.screenshot(
                        path=str(paths.full_screenshot), full_page=True
                    )
            finally:
                await context.close()
