"""Headless-browser composition of card markup into single-page PDFs.

:class:`DocumentCompositor` owns one Playwright Chromium instance for the
whole run. Launching the browser is the expensive step, so it happens once
in ``__aenter__``; every card then gets its own short-lived browser context
(isolated viewport, storage and scripts) that is closed right after the PDF
is exported. ``__aexit__`` closes the browser on every exit path, including
an aborted run.

Error mapping
-------------
- Page load exceeding ``page_load_timeout_ms`` -> ``TimeoutExceededError``;
  the processor skips that card and continues.
- Any other Playwright failure (browser missing, crashed, closed) ->
  ``ExternalServiceError``; the processor aborts the run.

Only the page load is bounded by ``page_load_timeout_ms``; the PDF export
that follows runs without a timeout of its own.
"""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Any

from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from src.config import (
    CARD_HEIGHT_PX,
    CARD_WIDTH_PX,
    CHROMIUM_ARGS,
    PAGE_LOAD_TIMEOUT_MS,
    TMP_DIR,
)
from src.exceptions import ExternalServiceError, TimeoutExceededError

logger = logging.getLogger(__name__)


class DocumentCompositor:
    """Render HTML markup to fixed-size PDF documents with Chromium.

    Parameters
    ----------
    width, height : int
        Card size in CSS pixels; used for both the viewport and the page.
    tmp_dir : Path
        Directory for the transient HTML files loaded by the browser.
    page_load_timeout_ms : int
        Upper bound for reaching network idle on one card.
    launch_args : list[str] | None
        Extra Chromium command-line switches.

    Examples
    --------
    >>> async def demo():
    ...     async with DocumentCompositor() as compositor:
    ...         await compositor.compose("<h1>Hi</h1>", Path("out/card.pdf"))
    >>> # asyncio.run(demo())
    """

    def __init__(
        self,
        width: int = CARD_WIDTH_PX,
        height: int = CARD_HEIGHT_PX,
        tmp_dir: Path = TMP_DIR,
        page_load_timeout_ms: int = PAGE_LOAD_TIMEOUT_MS,
        launch_args: list[str] | None = None,
    ) -> None:
        self.width = int(width)
        self.height = int(height)
        self.tmp_dir = Path(tmp_dir)
        self.page_load_timeout_ms = int(page_load_timeout_ms)
        self.launch_args = list(CHROMIUM_ARGS if launch_args is None else launch_args)
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._counter = itertools.count(1)

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def __aenter__(self) -> DocumentCompositor:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        await self.close()
        return False

    async def start(self) -> None:
        """Launch the shared headless browser."""
        if self._browser is not None:
            return
        self.tmp_dir.mkdir(parents=True, exist_ok=True)
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=True, args=self.launch_args
            )
        except PlaywrightError as exc:
            await self.close()
            raise ExternalServiceError(
                f"Could not launch the rendering engine: {exc}"
            ) from exc
        logger.info("Rendering engine started (%dx%d)", self.width, self.height)

    async def close(self) -> None:
        """Release the browser and the Playwright driver. Safe to repeat."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as exc:
                logger.warning("Error while closing browser: %s", exc)
        if playwright is not None:
            try:
                await playwright.stop()
            except PlaywrightError as exc:
                logger.warning("Error while stopping Playwright: %s", exc)
            logger.info("Rendering engine stopped")

    def _write_markup(self, markup: str) -> Path:
        path = self.tmp_dir / f"card_{next(self._counter)}.html"
        path.write_text(markup, encoding="utf-8")
        return path

    async def compose(self, markup: str, output_path: Path) -> Path:
        """Render ``markup`` into a one-page PDF at ``output_path``.

        Returns
        -------
        Path
            ``output_path`` once the PDF is written.

        Raises
        ------
        TimeoutExceededError
            If the page does not reach network idle within the timeout.
        ExternalServiceError
            If the browser is not running or fails while rendering.
        """
        if self._browser is None:
            raise ExternalServiceError("Rendering engine is not running")
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        html_path = self._write_markup(markup)
        context = None
        try:
            context = await self._browser.new_context(
                viewport={"width": self.width, "height": self.height}
            )
            page = await context.new_page()
            await page.goto(
                html_path.resolve().as_uri(),
                wait_until="networkidle",
                timeout=self.page_load_timeout_ms,
            )
            await page.pdf(
                path=str(output_path),
                width=f"{self.width}px",
                height=f"{self.height}px",
                print_background=True,
                margin={"top": "0", "right": "0", "bottom": "0", "left": "0"},
                page_ranges="1",
            )
        except PlaywrightTimeoutError as exc:
            raise TimeoutExceededError(
                f"Card {output_path.name} did not load within "
                f"{self.page_load_timeout_ms} ms",
                context={"document": output_path.name},
            ) from exc
        except PlaywrightError as exc:
            raise ExternalServiceError(
                f"Rendering engine failed on {output_path.name}: {exc}",
                context={"document": output_path.name},
            ) from exc
        finally:
            if context is not None:
                try:
                    await context.close()
                except PlaywrightError as exc:
                    logger.debug("Browser context close failed: %s", exc)
            html_path.unlink(missing_ok=True)
        return output_path


__all__ = ["DocumentCompositor"]
