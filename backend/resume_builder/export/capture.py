"""
Offscreen capture driver.

Clones the target element, parks the clone off-screen at the original's exact
size, injects a global color override, and rasterizes the clone with
html2canvas inside the page. The clone and the override are a CloneSandbox:
an async context manager that removes both on every exit path.
"""

import asyncio
import uuid

from playwright.async_api import Error as PlaywrightError

from resume_builder.config import get_settings
from resume_builder.export import scripts
from resume_builder.export.errors import InvalidInput, RenderFailure

# Fallback in case the normalizer/sanitizer missed a property
OVERRIDE_CSS = """
* {
  color: #000 !important;
  background-color: #fff !important;
  border-color: #000 !important;
  box-shadow: none !important;
  background-image: none !important;
}
"""


class CloneSandbox:
    """
    Single-owner handle on an off-screen clone and its override <style> node.

    Both nodes are tagged with a per-instance token, so overlapping sandboxes
    on the same page never remove each other's nodes.
    """

    def __init__(self, page, element, css: str = OVERRIDE_CSS):
        self.page = page
        self.element = element
        self.css = css
        self.token = uuid.uuid4().hex
        self.clone = None
        self._open = False

    async def __aenter__(self):
        try:
            handle = await self.element.evaluate_handle(
                scripts.OPEN_CLONE_SANDBOX,
                {"token": self.token, "css": self.css},
            )
        except Exception:
            await self._remove_nodes(suppress=True)
            raise
        self._open = True
        self.clone = handle.as_element()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close(suppress=exc_type is not None)
        return False

    async def close(self, suppress: bool = False) -> int:
        """Remove the clone and override. Returns the number of nodes removed."""
        if not self._open:
            return 0
        self._open = False
        removed = await self._remove_nodes(suppress=suppress)
        if self.clone is not None:
            try:
                await self.clone.dispose()
            except PlaywrightError:
                pass  # node is already gone; the handle dies with it
            self.clone = None
        return removed

    async def _remove_nodes(self, suppress: bool) -> int:
        try:
            return await self.page.evaluate(scripts.CLOSE_CLONE_SANDBOX, self.token)
        except PlaywrightError as e:
            if not suppress:
                raise
            # Another error is already propagating; don't mask it
            print(f"[capture] Sandbox cleanup failed ({self.token[:8]}): {e}")
            return 0


class Html2CanvasRasterizer:
    """Rasterizes an element with html2canvas, injecting the script on first use."""

    def __init__(self, src: str | None = None, background_color: str = "#FFFFFF"):
        self.src = src or get_settings().html2canvas_src
        self.background_color = background_color

    async def ensure_loaded(self, page):
        if await page.evaluate(scripts.HTML2CANVAS_AVAILABLE):
            return
        if self.src.startswith(("http://", "https://")):
            await page.add_script_tag(url=self.src)
        else:
            await page.add_script_tag(path=self.src)
        print(f"[capture] Injected html2canvas from {self.src}")

    async def rasterize(self, page, element, scale: int) -> str:
        await self.ensure_loaded(page)
        data_uri = await element.evaluate(scripts.RUN_HTML2CANVAS, {
            "scale": scale,
            "useCORS": True,
            "logging": False,
            "backgroundColor": self.background_color,
        })
        if not isinstance(data_uri, str) or not data_uri.startswith("data:"):
            raise RenderFailure("Rasterizer returned no image")
        return data_uri


class CaptureDriver:
    """
    Captures elements of one page as PNG data URIs.

    Owns a lock so at most one capture is in flight per page; a second call
    waits for the first to finish. An optional prepare coroutine runs under
    the same hold of the lock, so in-place DOM edits made before the capture
    never interleave with another caller's.
    """

    def __init__(self, page, rasterizer=None, scale: int | None = None):
        self.page = page
        self.rasterizer = rasterizer or Html2CanvasRasterizer()
        self.scale = scale or get_settings().capture_scale
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def capture(self, element, prepare=None) -> str:
        """Rasterize element without touching the visible page. Returns a data URI."""
        if element is None:
            raise InvalidInput("No element provided")

        async with self._lock:
            if prepare is not None:
                await prepare(element)
            try:
                async with CloneSandbox(self.page, element) as sandbox:
                    return await self.rasterizer.rasterize(self.page, sandbox.clone, self.scale)
            except RenderFailure:
                raise
            except PlaywrightError as e:
                raise RenderFailure(f"Rasterization failed: {e}") from e
