import pytest
import pytest_asyncio


@pytest_asyncio.fixture
async def page():
    """A blank page in headless Chromium. Skips when no browser can be launched."""
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=True)
        except Exception as e:
            pytest.skip(f"Chromium not available: {e}")
        try:
            yield await browser.new_page(viewport={"width": 1024, "height": 768})
        finally:
            await browser.close()
