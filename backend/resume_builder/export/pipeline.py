"""
Resume export pipeline: normalize styles, sanitize colors, capture, package.
"""

import weakref

from resume_builder.export.capture import CaptureDriver
from resume_builder.export.color_sanitizer import fix_unsupported_colors
from resume_builder.export.errors import InvalidInput
from resume_builder.export.normalizer import inline_all_computed_styles
from resume_builder.export.packager import PackagedFile, data_uri_to_file

# One driver (and so one lock) per live page
_drivers = weakref.WeakKeyDictionary()


def driver_for(page) -> CaptureDriver:
    """The shared CaptureDriver for page, created on first use."""
    driver = _drivers.get(page)
    if driver is None:
        driver = _drivers[page] = CaptureDriver(page)
    return driver


async def _prepare(element):
    nodes = await inline_all_computed_styles(element)
    fixed = await fix_unsupported_colors(element)
    print(f"[export] Inlined {nodes} nodes, fixed colors on {fixed}")


async def capture_element_as_image(page, selector: str, driver: CaptureDriver | None = None) -> str:
    """
    Capture the first element matching selector as a PNG data URI.

    Normalization, color fixes and the capture run under one hold of the
    driver's lock; concurrent exports on the same page take turns.
    """
    element = await page.query_selector(selector)
    if element is None:
        raise InvalidInput(f"No element matches {selector!r}")

    try:
        driver = driver or driver_for(page)
        return await driver.capture(element, prepare=_prepare)
    finally:
        await element.dispose()


async def export_element(page, selector: str, file_name: str,
                         driver: CaptureDriver | None = None) -> PackagedFile:
    """Capture an element and package it as an uploadable file."""
    data_uri = await capture_element_as_image(page, selector, driver=driver)
    packaged = data_uri_to_file(data_uri, file_name)
    print(f"[export] Packaged {packaged.name} ({packaged.mime_type}, {packaged.size} bytes)")
    return packaged
