"""
Server-side resume rendering.

Renders a resume document to HTML, loads it in headless Chromium, and runs
the export pipeline on the #resume element to produce a PNG thumbnail.
"""

from jinja2 import Environment, PackageLoader, select_autoescape
from playwright.async_api import async_playwright

from resume_builder.config import get_settings
from resume_builder.export import export_element
from resume_builder.formatting import format_duration, format_full_date, format_year_month

RESUME_SELECTOR = "#resume"
DEFAULT_ACCENT = "oklch(0.55 0.15 250)"

_env = Environment(
    loader=PackageLoader("resume_builder", "templates"),
    autoescape=select_autoescape(["html", "jinja"]),
)
_env.filters["year_month"] = format_year_month
_env.filters["full_date"] = format_full_date
_env.filters["duration"] = format_duration


def render_resume_html(resume: dict) -> str:
    palette = (resume.get("template") or {}).get("color_palette") or []
    accent = palette[0] if palette else DEFAULT_ACCENT
    return _env.get_template("resume.html.jinja").render(resume=resume, accent=accent)


async def render_resume_thumbnail(resume: dict, file_name: str | None = None):
    """Render resume in Chromium and export it as a PackagedFile (PNG)."""
    settings = get_settings()
    html = render_resume_html(resume)
    file_name = file_name or f"resume-{resume.get('id', 'preview')}.png"

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        try:
            context = await browser.new_context(
                viewport={"width": settings.viewport_width, "height": settings.viewport_height},
            )
            page = await context.new_page()
            await page.set_content(html, wait_until="load", timeout=settings.page_load_timeout)
            print(f"[thumbnail] Rendered resume {resume.get('id', '?')}, capturing {RESUME_SELECTOR}")
            return await export_element(page, RESUME_SELECTOR, file_name)
        finally:
            await browser.close()
