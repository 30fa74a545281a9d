"""
Color sanitizer: rewrites unsupported color-function values to a safe fallback.

Only color, background-color and border-color (inline style) and the fill and
stroke attributes of SVG elements are ever touched, and only when their value
contains the unsupported token.
"""

from resume_builder.config import get_settings
from resume_builder.export import scripts

COLOR_PROPERTIES = ("color", "background-color", "border-color")
SVG_PAINT_ATTRIBUTES = ("fill", "stroke")


def _default_token() -> str:
    # Match the bare function name so "oklch (" spacing variants are caught too
    return get_settings().unsupported_color_token.rstrip("(")


def plan_color_fixes(elements: list, token: str | None = None, fallback: str | None = None) -> list:
    """
    Decide which properties/attributes to overwrite.

    elements is what COLLECT_COLOR_STYLES returns: one dict per descendant with
    "style", "svg", "fill" and "stroke". Returns a list of
    {"index", "style", "attributes"} entries, only for elements that need a fix.
    """
    settings = get_settings()
    token = token or _default_token()
    fallback = fallback or settings.fallback_color

    fixes = []
    for index, el in enumerate(elements):
        style = {}
        for prop in COLOR_PROPERTIES:
            value = (el.get("style") or {}).get(prop) or ""
            if token in value:
                style[prop] = fallback

        attributes = {}
        if el.get("svg"):
            for name in SVG_PAINT_ATTRIBUTES:
                value = el.get(name)
                if value and token in value:
                    attributes[name] = fallback

        if style or attributes:
            fixes.append({"index": index, "style": style, "attributes": attributes})
    return fixes


async def fix_unsupported_colors(root, token: str | None = None, fallback: str | None = None) -> int:
    """Sanitize every descendant of root. Returns the number of elements changed."""
    if root is None:
        return 0
    elements = await root.evaluate(scripts.COLLECT_COLOR_STYLES)
    fixes = plan_color_fixes(elements, token=token, fallback=fallback)
    if not fixes:
        return 0
    await root.evaluate(scripts.APPLY_COLOR_FIXES, fixes)
    return len(fixes)
