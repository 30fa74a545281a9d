"""
DOM snapshot normalizer.

Walks an element and all its descendants and replaces each node's inline style
with its computed style, so the rasterizer sees real values instead of
stylesheet-derived ones. Properties whose value uses the unsupported color
function are dropped, leaving the node on its stylesheet default for that
property alone.
"""

from resume_builder.config import get_settings
from resume_builder.export import scripts


def build_inline_style(snapshot, token: str | None = None) -> str:
    """Flatten [(property, value), ...] into a cssText string, skipping values containing token."""
    if token is None:
        token = get_settings().unsupported_color_token
    css_text = ""
    for prop, value in snapshot:
        if token in value:
            continue
        css_text += f"{prop}:{value};"
    return css_text


async def inline_all_computed_styles(root, token: str | None = None) -> int:
    """
    Overwrite the inline style of root and every descendant with its computed style.

    Any inline style already on a node is discarded. Returns the number of
    nodes rewritten (root included).
    """
    snapshots = await root.evaluate(scripts.COLLECT_COMPUTED_STYLES)
    css_texts = [build_inline_style(snapshot, token) for snapshot in snapshots]
    return await root.evaluate(scripts.APPLY_INLINE_STYLES, css_texts)
