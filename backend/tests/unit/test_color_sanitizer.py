"""Unit tests for the color sanitizer."""

import pytest

from resume_builder.export.color_sanitizer import fix_unsupported_colors, plan_color_fixes
from tests.fakes import FakeElementHandle, FakeNode, FakePage


def _element(style=None, svg=False, fill=None, stroke=None):
    return {"style": style or {}, "svg": svg, "fill": fill, "stroke": stroke}


@pytest.mark.unit
def test_plan_only_touches_offending_properties():
    elements = [
        _element({"color": "oklch(0.5 0.1 200)", "background-color": "rgb(255, 255, 255)"}),
        _element({"color": "rgb(0, 0, 0)"}),
    ]
    assert plan_color_fixes(elements) == [
        {"index": 0, "style": {"color": "#000"}, "attributes": {}},
    ]


@pytest.mark.unit
def test_plan_svg_fill_and_stroke():
    elements = [_element(svg=True, fill="oklch(0.7 0.2 30)", stroke="#333")]
    fixes = plan_color_fixes(elements)
    assert fixes == [{"index": 0, "style": {}, "attributes": {"fill": "#000"}}]


@pytest.mark.unit
def test_plan_ignores_fill_on_non_svg_elements():
    elements = [_element(svg=False, fill="oklch(0.7 0.2 30)")]
    assert plan_color_fixes(elements) == []


@pytest.mark.unit
def test_plan_custom_fallback():
    elements = [_element({"border-color": "oklch(0.9 0 0)"})]
    fixes = plan_color_fixes(elements, fallback="#222")
    assert fixes[0]["style"] == {"border-color": "#222"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_none_root_is_noop():
    assert await fix_unsupported_colors(None) == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_span_with_oklch_color_gets_fallback():
    span = FakeNode("span", style={"color": "oklch(0.5 0.1 200)"})
    root = FakeNode("div", children=[span])
    page = FakePage()
    page.body.append(root)

    changed = await fix_unsupported_colors(FakeElementHandle(root, page))

    assert changed == 1
    assert span.style["color"] == "#000"
    assert "oklch(" not in span.computed_style()["color"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_root_itself_is_not_sanitized():
    root = FakeNode("div", computed={"color": "oklch(0.5 0.1 200)"})
    changed = await fix_unsupported_colors(FakeElementHandle(root, FakePage()))
    assert changed == 0
    assert root.style == {}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_svg_attributes_rewritten_and_others_untouched():
    circle = FakeNode(
        "circle", svg=True,
        attrs={"fill": "oklch(0.6 0.1 100)", "stroke": "oklch(0.1 0 0)", "r": "4"},
    )
    root = FakeNode("div", children=[FakeNode("svg", svg=True, children=[circle])])

    await fix_unsupported_colors(FakeElementHandle(root, FakePage()))

    assert circle.attrs == {"fill": "#000", "stroke": "#000", "r": "4"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_clean_tree_skips_apply_round_trip():
    from resume_builder.export import scripts

    root = FakeNode("div", children=[FakeNode("p", computed={"color": "rgb(1, 2, 3)"})])
    page = FakePage()
    assert await fix_unsupported_colors(FakeElementHandle(root, page)) == 0
    assert scripts.APPLY_COLOR_FIXES not in page.calls
