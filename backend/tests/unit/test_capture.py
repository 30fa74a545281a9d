"""Unit tests for the offscreen capture driver and its clone sandbox."""

import asyncio

import pytest

from resume_builder.export import scripts
from resume_builder.export.capture import CaptureDriver, CloneSandbox, Html2CanvasRasterizer
from resume_builder.export.errors import InvalidInput, RenderFailure
from tests.fakes import FakeElementHandle, FakeNode, FakePage


def _target(page):
    node = FakeNode("div", attrs={"id": "resume"}, rect=(794.0, 1123.0),
                    children=[FakeNode("h1")])
    page.body.append(node)
    return FakeElementHandle(node, page)


class RecordingRasterizer:
    def __init__(self, result="data:image/png;base64,AAAA", error=None):
        self.result = result
        self.error = error
        self.seen = []

    async def rasterize(self, page, element, scale):
        # Snapshot the document while the sandbox is open
        self.seen.append({
            "clones": len(page.clones()),
            "overrides": len(page.overrides()),
            "style": dict(element.node.style),
            "scale": scale,
        })
        if self.error:
            raise self.error
        return self.result


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_element_fails_without_mutation():
    page = FakePage()
    driver = CaptureDriver(page, rasterizer=RecordingRasterizer())

    with pytest.raises(InvalidInput):
        await driver.capture(None)

    assert page.calls == []
    assert page.clones() == [] and page.overrides() == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_successful_capture_cleans_up():
    page = FakePage()
    rasterizer = RecordingRasterizer()
    driver = CaptureDriver(page, rasterizer=rasterizer)

    data_uri = await driver.capture(_target(page))

    assert data_uri == "data:image/png;base64,AAAA"
    seen = rasterizer.seen[0]
    assert seen["clones"] == 1 and seen["overrides"] == 1
    assert seen["scale"] == 3
    assert seen["style"]["position"] == "absolute"
    assert seen["style"]["top"] == "-9999px"
    assert seen["style"]["opacity"] == "0"
    assert seen["style"]["width"] == "794.0px"
    assert seen["style"]["height"] == "1123.0px"
    assert page.clones() == [] and page.overrides() == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_render_failure_propagates_after_cleanup():
    from playwright.async_api import Error as PlaywrightError

    page = FakePage()
    driver = CaptureDriver(page, rasterizer=RecordingRasterizer(error=PlaywrightError("tainted canvas")))

    with pytest.raises(RenderFailure, match="tainted canvas"):
        await driver.capture(_target(page))

    assert page.clones() == [] and page.overrides() == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unexpected_error_still_cleans_up():
    page = FakePage()
    driver = CaptureDriver(page, rasterizer=RecordingRasterizer(error=RuntimeError("boom")))

    with pytest.raises(RuntimeError):
        await driver.capture(_target(page))

    assert page.clones() == [] and page.overrides() == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_cleanup_error_does_not_mask_render_failure():
    from playwright.async_api import Error as PlaywrightError

    page = FakePage()
    page.fail_close = True
    driver = CaptureDriver(page, rasterizer=RecordingRasterizer(error=PlaywrightError("bad image")))

    with pytest.raises(RenderFailure, match="bad image"):
        await driver.capture(_target(page))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_original_element_is_untouched():
    page = FakePage()
    handle = _target(page)
    await CaptureDriver(page, rasterizer=RecordingRasterizer()).capture(handle)
    assert handle.node.style == {}
    assert page.body.children == [handle.node]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sandboxes_use_distinct_tokens():
    page = FakePage()
    handle = _target(page)

    async with CloneSandbox(page, handle) as first:
        async with CloneSandbox(page, handle) as second:
            assert first.token != second.token
            assert len(page.clones()) == 2
        # Closing the inner sandbox leaves the outer one's nodes alone
        assert len(page.clones()) == 1
        assert page.overrides()[0].attrs["data-capture-override"] == first.token

    assert page.clones() == [] and page.overrides() == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sandbox_close_is_idempotent():
    page = FakePage()
    sandbox = CloneSandbox(page, _target(page))
    await sandbox.__aenter__()
    assert await sandbox.close() == 2
    assert await sandbox.close() == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_override_css_forces_safe_colors():
    page = FakePage()
    async with CloneSandbox(page, _target(page)):
        css = page.overrides()[0].text
    for rule in ("color: #000 !important", "background-color: #fff !important",
                 "border-color: #000 !important", "box-shadow: none !important",
                 "background-image: none !important"):
        assert rule in css


@pytest.mark.unit
@pytest.mark.asyncio
async def test_captures_on_one_page_are_serialized():
    page = FakePage()
    handle = _target(page)
    active = []
    peak = []

    class SlowRasterizer:
        async def rasterize(self, page, element, scale):
            active.append(element)
            peak.append(len(active))
            await asyncio.sleep(0.01)
            active.remove(element)
            return "data:image/png;base64,AAAA"

    driver = CaptureDriver(page, rasterizer=SlowRasterizer())
    await asyncio.gather(driver.capture(handle), driver.capture(handle), driver.capture(handle))

    assert max(peak) == 1
    assert not driver.busy
    assert page.clones() == [] and page.overrides() == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_html2canvas_rasterizer_injects_script_once():
    page = FakePage()
    handle = _target(page)
    rasterizer = Html2CanvasRasterizer(src="https://cdn.example.com/html2canvas.min.js")

    first = await rasterizer.rasterize(page, handle, 3)
    await rasterizer.rasterize(page, handle, 3)

    assert first == page.render_result
    assert page.injected_scripts == ["https://cdn.example.com/html2canvas.min.js"]
    assert page.last_render_options == {
        "scale": 3, "useCORS": True, "logging": False, "backgroundColor": "#FFFFFF",
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_html2canvas_rasterizer_local_path_and_bad_output():
    page = FakePage()
    page.render_result = None
    rasterizer = Html2CanvasRasterizer(src="/opt/vendor/html2canvas.min.js")

    with pytest.raises(RenderFailure):
        await rasterizer.rasterize(page, _target(page), 3)
    assert page.injected_scripts == ["/opt/vendor/html2canvas.min.js"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_driver_renders_clone_not_original():
    page = FakePage()
    handle = _target(page)
    page.html2canvas_loaded = True

    await CaptureDriver(page).capture(handle)

    assert page.last_rendered is not handle.node
    assert "data-capture-clone" in page.last_rendered.attrs
    assert scripts.CLOSE_CLONE_SANDBOX in page.calls


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sandbox_setup_failure_becomes_render_failure():
    page = FakePage()
    page.fail_open = True
    driver = CaptureDriver(page, rasterizer=RecordingRasterizer())

    with pytest.raises(RenderFailure, match="Execution context was destroyed"):
        await driver.capture(_target(page))

    assert page.clones() == [] and page.overrides() == []
    assert not driver.busy


@pytest.mark.unit
@pytest.mark.asyncio
async def test_prepare_runs_inside_the_lock():
    page = FakePage()
    handle = _target(page)
    driver = CaptureDriver(page, rasterizer=RecordingRasterizer())
    held = []

    async def prepare(element):
        held.append((element, driver.busy, len(page.clones())))

    await driver.capture(handle, prepare=prepare)

    assert held == [(handle, True, 0)]
