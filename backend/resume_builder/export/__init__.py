from resume_builder.export.capture import CaptureDriver, CloneSandbox, Html2CanvasRasterizer
from resume_builder.export.color_sanitizer import fix_unsupported_colors
from resume_builder.export.errors import ExportError, InvalidInput, MalformedDataUri, RenderFailure
from resume_builder.export.normalizer import inline_all_computed_styles
from resume_builder.export.packager import PackagedFile, data_uri_to_file
from resume_builder.export.pipeline import capture_element_as_image, driver_for, export_element

__all__ = [
    "CaptureDriver",
    "CloneSandbox",
    "ExportError",
    "Html2CanvasRasterizer",
    "InvalidInput",
    "MalformedDataUri",
    "PackagedFile",
    "RenderFailure",
    "capture_element_as_image",
    "data_uri_to_file",
    "driver_for",
    "export_element",
    "fix_unsupported_colors",
    "inline_all_computed_styles",
]
