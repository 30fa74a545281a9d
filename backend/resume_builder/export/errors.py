"""Failure conditions raised by the resume export pipeline."""


class ExportError(Exception):
    """Base class for export pipeline failures."""


class InvalidInput(ExportError):
    """The capture target is missing."""


class RenderFailure(ExportError):
    """The rasterizer failed, e.g. on unsupported embedded content."""


class MalformedDataUri(ExportError):
    """A data URI header carries no MIME segment.

    Only raised by the header parser. The packager catches it and falls back
    to the default MIME type, so it never reaches callers of data_uri_to_file.
    """
