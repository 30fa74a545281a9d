"""Turn a rasterized data URI into a named binary file ready for multipart upload."""

import base64
import binascii
import re
from dataclasses import dataclass

from resume_builder.export.errors import MalformedDataUri

DEFAULT_MIME = "image/png"

_MIME_RE = re.compile(r":(.*?);")
_NON_BASE64_RE = re.compile(r"[^A-Za-z0-9+/]")


@dataclass(frozen=True)
class PackagedFile:
    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def read(self) -> bytes:
        return self.data

    def as_multipart(self) -> tuple[str, bytes, str]:
        """(filename, content, content_type), the shape httpx expects in files=."""
        return self.name, self.data, self.mime_type


def parse_mime_type(header: str) -> str:
    """Extract the MIME type from a "data:<mime>;base64" header."""
    match = _MIME_RE.search(header)
    if not match:
        raise MalformedDataUri(f"No MIME segment in data URI header: {header[:40]!r}")
    return match.group(1)


def data_uri_to_file(data_uri: str, file_name: str) -> PackagedFile:
    """
    Decode data:<mime>;base64,<payload> into a PackagedFile.

    A header without a MIME segment falls back to image/png; the payload is
    decoded either way. Raises MalformedDataUri if the payload is not base64.
    """
    header, _, payload = data_uri.partition(",")
    try:
        mime = parse_mime_type(header)
    except MalformedDataUri:
        mime = DEFAULT_MIME

    # Line breaks, spaces and stray padding would throw off the pad count
    payload = _NON_BASE64_RE.sub("", payload)
    payload += "=" * (-len(payload) % 4)
    try:
        data = base64.b64decode(payload)
    except binascii.Error as e:
        raise MalformedDataUri(f"Undecodable base64 payload: {e}") from e
    return PackagedFile(name=file_name, mime_type=mime, data=data)
