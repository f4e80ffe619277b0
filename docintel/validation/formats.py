"""Allow-list of upload formats and their resolution from MIME, name or content."""

from dataclasses import dataclass
from pathlib import PurePath

from docintel.validation.exceptions import UnsupportedFormatError


@dataclass(frozen=True)
class SupportedFormat:
    name: str
    mime_type: str
    extensions: tuple[str, ...]
    magic: tuple[bytes, ...]


PDF = SupportedFormat("pdf", "application/pdf", (".pdf",), (b"%PDF",))
DOCX = SupportedFormat(
    "docx",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    (".docx",),
    (b"PK\x03\x04",),
)
DOC = SupportedFormat("doc", "application/msword", (".doc",), (b"\xd0\xcf\x11\xe0",))
PNG = SupportedFormat("png", "image/png", (".png",), (b"\x89PNG",))
JPEG = SupportedFormat("jpeg", "image/jpeg", (".jpg", ".jpeg"), (b"\xff\xd8\xff",))

SUPPORTED_FORMATS: tuple[SupportedFormat, ...] = (PDF, DOCX, DOC, PNG, JPEG)

_BY_MIME: dict[str, SupportedFormat] = {fmt.mime_type: fmt for fmt in SUPPORTED_FORMATS}
_BY_MIME["image/jpg"] = JPEG
_BY_EXTENSION: dict[str, SupportedFormat] = {
    ext: fmt for fmt in SUPPORTED_FORMATS for ext in fmt.extensions
}
_GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream", "binary/octet-stream"})


def resolve_format(mime_type: str, filename: str, content: bytes) -> SupportedFormat:
    """Resolve the upload format: declared MIME, then extension, then magic bytes.

    A specific declared MIME type is authoritative; the file name and the
    content are only consulted when the caller sent none or a generic one.

    Raises:
        UnsupportedFormatError: if the format is not in the allow-list.
    """
    declared = mime_type.split(";", 1)[0].strip().lower()
    if declared not in _GENERIC_MIME_TYPES:
        fmt = _BY_MIME.get(declared)
        if fmt is None:
            raise UnsupportedFormatError(f"Unsupported file type: {declared}")
        return fmt

    fmt = _BY_EXTENSION.get(PurePath(filename).suffix.lower())
    if fmt is not None:
        return fmt

    for candidate in SUPPORTED_FORMATS:
        if any(content.startswith(signature) for signature in candidate.magic):
            return candidate
    raise UnsupportedFormatError(f"Unsupported file type for '{filename}'")


def is_supported_mime_type(mime_type: str) -> bool:
    return mime_type.split(";", 1)[0].strip().lower() in _BY_MIME
