"""Inline base64 payloads for staff photos and documents."""
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
IMAGE_TYPES: tuple[str, ...] = ("image/jpeg", "image/png", "image/gif", "image/webp")
DOCUMENT_TYPES: tuple[str, ...] = IMAGE_TYPES + (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


@dataclass
class InlineFile:
    """Decoded data URL."""

    mime_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def decode_data_url(value: str, *, allowed: tuple[str, ...] = DOCUMENT_TYPES) -> InlineFile:
    """Decode and validate a ``data:<mime>;base64,...`` string."""

    match = _DATA_URL_RE.match((value or "").strip())
    if not match:
        raise ValueError("Expected a base64 data URL")
    mime_type = match.group("mime").lower()
    if mime_type not in allowed:
        raise ValueError(f"File type {mime_type} is not allowed")
    payload = re.sub(r"\s+", "", match.group("payload"))
    # base64 inflates by 4/3; reject before decoding oversized payloads
    if len(payload) * 3 // 4 > MAX_UPLOAD_BYTES + 2:
        raise ValueError("File exceeds the 5 MB limit")
    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("File payload is not valid base64") from exc
    if len(content) > MAX_UPLOAD_BYTES:
        raise ValueError("File exceeds the 5 MB limit")
    return InlineFile(mime_type=mime_type, content=content)


def encode_data_url(content: bytes, mime_type: str) -> str:
    if mime_type not in DOCUMENT_TYPES:
        raise ValueError(f"File type {mime_type} is not allowed")
    if len(content) > MAX_UPLOAD_BYTES:
        raise ValueError("File exceeds the 5 MB limit")
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


__all__ = [
    "DOCUMENT_TYPES",
    "IMAGE_TYPES",
    "InlineFile",
    "MAX_UPLOAD_BYTES",
    "decode_data_url",
    "encode_data_url",
]
