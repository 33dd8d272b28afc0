"""
Attachment detection and materialization

Attachments are values carrying binary content (named blobs, raw bytes, file
objects, filesystem paths, aiohttp responses, async byte streams). They are
only drained once the classifier has decided a value is an attachment.
"""

import asyncio
import io
import mimetypes
import os
import re
from dataclasses import dataclass
from typing import Any, Optional

import aiofiles
from aiohttp import ClientResponse

from ..logger import get_logger

# Name given to attachments that expose no usable name
PLACEHOLDER_FILENAME = "unknown_file"

_NAME_ATTRIBUTES = ("name", "url", "filename", "path")
_PATH_SEPARATORS = re.compile(r"[\\/]")
_BYTES_TYPES = (bytes, bytearray, memoryview)

logger = get_logger("attachments")


@dataclass(frozen=True)
class Blob:
    """In-memory binary content with an optional name and content type"""

    data: bytes
    name: Optional[str] = None
    content_type: Optional[str] = None

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class AttachmentPayload:
    """Fully resolved attachment as it is appended to a FieldSink"""

    data: bytes
    filename: str
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return (
            f"AttachmentPayload(filename={self.filename!r}, size={self.size}, "
            f"content_type={self.content_type!r})"
        )


def is_async_iterable(value: Any) -> bool:
    return hasattr(type(value), "__aiter__")


def is_attachment(value: Any) -> bool:
    """Check whether a value is binary content rather than structured data"""
    if isinstance(value, str):
        return False
    return (
        isinstance(value, (Blob, ClientResponse, io.IOBase, os.PathLike))
        or isinstance(value, _BYTES_TYPES)
        or is_async_iterable(value)
    )


def get_name(value: Any) -> Optional[str]:
    """
    Derive a filename from a file-like value

    The first truthy attribute among name, url, filename and path wins and
    is reduced to its last path segment.
    """
    for attribute in _NAME_ATTRIBUTES:
        candidate = getattr(value, attribute, None)
        if candidate:
            segment = _PATH_SEPARATORS.split(str(candidate))[-1]
            return segment or None
    return None


def _guess_content_type(filename: str) -> Optional[str]:
    return mimetypes.guess_type(filename)[0]


def _chunk_to_bytes(chunk: Any) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    if isinstance(chunk, _BYTES_TYPES):
        return bytes(chunk)
    raise TypeError(
        f"Attachment content must be bytes or str, got {type(chunk).__name__}"
    )


async def _read_file_object(handle: io.IOBase) -> bytes:
    # File objects only offer blocking reads; keep them off the event loop
    loop = asyncio.get_running_loop()
    return _chunk_to_bytes(await loop.run_in_executor(None, handle.read))


async def _drain_async_iterable(stream: Any) -> bytes:
    chunks = []
    async for chunk in stream:
        chunks.append(_chunk_to_bytes(chunk))
    return b"".join(chunks)


async def _read_path(path: "os.PathLike[str]") -> bytes:
    async with aiofiles.open(os.fspath(path), "rb") as f:
        return await f.read()


async def _read_content(value: Any) -> bytes:
    if isinstance(value, Blob):
        return bytes(value.data)
    if isinstance(value, _BYTES_TYPES):
        return bytes(value)
    if isinstance(value, ClientResponse):
        return await value.read()
    if isinstance(value, os.PathLike):
        return await _read_path(value)
    if isinstance(value, io.IOBase):
        return await _read_file_object(value)
    return await _drain_async_iterable(value)


def _declared_content_type(value: Any) -> Optional[str]:
    if isinstance(value, Blob):
        return value.content_type
    if isinstance(value, ClientResponse):
        return value.content_type
    return None


async def materialize_attachment(value: Any) -> AttachmentPayload:
    """
    Resolve an attachment into an AttachmentPayload

    Streams and responses are fully drained before returning; errors raised by
    the underlying I/O propagate unchanged.

    Args:
        value: A value for which is_attachment() is true

    Returns:
        AttachmentPayload with bytes, filename and content type
    """
    data = await _read_content(value)
    filename = get_name(value) or PLACEHOLDER_FILENAME
    content_type = _declared_content_type(value) or _guess_content_type(filename)

    logger.debug(
        "Materialized attachment",
        extra={
            "ctx_filename": filename,
            "ctx_size": len(data),
            "ctx_source_type": type(value).__name__,
        },
    )
    return AttachmentPayload(data=data, filename=filename, content_type=content_type)
