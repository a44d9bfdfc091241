"""Split oversized GELF payloads into framed UDP chunks.

Two framings are supported. The current one, used together with gzip::

    1e 0f | message id (8) | index (1) | count (1) | body

and the layout Graylog2 collectors expected before 0.9.6, used for
uncompressed chunking::

    1e 0f | message id (32, ASCII hex) | index (2, big endian) | count (2, big endian) | body
"""

from __future__ import annotations

import math
import os
import struct
from dataclasses import dataclass, field
from typing import Iterator, List

from ..utils.time import now_millis
from .errors import MessageTooLargeError

__all__ = [
    "CHUNK_MAGIC",
    "DEFAULT_MAX_DATAGRAM_SIZE",
    "LEGACY_HEADER_SIZE",
    "MAX_CHUNKS",
    "MODERN_HEADER_SIZE",
    "ChunkedPayload",
    "chunk",
    "header_size",
    "new_message_id",
    "split_payload",
]

CHUNK_MAGIC = b"\x1e\x0f"
MAX_CHUNKS = 128
DEFAULT_MAX_DATAGRAM_SIZE = 1420

MODERN_ID_SIZE = 8
LEGACY_ID_SIZE = 32

_MODERN_HEADER = struct.Struct(">2s8sBB")
_LEGACY_HEADER = struct.Struct(">2s32sHH")

MODERN_HEADER_SIZE = _MODERN_HEADER.size
LEGACY_HEADER_SIZE = _LEGACY_HEADER.size


def header_size(compressed_chunking: bool = True) -> int:
    return MODERN_HEADER_SIZE if compressed_chunking else LEGACY_HEADER_SIZE


def new_message_id(compressed_chunking: bool = True) -> bytes:
    """Return a fresh message identifier.

    Modern ids combine the low 32 bits of the millisecond clock with four
    bytes from ``os.urandom``; legacy ids are 32 hex characters of randomness.
    """

    if not compressed_chunking:
        return os.urandom(LEGACY_ID_SIZE // 2).hex().encode("ascii")
    millis = now_millis() & 0xFFFFFFFF
    return struct.pack(">I", millis) + os.urandom(MODERN_ID_SIZE - 4)


@dataclass(slots=True)
class ChunkedPayload:
    """Framed datagrams for one logical message."""

    message_id: bytes
    sequence_count: int
    compressed_chunking: bool = True
    chunks: List[bytes] = field(default_factory=list)

    @property
    def header_size(self) -> int:
        return header_size(self.compressed_chunking)

    @property
    def bodies(self) -> Iterator[bytes]:
        size = self.header_size
        for datagram in self.chunks:
            yield datagram[size:]

    def reassemble(self) -> bytes:
        return b"".join(self.bodies)

    def __len__(self) -> int:
        return len(self.chunks)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.chunks)


def _frame(message_id: bytes, index: int, count: int, body: bytes, compressed_chunking: bool) -> bytes:
    header = _MODERN_HEADER if compressed_chunking else _LEGACY_HEADER
    return header.pack(CHUNK_MAGIC, message_id, index, count) + body


def split_payload(
    payload: bytes,
    max_datagram_size: int = DEFAULT_MAX_DATAGRAM_SIZE,
    *,
    compressed_chunking: bool = True,
    message_id: bytes | None = None,
    max_chunks: int = MAX_CHUNKS,
) -> ChunkedPayload | None:
    """Partition ``payload`` into framed chunks.

    Returns ``None`` when the payload fits into a single datagram. Raises
    :class:`MessageTooLargeError` when more than ``max_chunks`` chunks would
    be required.
    """

    if len(payload) <= max_datagram_size:
        return None

    overhead = header_size(compressed_chunking)
    body_size = max_datagram_size - overhead
    if body_size <= 0:
        raise ValueError(
            f"Datagram size {max_datagram_size} leaves no room after the {overhead} byte chunk header"
        )

    count = math.ceil(len(payload) / body_size)
    if count > max_chunks:
        raise MessageTooLargeError(len(payload), count, max_chunks)

    if message_id is None:
        message_id = new_message_id(compressed_chunking)
    expected = MODERN_ID_SIZE if compressed_chunking else LEGACY_ID_SIZE
    if len(message_id) != expected:
        raise ValueError(f"Message id must be {expected} bytes, got {len(message_id)}")

    result = ChunkedPayload(message_id=message_id, sequence_count=count, compressed_chunking=compressed_chunking)
    for index in range(count):
        body = payload[index * body_size : (index + 1) * body_size]
        result.chunks.append(_frame(message_id, index, count, body, compressed_chunking))
    return result


def chunk(
    payload: bytes,
    max_datagram_size: int = DEFAULT_MAX_DATAGRAM_SIZE,
    *,
    compressed_chunking: bool = True,
) -> List[bytes]:
    """Return the datagrams needed to carry ``payload``, in send order."""

    chunked = split_payload(payload, max_datagram_size, compressed_chunking=compressed_chunking)
    if chunked is None:
        return [payload]
    return list(chunked.chunks)
