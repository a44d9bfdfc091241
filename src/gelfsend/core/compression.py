"""Payload compression helpers."""

from __future__ import annotations

import gzip

__all__ = ["GZIP_MAGIC", "compress", "decompress", "is_gzip"]

GZIP_MAGIC = b"\x1f\x8b"


def compress(data: bytes, *, level: int = 9) -> bytes:
    """Gzip ``data``.

    The header mtime is pinned to zero so identical input yields identical
    output.
    """

    return gzip.compress(data, compresslevel=level, mtime=0)


def is_gzip(data: bytes) -> bool:
    return data[:2] == GZIP_MAGIC


def decompress(data: bytes) -> bytes:
    """Reverse :func:`compress`; plain payloads are returned unchanged."""

    if is_gzip(data):
        return gzip.decompress(data)
    return data
