from __future__ import annotations

import math
import random
import struct
import threading
from typing import List

import pytest

from gelfsend.core.chunker import (
    CHUNK_MAGIC,
    LEGACY_HEADER_SIZE,
    MAX_CHUNKS,
    MODERN_HEADER_SIZE,
    chunk,
    new_message_id,
    split_payload,
)
from gelfsend.core.errors import MessageTooLargeError


def _payload(size: int, seed: int = 7) -> bytes:
    return random.Random(seed).randbytes(size)


def test_header_sizes() -> None:
    assert MODERN_HEADER_SIZE == 12
    assert LEGACY_HEADER_SIZE == 38


@pytest.mark.parametrize(
    ("size", "ceiling"),
    [(1421, 1420), (5000, 1420), (20_000, 1420), (1408 * 3, 1420), (1408 * 3 + 1, 1420), (100, 20)],
)
def test_chunking_is_complete_and_ordered(size: int, ceiling: int) -> None:
    payload = _payload(size)
    chunked = split_payload(payload, ceiling)
    assert chunked is not None

    body_size = ceiling - MODERN_HEADER_SIZE
    assert chunked.sequence_count == math.ceil(size / body_size)
    assert len(chunked) == chunked.sequence_count
    assert chunked.reassemble() == payload

    for index, datagram in enumerate(chunked):
        assert len(datagram) <= ceiling
        magic, message_id, seq_index, seq_count = struct.unpack(">2s8sBB", datagram[:MODERN_HEADER_SIZE])
        assert magic == CHUNK_MAGIC
        assert message_id == chunked.message_id
        assert seq_index == index
        assert seq_count == chunked.sequence_count


def test_payload_equal_to_ceiling_is_not_chunked() -> None:
    payload = _payload(1420)
    assert split_payload(payload, 1420) is None
    assert chunk(payload, 1420) == [payload]


def test_one_byte_over_ceiling_is_chunked() -> None:
    payload = _payload(1421)
    datagrams = chunk(payload, 1420)
    assert len(datagrams) == 2
    assert all(d.startswith(CHUNK_MAGIC) for d in datagrams)


def test_maximum_chunk_count_is_accepted() -> None:
    body_size = 1420 - MODERN_HEADER_SIZE
    chunked = split_payload(_payload(body_size * MAX_CHUNKS), 1420)
    assert chunked is not None
    assert chunked.sequence_count == MAX_CHUNKS


def test_too_many_chunks_is_rejected() -> None:
    body_size = 1420 - MODERN_HEADER_SIZE
    with pytest.raises(MessageTooLargeError) as info:
        split_payload(_payload(body_size * MAX_CHUNKS + 1), 1420)
    assert info.value.chunks == MAX_CHUNKS + 1
    assert info.value.limit == MAX_CHUNKS


def test_ceiling_smaller_than_header_is_rejected() -> None:
    with pytest.raises(ValueError):
        split_payload(_payload(100), MODERN_HEADER_SIZE)


def test_legacy_framing_layout() -> None:
    payload = b'{"short_message":"' + b"a" * 3000 + b'"}'
    message_id = b"0123456789abcdef0123456789abcdef"
    chunked = split_payload(payload, 1420, compressed_chunking=False, message_id=message_id)
    assert chunked is not None

    body_size = 1420 - LEGACY_HEADER_SIZE
    assert chunked.sequence_count == math.ceil(len(payload) / body_size)
    for index, datagram in enumerate(chunked):
        assert len(datagram) <= 1420
        assert datagram[:2] == CHUNK_MAGIC
        assert datagram[2:34] == message_id
        assert struct.unpack(">HH", datagram[34:38]) == (index, chunked.sequence_count)
        assert datagram[38:] == payload[index * body_size : (index + 1) * body_size]
    assert chunked.reassemble() == payload


def test_explicit_message_id_must_match_framing() -> None:
    with pytest.raises(ValueError):
        split_payload(_payload(3000), 1420, message_id=b"short")


def test_message_ids_have_expected_shape() -> None:
    modern = new_message_id()
    legacy = new_message_id(compressed_chunking=False)
    assert len(modern) == 8
    assert len(legacy) == 32
    int(legacy.decode("ascii"), 16)


def test_message_ids_are_unique_across_threads() -> None:
    ids: List[bytes] = []
    lock = threading.Lock()

    def worker() -> None:
        local = [new_message_id() for _ in range(500)]
        with lock:
            ids.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(ids) == 4000
    assert len(set(ids)) == len(ids)
