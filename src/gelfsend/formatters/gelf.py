"""GELF JSON encoder."""

from __future__ import annotations

import json

from ..core.errors import EncodingError
from ..core.message import GELFMessage

__all__ = ["encode_message"]


def encode_message(message: GELFMessage) -> bytes:
    """Serialize ``message`` to compact, key-sorted UTF-8 JSON.

    Lone surrogates (undecodable bytes from ``os.fsdecode`` or ``sys.argv``)
    are written as ``\\uXXXX`` escapes.
    """

    if not message.host:
        raise EncodingError("GELF messages require a non-empty host")
    payload = message.to_dict()
    text = json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    return text.encode("utf-8", errors="backslashreplace")
