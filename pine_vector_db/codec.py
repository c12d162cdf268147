"""Binary encoding of VectorRecord files.

Layout (little-endian)::

    4 bytes   magic  b"PINE"
    1 byte    format version (uint8)
    4 bytes   id length in bytes (uint32)
    N bytes   id, UTF-8
    4 bytes   element count (uint32)
    M * 4     float32 values

The same encoding is used for member files and cluster representatives.
"""

from __future__ import annotations

import struct

import numpy as np

from .errors import EncodingFailure
from .types import VectorRecord

MAGIC = b"PINE"
FORMAT_VERSION = 1

_HEADER = struct.Struct("<4sB")
_U32 = struct.Struct("<I")


def encode(record: VectorRecord) -> bytes:
    """Serialize ``record`` to bytes."""
    try:
        raw_id = record.id.encode("utf-8")
        values = np.asarray(record.data, dtype="<f4")
        return b"".join(
            (
                _HEADER.pack(MAGIC, FORMAT_VERSION),
                _U32.pack(len(raw_id)),
                raw_id,
                _U32.pack(values.shape[0]),
                values.tobytes(),
            )
        )
    except (struct.error, UnicodeEncodeError, ValueError) as exc:
        raise EncodingFailure(f"cannot encode vector {record.id!r}: {exc}") from exc


def decode(payload: bytes) -> VectorRecord:
    """Deserialize bytes produced by :func:`encode`."""
    try:
        magic, version = _HEADER.unpack_from(payload, 0)
        if magic != MAGIC:
            raise EncodingFailure(f"bad magic {magic!r}")
        if version != FORMAT_VERSION:
            raise EncodingFailure(f"unsupported format version {version}")
        offset = _HEADER.size

        (id_len,) = _U32.unpack_from(payload, offset)
        offset += _U32.size
        raw_id = payload[offset:offset + id_len]
        if len(raw_id) != id_len:
            raise EncodingFailure("truncated id")
        offset += id_len

        (count,) = _U32.unpack_from(payload, offset)
        offset += _U32.size
        end = offset + count * 4
        if len(payload) != end:
            raise EncodingFailure(
                f"expected {end} bytes for {count} values, got {len(payload)}"
            )
        if count:
            values = np.frombuffer(payload, dtype="<f4", count=count, offset=offset)
        else:
            values = ()
        return VectorRecord(id=raw_id.decode("utf-8"), data=values)
    except EncodingFailure:
        raise
    except (struct.error, UnicodeDecodeError, ValueError) as exc:
        raise EncodingFailure(f"cannot decode vector payload: {exc}") from exc
