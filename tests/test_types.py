"""Unit tests for pine_vector_db.types."""

import numpy as np
import pytest

from pine_vector_db.types import VectorRecord, validate_id


# ---------------------------------------------------------------------------
# VectorRecord
# ---------------------------------------------------------------------------


def test_record_size():
    r = VectorRecord("1", [0.5, 0.3, 0.7])
    assert r.size() == 3


def test_record_data_is_float32_exact():
    r = VectorRecord("1", [0.1])
    assert r.data[0] == float(np.float32(0.1))
    assert r.np_data.dtype == np.float32


def test_record_accepts_numpy_array():
    arr = np.array([1.0, 2.0, 3.0], dtype=np.float32)
    r = VectorRecord("a", arr)
    assert r.data == (1.0, 2.0, 3.0)


def test_record_structural_equality():
    assert VectorRecord("1", [0.5, 0.3]) == VectorRecord("1", (0.5, 0.3))
    assert VectorRecord("1", [0.5, 0.3]) != VectorRecord("2", [0.5, 0.3])
    assert VectorRecord("1", [0.5, 0.3]) != VectorRecord("1", [0.5, 0.4])


def test_record_is_immutable():
    r = VectorRecord("1", [0.5])
    with pytest.raises(AttributeError):
        r.id = "2"


def test_record_empty_data_allowed():
    assert VectorRecord("e", []).size() == 0


def test_fingerprint_stable():
    a = VectorRecord("1", [0.5, 0.3])
    b = VectorRecord("2", [0.5, 0.3])
    assert len(a.fingerprint()) == 64  # Blake2b-256 hex
    assert a.fingerprint() == b.fingerprint()


def test_dict_round_trip():
    r = VectorRecord.new("x", iter([1.5, -2.0]))
    assert VectorRecord.from_dict(r.to_dict()) == r


# ---------------------------------------------------------------------------
# id validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("bad", ["", ".", "..", "metadata", "a/b", "a\\b", "a\x00b"])
def test_invalid_ids_rejected(bad):
    with pytest.raises(ValueError):
        VectorRecord(bad, [1.0])


def test_validate_id_returns_id():
    assert validate_id("vec-42") == "vec-42"


def test_non_string_id_rejected():
    with pytest.raises(ValueError):
        validate_id(42)
