"""Unit tests for pine_vector_db.engine.PineDB."""

import math

import numpy as np
import pytest

from pine_vector_db.config import PineSettings
from pine_vector_db.engine import PineDB
from pine_vector_db.errors import (
    EncodingFailure,
    IOFailure,
    PineError,
    TextEncodingFailure,
)
from pine_vector_db.types import VectorRecord

V1 = [0.5, 0.3, 0.7]
V2 = [0.2, 0.4, 0.1]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db(tmp_path):
    return PineDB(tmp_path / "pine", chunk_similarity=0.9)


def rec(rid, values):
    return VectorRecord(rid, values)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def test_construction_creates_skeleton(tmp_path):
    root = tmp_path / "pine"
    PineDB(root, 0.9)
    assert (root / "vectors").is_dir()
    assert (root / "index").is_dir()


def test_reopen_existing_store(tmp_path):
    PineDB(tmp_path, 0.9).save(rec("1", V1))
    again = PineDB(tmp_path, 0.9)
    assert again.load("1") == rec("1", V1)


def test_construction_io_failure(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_bytes(b"")
    with pytest.raises(IOFailure):
        PineDB(blocker, 0.9)


def test_from_settings(tmp_path):
    db = PineDB.from_settings(PineSettings(root=str(tmp_path), chunk_similarity=0.5))
    assert db.chunk_similarity == 0.5
    assert db.root == tmp_path


def test_empty_store(db):
    assert db.size() == 0
    assert not db.exists("1")
    assert db.load("1") is None
    assert db.ids() == []


# ---------------------------------------------------------------------------
# save / load / exists
# ---------------------------------------------------------------------------


def test_save_load_exists(db):
    v = rec("1", V1)
    db.save(v)
    assert db.exists("1")
    assert "1" in db
    assert db.load("1") == v
    assert len(db) == 1


def test_round_trip_bit_exact(db):
    values = np.array([0.1, 1 / 3, -7.25e-12, 3.0e38], dtype=np.float32)
    db.save(rec("exact", values))
    loaded = db.load("exact")
    assert loaded.np_data.tobytes() == values.tobytes()


def test_save_new_cluster(db):
    db.save(rec("1", [1.0, 0.0, 0.0]))
    db.save(rec("2", [0.0, 1.0, 0.0]))
    assert db.locate("1") != db.locate("2")
    assert db.load("2") == rec("2", [0.0, 1.0, 0.0])
    assert db.stats()["cluster_count"] == 2


def test_save_existing_cluster(db):
    db.save(rec("1", V1))
    db.save(rec("2", [0.55, 0.35, 0.75]))
    assert db.locate("1") == db.locate("2")
    assert db.load("2") == rec("2", [0.55, 0.35, 0.75])
    assert db.stats()["cluster_count"] == 1


def test_threshold_tie_creates_new_cluster(tmp_path):
    db = PineDB(tmp_path, chunk_similarity=1.0)
    db.save(rec("1", [1.0, 0.0, 0.0]))
    db.save(rec("2", [1.0, 0.0, 0.0]))
    assert db.locate("1") != db.locate("2")


def test_overwrite_keeps_latest(db):
    db.save(rec("1", V1))
    db.save(rec("1", [0.51, 0.31, 0.71]))
    assert db.exists("1")
    assert db.load("1") == rec("1", [0.51, 0.31, 0.71])
    assert db.size() == 1


def test_overwrite_moves_between_clusters(db):
    db.save(rec("a", [1.0, 0.0, 0.0]))
    db.save(rec("b", [0.0, 1.0, 0.0]))
    old = db.locate("a")
    db.save(rec("a", [0.0, 1.0, 0.0]))
    assert db.locate("a") == db.locate("b")
    assert not (old / "a").exists()
    assert (old / "metadata").exists()
    assert db.size() == 2


def test_representative_is_fixed(db):
    db.save(rec("first", [1.0, 0.0]))
    db.save(rec("first", [0.95, 0.05]))
    cluster = db.locate("first")
    assert db.store.read_representative(cluster) == rec("first", [1.0, 0.0])


def test_index_entry_holds_cluster_path(db):
    db.save(rec("1", V1))
    text = (db.root / "index" / "1").read_text(encoding="utf-8")
    assert text == str(db.root / "vectors" / "000")


# ---------------------------------------------------------------------------
# delete / size
# ---------------------------------------------------------------------------


def test_delete(db):
    db.save(rec("1", V1))
    db.delete("1")
    assert not db.exists("1")
    assert db.load("1") is None


def test_delete_unknown_is_noop(db):
    db.save(rec("1", V1))
    db.delete("ghost")
    assert db.size() == 1


def test_delete_keeps_empty_cluster(db):
    db.save(rec("1", V1))
    cluster = db.locate("1")
    db.delete("1")
    assert cluster.is_dir()
    assert (cluster / "metadata").exists()
    assert db.size() == 0
    db.save(rec("2", [0.0, 0.0, 1.0]))
    assert db.locate("2").name == "001"


def test_size(db):
    db.save(rec("1", V1))
    assert db.size() == 1
    db.save(rec("2", V2))
    assert db.size() == 2
    db.delete("1")
    assert db.size() == 1
    assert db.ids() == ["2"]


# ---------------------------------------------------------------------------
# Failure propagation
# ---------------------------------------------------------------------------


def test_load_corrupt_member(db):
    db.save(rec("1", V1))
    (db.locate("1") / "1").write_bytes(b"not a vector")
    with pytest.raises(EncodingFailure):
        db.load("1")


def test_load_stale_index(db):
    db.index.set("ghost", db.root / "vectors" / "999")
    with pytest.raises(IOFailure):
        db.load("ghost")


def test_delete_tolerates_missing_member(db):
    db.index.set("ghost", db.root / "vectors" / "999")
    db.delete("ghost")
    assert not db.exists("ghost")


def test_load_bad_index_text(db):
    (db.root / "index" / "1").write_bytes(b"\xff")
    with pytest.raises(TextEncodingFailure) as info:
        db.load("1")
    assert isinstance(info.value, PineError)


# ---------------------------------------------------------------------------
# Numerics
# ---------------------------------------------------------------------------


def test_distance(db):
    d = db.distance(rec("1", V1), rec("2", V2))
    assert d == pytest.approx(math.sqrt(0.46), abs=1e-6)


def test_cosine_similarity(db):
    s = db.cosine_similarity(rec("1", V1), rec("2", V2))
    assert s == pytest.approx(0.6946232, abs=1e-5)


def test_cosine_zero_vector(db):
    assert db.cosine_similarity(rec("z", [0.0, 0.0, 0.0]), rec("1", V1)) == 0.0


def test_repr_and_stats(db):
    db.save(rec("1", V1))
    s = db.stats()
    assert s["record_count"] == 1
    assert s["cluster_count"] == 1
    assert "PineDB" in repr(db)
