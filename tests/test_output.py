import io
import os
import sys
import json
import sqlite3
from datetime import datetime, UTC

import pytest
from jpeg_sidecar.output.sinks import SidecarWriter, StdoutWriter, CatalogWriter
from jpeg_sidecar.database.schema import init_schema
from jpeg_sidecar.database.ops import DBOperations
from jpeg_sidecar.core import BatchProcessor
from jpeg_sidecar.models import NormalizedRecord
from jpeg_sidecar.exceptions import RecordWriteError

T0 = datetime(2020, 8, 13, 10, 57, 7, tzinfo=UTC)


@pytest.fixture
def record():
    return NormalizedRecord("IMG_0001.jpg", 3014190, T0, T0, orientation=1, camera_model="X100V")


@pytest.fixture
def conn():
    """In-memory SQLite connection with the catalog schema."""
    c = sqlite3.connect(":memory:")
    init_schema(c)
    try:
        yield c
    finally:
        c.close()


def stored_documents(conn, source_path=None):
    """Decoded JSON documents from the records table, ordered by path."""
    if source_path is None:
        rows = conn.execute("SELECT document FROM records ORDER BY source_path").fetchall()
    else:
        rows = conn.execute("SELECT document FROM records WHERE source_path = ?", (str(source_path),)).fetchall()
    return [NormalizedRecord.from_json(row[0]) for row in rows]


def test_sidecar_written_beside_source(tmp_path, record):
    src = tmp_path / "IMG_0001.jpg"
    target = SidecarWriter().write(record, src)

    assert target == tmp_path / "IMG_0001.jpg.json"
    assert json.loads(target.read_text(encoding="utf-8")) == record.to_dict()


def test_sidecar_output_dir_refuses_name_collision(tmp_path, record):
    out = tmp_path / "out"
    writer = SidecarWriter(out)
    writer.write(record, tmp_path / "a" / "IMG_0001.jpg")

    with pytest.raises(RecordWriteError):
        writer.write(record, tmp_path / "b" / "IMG_0001.jpg")
    assert (out / "IMG_0001.jpg.json").exists()


def test_sidecar_write_failure_is_record_write_error(tmp_path, record):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    with pytest.raises(RecordWriteError):
        SidecarWriter(blocker / "sub").write(record, tmp_path / "IMG_0001.jpg")


def test_same_name_collision_in_batch(tmp_path, make_jpeg):
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    first = make_jpeg("a/dup.jpg", orientation=1)
    second = make_jpeg("b/dup.jpg", orientation=6)

    outcome = BatchProcessor().process([first, second], SidecarWriter(tmp_path / "out"))

    assert outcome.processed == [str(first)]
    assert [ident for ident, _ in outcome.errors] == [str(second)]
    doc = json.loads((tmp_path / "out" / "dup.jpg.json").read_text(encoding="utf-8"))
    assert doc["orientation"] == 1


def test_stdout_writer_emits_json_lines(record):
    buf = io.StringIO()
    writer = StdoutWriter(buf)
    writer.write(record, None)
    writer.write(record, None)

    lines = buf.getvalue().splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0]) == record.to_dict()


def test_upsert_is_idempotent_per_path(conn, record, tmp_path):
    ops = DBOperations(conn)
    src = tmp_path / "IMG_0001.jpg"

    ops.upsert_record(record, src)
    ops.upsert_record(record, src)
    assert len(stored_documents(conn)) == 1

    updated = NormalizedRecord("IMG_0001.jpg", 10, T0, T0)
    ops.upsert_record(updated, src)
    assert stored_documents(conn, src) == [updated]


def test_same_filename_different_paths_both_kept(conn, record, tmp_path):
    ops = DBOperations(conn)
    ops.upsert_record(record, tmp_path / "a" / "IMG_0001.jpg")
    ops.upsert_record(record, tmp_path / "b" / "IMG_0001.jpg")

    assert stored_documents(conn) == [record, record]


def test_optional_columns_are_null_when_absent(conn, tmp_path):
    ops = DBOperations(conn)
    ops.upsert_record(NormalizedRecord("x.jpg", 1, T0, T0), tmp_path / "x.jpg")

    row = conn.execute("SELECT orientation, capture_time, camera_model, camera_serial FROM records").fetchone()
    assert row == (None, None, None, None)


def test_catalog_writer_persists_batch(tmp_path, full_jpeg):
    db_path = tmp_path / "catalog.db"
    with CatalogWriter(db_path) as sink:
        outcome = BatchProcessor().process([full_jpeg], sink)

    assert outcome.processed == [str(full_jpeg)]

    conn = sqlite3.connect(db_path)
    try:
        assert stored_documents(conn, full_jpeg.resolve()) == [outcome.records[0]]
    finally:
        conn.close()


def test_catalog_writer_requires_open(tmp_path, record):
    with pytest.raises(RecordWriteError):
        CatalogWriter(tmp_path / "c.db").write(record, tmp_path / "x.jpg")


def test_catalog_rejects_unencodable_text(tmp_path, record):
    with CatalogWriter(tmp_path / "c.db") as sink:
        with pytest.raises(RecordWriteError):
            sink.write(record, tmp_path / os.fsdecode(b"\xff.jpg"))


def test_unencodable_sidecar_leaves_no_file(tmp_path):
    odd = NormalizedRecord(os.fsdecode(b"\xff.jpg"), 1, T0, T0)

    with pytest.raises(RecordWriteError):
        SidecarWriter().write(odd, tmp_path / odd.filename)
    assert list(tmp_path.iterdir()) == []


def test_stdout_writer_wraps_encoding_errors(record):
    ascii_stream = io.TextIOWrapper(io.BytesIO(), encoding="ascii")
    non_ascii = NormalizedRecord("a.jpg", 1, T0, T0, camera_model="Appareil photo é")

    with pytest.raises(RecordWriteError):
        StdoutWriter(ascii_stream).write(non_ascii, None)


@pytest.mark.skipif(sys.platform != "linux", reason="needs byte file names")
def test_non_utf8_file_name_does_not_stop_batch(tmp_path, full_jpeg, make_jpeg):
    src = make_jpeg("to_rename.jpg", orientation=1)
    odd = tmp_path / os.fsdecode(b"\xff.jpg")
    os.rename(src, odd)

    outcome = BatchProcessor().process([odd, full_jpeg], SidecarWriter())

    assert [ident for ident, _ in outcome.errors] == [str(odd)]
    assert "RecordWriteError" in outcome.errors[0][1]
    assert outcome.processed == [str(full_jpeg)]
    assert sorted(p.name for p in tmp_path.glob("*.json")) == ["full.jpg.json"]
