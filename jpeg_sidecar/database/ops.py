import sqlite3
from datetime import datetime, UTC
from pathlib import Path

from ..models import NormalizedRecord, format_instant

class DBOperations:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def upsert_record(self, rec: NormalizedRecord, source_path: Path):
        """
        Inserts or replaces the record for a source file.
        Re-running over the same file just refreshes its row.
        """
        now_iso = datetime.now(UTC).isoformat()
        self.conn.execute("""
            INSERT INTO records (
                source_path, filename, size_bytes, created_time, modified_time,
                orientation, capture_time, camera_model, camera_serial,
                document, recorded_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(source_path) DO UPDATE SET
                filename = excluded.filename,
                size_bytes = excluded.size_bytes,
                created_time = excluded.created_time,
                modified_time = excluded.modified_time,
                orientation = excluded.orientation,
                capture_time = excluded.capture_time,
                camera_model = excluded.camera_model,
                camera_serial = excluded.camera_serial,
                document = excluded.document,
                recorded_at = excluded.recorded_at
        """, (
            str(source_path), rec.filename, rec.size_bytes,
            format_instant(rec.created_time), format_instant(rec.modified_time),
            rec.orientation,
            format_instant(rec.capture_time) if rec.capture_time else None,
            rec.camera_model, rec.camera_serial,
            rec.to_json(), now_iso
        ))
