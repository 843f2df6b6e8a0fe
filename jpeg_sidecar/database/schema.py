"""
Catalog schema definitions.
"""
import sqlite3

CURRENT_SCHEMA_VERSION = 1

def init_schema(conn: sqlite3.Connection):
    """
    Applies the catalog schema to the database.
    Idempotent: safe to run on every startup.
    """
    with conn:
        # 1. Version Tracking (For future migrations)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY
            );
        """)

        cur = conn.cursor()
        cur.execute("SELECT version FROM schema_version")
        if not cur.fetchone():
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (CURRENT_SCHEMA_VERSION,))

        # 2. One row per source file, keyed on the resolved path so two
        #    inputs sharing a base name never collide.
        #    Optional EXIF columns stay NULL when the field was absent.
        conn.execute("""
        CREATE TABLE IF NOT EXISTS records (
            source_path     TEXT PRIMARY KEY,
            filename        TEXT NOT NULL,
            size_bytes      INTEGER NOT NULL,
            created_time    TEXT NOT NULL,    -- ISO-8601 UTC
            modified_time   TEXT NOT NULL,
            orientation     INTEGER,
            capture_time    TEXT,
            camera_model    TEXT,
            camera_serial   TEXT,
            document        TEXT NOT NULL,    -- the JSON sidecar document
            recorded_at     TEXT NOT NULL
        );
        """)

        conn.execute("CREATE INDEX IF NOT EXISTS idx_records_filename ON records(filename);")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_records_capture ON records(capture_time);")
