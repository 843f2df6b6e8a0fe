"""
Output sinks for normalized records.

Every sink exposes write(record, source_path). The batch processor calls
it once per accepted file, on its own thread and in input order.
"""
import sqlite3
import sys
import logging
from pathlib import Path
from typing import Optional, Set, TextIO

from .. import config
from ..database.db import DBManager
from ..database.ops import DBOperations
from ..exceptions import RecordWriteError
from ..models import NormalizedRecord


class SidecarWriter:
    """
    Writes '<filename>.json' next to the source file, or into output_dir.
    """

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = output_dir
        self._written: Set[Path] = set()

    def target_for(self, record: NormalizedRecord, source_path: Path) -> Path:
        parent = self.output_dir if self.output_dir is not None else Path(source_path).parent
        return parent / f"{record.filename}{config.SIDECAR_SUFFIX}"

    def write(self, record: NormalizedRecord, source_path: Path) -> Path:
        target = self.target_for(record, source_path)

        # Two inputs with the same base name would land on the same sidecar
        # in a shared output dir. Refuse the second one instead of clobbering.
        if target in self._written:
            raise RecordWriteError(
                f"{target} was already written for another input with the same name"
            )

        # Encode before touching the target so a failure leaves no empty file
        try:
            data = (record.to_json(indent=2) + "\n").encode("utf-8")
        except ValueError as e:
            raise RecordWriteError(f"Record for {target} is not encodable: {e}") from e

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except (OSError, ValueError) as e:
            raise RecordWriteError(f"Failed to write {target}: {e}") from e

        self._written.add(target)
        logging.debug(f"Wrote sidecar {target}")
        return target


class StdoutWriter:
    """One compact JSON document per line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def write(self, record: NormalizedRecord, source_path: Path):
        try:
            self.stream.write(record.to_json() + "\n")
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise RecordWriteError(f"Failed to print record for {source_path}: {e}") from e


class CatalogWriter:
    """
    Upserts records into a SQLite catalog, keyed on the resolved source path.
    Use as a context manager so the connection is committed and closed.
    """

    def __init__(self, db_path: Path):
        self.db_manager = DBManager(db_path)
        self._ops: Optional[DBOperations] = None

    def __enter__(self):
        self._ops = DBOperations(self.db_manager.connect())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._ops = None
        self.db_manager.close()

    def write(self, record: NormalizedRecord, source_path: Path):
        if self._ops is None:
            raise RecordWriteError("Catalog is not open")
        try:
            self._ops.upsert_record(record, Path(source_path).resolve())
        except (sqlite3.Error, ValueError) as e:
            raise RecordWriteError(f"Catalog write failed for {source_path}: {e}") from e
