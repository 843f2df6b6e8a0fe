import os
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union
from concurrent.futures import ThreadPoolExecutor

from tqdm import tqdm

from . import config
from .exceptions import JpegSidecarError, RecordWriteError
from .metadata.extract import MetadataExtractor
from .metadata.record import build_record
from .models import BatchOutcome, FileOutcome, FileStatus
from .scanning.filesystem import read_fs_attributes
from .scanning.signature import is_container


class BatchProcessor:
    """
    Runs every identifier through signature check -> extraction -> sink.

    Each file ends in exactly one FileOutcome. Failures are contained to
    the file they happened on; the batch always runs to the end.
    """

    def __init__(self,
                 max_workers: int = config.DEFAULT_MAX_WORKERS,
                 progress: bool = False,
                 ctime_fallback: Optional[bool] = None):
        self.max_workers = max_workers
        self.progress = progress
        self.ctime_fallback = ctime_fallback
        self.metadata = MetadataExtractor()

    def process(self,
                identifiers: Iterable[Union[str, Path]],
                sink=None) -> BatchOutcome:
        """
        Processes identifiers in order and returns their outcomes in that order.

        Args:
            sink: Optional object with write(record, source_path). Called on
                  this thread, in input order, for every accepted file.
        """
        identifiers = list(identifiers)

        if self.max_workers <= 1:
            outcomes = self._process_sequential(identifiers, sink)
        else:
            outcomes = self._process_parallel(identifiers, sink)

        batch = BatchOutcome(tuple(outcomes))
        logging.info(
            f"Batch complete: {len(batch.processed)} accepted, {len(batch.rejected)} rejected, "
            f"{len(batch.errors)} errors, {len(batch.skipped)} skipped."
        )
        return batch

    def _process_sequential(self, identifiers: List[Union[str, Path]], sink) -> List[FileOutcome]:
        outcomes = []
        for ident in tqdm(identifiers, desc="Extracting", disable=not self.progress):
            outcomes.append(self._persist(self._process_single_file(ident), ident, sink))
        return outcomes

    def _process_parallel(self, identifiers: List[Union[str, Path]], sink) -> List[FileOutcome]:
        """
        Extraction runs on a thread pool; results are collected in input
        order so every report matches the sequential run.
        """
        logging.info(f"Parallel extraction: {len(identifiers)} files, {self.max_workers} workers")

        outcomes = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self._process_single_file, ident) for ident in identifiers]

            for ident, future in tqdm(zip(identifiers, futures), total=len(futures),
                                      desc="Extracting", disable=not self.progress):
                outcomes.append(self._persist(future.result(), ident, sink))
        return outcomes

    def _process_single_file(self, ident: Union[str, Path]) -> FileOutcome:
        """Never raises: every failure becomes an ERROR outcome for this file."""
        name = os.fspath(ident)
        path = Path(name)

        try:
            # Existence is a precondition, not a validation result.
            # lstat so a dangling symlink counts as present (and fails on open).
            try:
                os.lstat(name)
            except (FileNotFoundError, NotADirectoryError):
                logging.debug(f"Skipping missing file: {name}")
                return FileOutcome(name, FileStatus.SKIPPED)

            with path.open('rb') as f:
                if not is_container(f):
                    logging.debug(f"Not a JPEG: {name}")
                    return FileOutcome(name, FileStatus.REJECTED)

                fs_attrs = read_fs_attributes(path, self.ctime_fallback)
                embedded = self.metadata.read_embedded_tags(f)

            record = build_record(ident, fs_attrs, embedded)

        except (JpegSidecarError, OSError) as e:
            return self._error(name, e)
        except Exception as e:
            logging.exception(f"Unexpected failure extracting {name}")
            return FileOutcome(name, FileStatus.ERROR, error=f"{type(e).__name__}: {e}")

        return FileOutcome(name, FileStatus.ACCEPTED, record=record)

    def _persist(self, outcome: FileOutcome, ident: Union[str, Path], sink) -> FileOutcome:
        if sink is None or outcome.status is not FileStatus.ACCEPTED:
            return outcome

        try:
            sink.write(outcome.record, Path(os.fspath(ident)))
        except (RecordWriteError, OSError) as e:
            return self._error(outcome.identifier, e)
        except Exception as e:
            logging.exception(f"Unexpected failure persisting {outcome.identifier}")
            return FileOutcome(outcome.identifier, FileStatus.ERROR, error=f"{type(e).__name__}: {e}")
        return outcome

    def _error(self, name: str, e: Exception) -> FileOutcome:
        message = f"{type(e).__name__}: {e}"
        logging.error(f"Failed to process {name}: {message}")
        return FileOutcome(name, FileStatus.ERROR, error=message)
