import csv
import logging
from pathlib import Path
from typing import Union

from .models import BatchOutcome, FileOutcome, FileStatus


def format_rejection_report(outcome: BatchOutcome) -> str:
    """The end-of-batch list of files that failed the JPEG signature check."""
    if not outcome.rejected:
        return ""
    lines = ["The following files are not valid JPEG images:"]
    lines.extend(f"  - {ident}" for ident in outcome.rejected)
    return "\n".join(lines)


def format_summary(outcome: BatchOutcome) -> str:
    return (
        f"{len(outcome.processed)} processed, {len(outcome.rejected)} rejected, "
        f"{len(outcome.errors)} failed, {len(outcome.skipped)} skipped"
    )


class ReportGenerator:
    HEADERS = ["Source Path", "Status", "Filename", "Notes"]

    def __init__(self, outcome: BatchOutcome):
        self.outcome = outcome

    def write_csv(self, output_csv: Union[str, Path]):
        """
        One row per input identifier, in input order.
        """
        logging.info(f"Writing batch report -> {output_csv}")

        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(self.HEADERS)
            for item in self.outcome.outcomes:
                writer.writerow(self._row(item))

        logging.info(f"Report complete. {len(self.outcome.outcomes)} rows.")

    def _row(self, item: FileOutcome) -> list:
        if item.status is FileStatus.ACCEPTED and item.record is not None:
            return [item.identifier, "Accepted", item.record.filename, ""]
        if item.status is FileStatus.REJECTED:
            return [item.identifier, "Rejected", "", "Not a JPEG image"]
        if item.status is FileStatus.ERROR:
            return [item.identifier, "Error", "", item.error or ""]
        return [item.identifier, "Skipped", "", "File not found"]
