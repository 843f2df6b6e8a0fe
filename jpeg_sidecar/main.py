import argparse
import contextlib
import logging
import sys
from pathlib import Path
from typing import Optional, List

from . import config
from .core import BatchProcessor
from .output.sinks import SidecarWriter, StdoutWriter, CatalogWriter
from .reporting import ReportGenerator, format_rejection_report, format_summary

def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Logs to stderr (stdout may carry records) and optionally a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)

def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description="Validate JPEG files and write their metadata as JSON sidecars")

    p.add_argument("files", nargs="+", type=Path, help="JPEG image files to process")

    out = p.add_mutually_exclusive_group()
    out.add_argument("--output-dir", type=Path, default=None, help="Write sidecars here instead of next to each image")
    out.add_argument("--stdout", action="store_true", help="Print records as JSON lines instead of writing sidecars")
    out.add_argument("--catalog", type=Path, default=None, help="Store records in a SQLite catalog")

    p.add_argument("--workers", type=int, default=config.DEFAULT_MAX_WORKERS, help="Parallel extraction workers (default: sequential)")
    p.add_argument("--report-csv", type=Path, default=None, help="Write a per-file status report CSV")
    p.add_argument("--progress", action="store_true", help="Show a progress bar")
    p.add_argument("--log-file", type=Path, default=None, help="Also log to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)

def open_sink(args, stack: contextlib.ExitStack):
    if args.stdout:
        return StdoutWriter()
    if args.catalog:
        return stack.enter_context(CatalogWriter(args.catalog))
    return SidecarWriter(args.output_dir)

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    processor = BatchProcessor(max_workers=args.workers, progress=args.progress)

    try:
        with contextlib.ExitStack() as stack:
            sink = open_sink(args, stack)
            outcome = processor.process(args.files, sink)
    except Exception:
        logging.exception("Fatal error opening or closing the output sink.")
        return 1

    rejection_report = format_rejection_report(outcome)
    if rejection_report:
        print(f"\n{rejection_report}", file=sys.stderr)

    logging.info(format_summary(outcome))

    if args.report_csv:
        try:
            ReportGenerator(outcome).write_csv(args.report_csv)
        except OSError:
            logging.exception("Failed to write the batch report.")
            return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
