import logging
from datetime import datetime, UTC
from typing import BinaryIO, Optional, Dict, Any

import exifread

from .. import config
from ..exceptions import ContainerParseError
from ..models import EmbeddedMetadata


class MetadataExtractor:
    """
    Pulls the four modeled EXIF fields out of a JPEG stream.

    Uses 'exifread' for the tag directory walk. Only a missing or
    unparseable EXIF segment is an error; each individual tag that is
    missing or ill-typed just comes back as None.
    """

    def read_embedded_tags(self, stream: BinaryIO) -> EmbeddedMetadata:
        tags = self._process_tags(stream)

        return EmbeddedMetadata(
            orientation=self._parse_orientation(tags.get(config.ORIENTATION_TAG)),
            capture_time=self._parse_exif_date(tags.get(config.CAPTURE_TIME_TAG)),
            camera_model=self._display_text(tags.get(config.CAMERA_MODEL_TAG)),
            camera_serial=self._display_text(tags.get(config.CAMERA_SERIAL_TAG)),
        )

    def _process_tags(self, stream: BinaryIO) -> Dict[str, Any]:
        stream.seek(0)
        try:
            # details=False skips MakerNotes and thumbnails
            tags = exifread.process_file(stream, details=False)
        except Exception as e:
            raise ContainerParseError(f"EXIF directory could not be parsed: {e}") from e

        if not tags:
            raise ContainerParseError("No EXIF segment found")
        return tags

    # --- Per-tag decoding ---

    def _parse_orientation(self, tag) -> Optional[int]:
        """First value component as an unsigned int; anything else is None."""
        if tag is None:
            return None

        values = getattr(tag, "values", None)
        if not isinstance(values, (list, tuple)) or not values:
            return None

        value = values[0]
        # bool is an int subclass; Ratio is a Fraction, not an int
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return None

        if value not in config.ORIENTATIONS:
            logging.debug(f"Non-standard orientation value {value}")
        return value

    def _parse_exif_date(self, tag) -> Optional[datetime]:
        """
        Parses "YYYY:MM:DD HH:MM:SS" as UTC (no timezone conversion).
        Cameras write all sorts of junk here, so a mismatch is None, not an error.
        """
        if tag is None:
            return None

        dt_str = str(tag).strip()
        if not config.EXIF_DATE_PATTERN.fullmatch(dt_str):
            logging.debug(f"Unparseable EXIF date: {dt_str!r}")
            return None
        try:
            return datetime.strptime(dt_str, config.EXIF_DATE_FORMAT).replace(tzinfo=UTC)
        except ValueError:
            logging.debug(f"Unparseable EXIF date: {dt_str!r}")
            return None

    def _display_text(self, tag) -> Optional[str]:
        # Kept verbatim, including any quoting the display form carries
        if tag is None:
            return None
        return str(tag)
