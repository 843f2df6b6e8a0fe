"""
Custom exception hierarchy for the JPEG sidecar extractor.

Every per-file failure maps onto one of these so the batch processor can
report it against the file and carry on with the rest of the batch.
"""


class JpegSidecarError(Exception):
    """Base exception for all JPEG sidecar errors."""
    pass


class TruncatedFileError(JpegSidecarError, OSError):
    """Raised when a file is too short to hold the JPEG signature."""
    pass


class MetadataUnavailable(JpegSidecarError):
    """Raised when filesystem attributes cannot be read for a file."""
    pass


class ContainerParseError(JpegSidecarError):
    """Raised when the EXIF segment is missing or cannot be parsed at all."""
    pass


class InvalidFilename(JpegSidecarError):
    """Raised when an identifier has no usable base name."""
    pass


class RecordWriteError(JpegSidecarError):
    """Raised when an output sink fails to persist a record."""
    pass
