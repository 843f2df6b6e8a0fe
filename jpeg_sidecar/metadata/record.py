import os
from pathlib import Path
from typing import Union

from ..exceptions import InvalidFilename
from ..models import FilesystemAttributes, EmbeddedMetadata, NormalizedRecord


def base_name(identifier: Union[str, Path]) -> str:
    """
    Base name of the identifier as given.
    Works on the raw text so "photos/" stays distinguishable from "photos".
    """
    name = os.path.basename(os.fspath(identifier))
    if name in ("", ".", ".."):
        raise InvalidFilename(f"No file name in {identifier!r}")
    return name


def build_record(identifier: Union[str, Path],
                 fs: FilesystemAttributes,
                 embedded: EmbeddedMetadata) -> NormalizedRecord:
    """Combines the filesystem and EXIF halves into the output record."""
    return NormalizedRecord(
        filename=base_name(identifier),
        size_bytes=fs.size_bytes,
        created_time=fs.created_time,
        modified_time=fs.modified_time,
        orientation=embedded.orientation,
        capture_time=embedded.capture_time,
        camera_model=embedded.camera_model,
        camera_serial=embedded.camera_serial,
    )
