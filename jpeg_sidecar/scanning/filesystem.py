import os
import logging
from datetime import datetime, UTC
from pathlib import Path
from typing import Union, Optional

from .. import config
from ..exceptions import MetadataUnavailable
from ..models import FilesystemAttributes


def read_fs_attributes(path: Union[str, Path],
                       ctime_fallback: Optional[bool] = None) -> FilesystemAttributes:
    """
    Size plus created/modified timestamps for a file, as UTC instants.

    Raises MetadataUnavailable if the stat call is refused or a timestamp
    is not supported by the store.
    """
    try:
        st = os.stat(path)
    except OSError as e:
        raise MetadataUnavailable(f"stat failed for {path}: {e}") from e
    return attributes_from_stat(st, ctime_fallback)


def attributes_from_stat(st, ctime_fallback: Optional[bool] = None) -> FilesystemAttributes:
    """Pure conversion of an os.stat() result."""
    if ctime_fallback is None:
        ctime_fallback = config.CREATED_TIME_FALLBACK_TO_CTIME

    # st_birthtime: macOS/BSD always, Windows on 3.12+, Linux never
    created_ts = getattr(st, "st_birthtime", None)
    if created_ts is None:
        if not ctime_fallback:
            raise MetadataUnavailable("Creation time is not supported by this filesystem")
        logging.debug("No birth time reported; using st_ctime as created time")
        created_ts = st.st_ctime

    return FilesystemAttributes(
        size_bytes=int(st.st_size),
        created_time=_to_utc(created_ts, "created"),
        modified_time=_to_utc(st.st_mtime, "modified"),
    )


def _to_utc(ts: float, label: str) -> datetime:
    try:
        return datetime.fromtimestamp(ts, UTC)
    except (OverflowError, OSError, ValueError) as e:
        raise MetadataUnavailable(f"Unsupported {label} timestamp {ts!r}: {e}") from e
