from typing import BinaryIO

from .. import config
from ..exceptions import TruncatedFileError


def is_container(stream: BinaryIO) -> bool:
    """
    Checks the JPEG start-of-image marker (FF D8).

    Reads exactly the first two bytes and nothing more. A stream shorter
    than the marker is invalid input rather than "not a JPEG", so it raises
    TruncatedFileError (an OSError) instead of returning False.
    """
    magic_len = len(config.JPEG_MAGIC)
    head = stream.read(magic_len)
    if len(head) < magic_len:
        raise TruncatedFileError(
            f"Expected {magic_len} signature bytes, got {len(head)}"
        )
    return head == config.JPEG_MAGIC

