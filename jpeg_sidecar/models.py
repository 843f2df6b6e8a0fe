import json
from dataclasses import dataclass
from datetime import datetime, UTC
from enum import Enum
from typing import Optional, Tuple, Dict, Any, List


def format_instant(dt: datetime) -> str:
    """ISO-8601 in UTC with a 'Z' suffix, e.g. 2020-08-13T10:57:07Z."""
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def parse_instant(value: str) -> datetime:
    return datetime.fromisoformat(value).astimezone(UTC)


@dataclass(frozen=True)
class FilesystemAttributes:
    """
    Snapshot of what the file store reports for a file.
    Taken once at extraction time, never re-queried.
    """
    size_bytes: int
    created_time: datetime
    modified_time: datetime


@dataclass(frozen=True)
class EmbeddedMetadata:
    """
    The four EXIF fields we model. Each one is independently optional.
    Text fields keep exifread's display form as-is (not trimmed).
    """
    orientation: Optional[int] = None
    capture_time: Optional[datetime] = None
    camera_model: Optional[str] = None
    camera_serial: Optional[str] = None


@dataclass(frozen=True)
class NormalizedRecord:
    """
    The sidecar document for one accepted JPEG.
    """
    filename: str
    size_bytes: int
    created_time: datetime
    modified_time: datetime

    orientation: Optional[int] = None
    capture_time: Optional[datetime] = None
    camera_model: Optional[str] = None
    camera_serial: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Absent optional fields are left out entirely, never emitted as null."""
        data: Dict[str, Any] = {
            "filename": self.filename,
            "size": self.size_bytes,
            "created_time": format_instant(self.created_time),
            "modified_time": format_instant(self.modified_time),
        }
        if self.orientation is not None:
            data["orientation"] = self.orientation
        if self.capture_time is not None:
            data["capture_time"] = format_instant(self.capture_time)
        if self.camera_model is not None:
            data["camera_model"] = self.camera_model
        if self.camera_serial is not None:
            data["camera_serial"] = self.camera_serial
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NormalizedRecord":
        capture = data.get("capture_time")
        return cls(
            filename=data["filename"],
            size_bytes=int(data["size"]),
            created_time=parse_instant(data["created_time"]),
            modified_time=parse_instant(data["modified_time"]),
            orientation=data.get("orientation"),
            capture_time=parse_instant(capture) if capture is not None else None,
            camera_model=data.get("camera_model"),
            camera_serial=data.get("camera_serial"),
        )

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "NormalizedRecord":
        return cls.from_dict(json.loads(text))


class FileStatus(Enum):
    ACCEPTED = "accepted"   # record built (and persisted, if a sink was given)
    REJECTED = "rejected"   # failed the signature check
    ERROR = "error"         # passed the signature check, extraction/persist failed
    SKIPPED = "skipped"     # entry did not exist


@dataclass(frozen=True)
class FileOutcome:
    """
    Result of processing one identifier. Exactly one of record/error is set
    for ACCEPTED/ERROR; neither for REJECTED/SKIPPED.
    """
    identifier: str
    status: FileStatus
    record: Optional[NormalizedRecord] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class BatchOutcome:
    """
    Per-file outcomes of a batch, in input order.
    """
    outcomes: Tuple[FileOutcome, ...] = ()

    def _with_status(self, status: FileStatus) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def processed(self) -> List[str]:
        return [o.identifier for o in self._with_status(FileStatus.ACCEPTED)]

    @property
    def rejected(self) -> List[str]:
        return [o.identifier for o in self._with_status(FileStatus.REJECTED)]

    @property
    def skipped(self) -> List[str]:
        return [o.identifier for o in self._with_status(FileStatus.SKIPPED)]

    @property
    def errors(self) -> List[Tuple[str, str]]:
        return [(o.identifier, o.error or "") for o in self._with_status(FileStatus.ERROR)]

    @property
    def records(self) -> List[NormalizedRecord]:
        return [o.record for o in self.outcomes if o.record is not None]
