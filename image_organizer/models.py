from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class Action(str, Enum):
    PROCESSED = "PROCESSED"
    MOVED = "MOVED"
    DELETED = "DELETED"
    SKIPPED = "SKIPPED"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class CandidateFile:
    """
    An image found during a scan.
    """
    path: Path
    ext: str
    size_bytes: int

    @property
    def stem(self) -> str:
        return self.path.stem


@dataclass
class ImageInfo:
    width: int
    height: int
    metadata_date: Optional[object] = None   # raw tag value (str/bytes) as stored
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExtractedDate:
    timestamp: datetime
    source: str              # metadata/filename


# (timestamp, content hash)
Signature = Tuple[datetime, str]


@dataclass
class Detection:
    signature: Signature
    duplicate_of: Optional[Path] = None

    @property
    def is_duplicate(self) -> bool:
        return self.duplicate_of is not None


@dataclass(frozen=True)
class Placement:
    source: Path
    destination: Path
    is_thumbnail: bool

    @property
    def in_place(self) -> bool:
        return self.source == self.destination


@dataclass
class Decision:
    """
    What the pipeline decided for one file. Identical in dry-run and live runs.
    """
    path: Path
    action: Action
    destination: Optional[Path] = None
    timestamp: Optional[datetime] = None
    date_source: Optional[str] = None
    reason: str = ""
