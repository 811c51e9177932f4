from collections import defaultdict
from datetime import datetime
from pathlib import Path

from .. import config
from ..models import CandidateFile, Placement


def format_timestamp(dt: datetime) -> str:
    """``yyyy-MM-dd HH꞉mm꞉ss`` with a filesystem-safe colon."""
    return dt.strftime(config.DEST_NAME_FORMAT.format(sep=config.COLON_SUBSTITUTE))


class DestinationPlanner:
    def __init__(self, organized_dir: Path, thumbnail_dir: Path,
                 thumbnail_max_dimension: int = config.THUMBNAIL_MAX_DIMENSION):
        self.organized_dir = organized_dir
        self.thumbnail_dir = thumbnail_dir
        self.thumbnail_max_dimension = thumbnail_max_dimension
        # Names claimed earlier in this run. Dry runs never create the files,
        # so the disk alone cannot tell us which names are taken.
        self.used_names = defaultdict(set)

    def is_thumbnail(self, width: int, height: int) -> bool:
        return width < self.thumbnail_max_dimension and height < self.thumbnail_max_dimension

    def target_folder(self, width: int, height: int) -> Path:
        return self.thumbnail_dir if self.is_thumbnail(width, height) else self.organized_dir

    def plan(self, candidate: CandidateFile, timestamp: datetime, width: int, height: int) -> Placement:
        """
        Picks the final path for a unique image and claims it for this run.
        """
        thumb = self.is_thumbnail(width, height)
        folder = self.thumbnail_dir if thumb else self.organized_dir
        dest = self._resolve_collision(folder, format_timestamp(timestamp), candidate.path.suffix,
                                       candidate.path)
        return Placement(source=candidate.path, destination=dest, is_thumbnail=thumb)

    def _resolve_collision(self, folder: Path, stem: str, ext: str, source: Path) -> Path:
        """Probes 'stem', 'stem (1)', 'stem (2)', ... until a free name turns up."""
        candidate = f"{stem}{ext}"
        counter = 1
        while not self._is_free(folder, candidate, source):
            candidate = f"{stem} ({counter}){ext}"
            counter += 1

        self.used_names[folder].add(candidate)
        return folder / candidate

    def _is_free(self, folder: Path, name: str, source: Path) -> bool:
        if name in self.used_names[folder]:
            return False
        path = folder / name
        if path == source:
            return True
        return not path.exists()

    def release(self, dest: Path):
        """Gives a claimed name back, e.g. when the move did not happen."""
        self.used_names[dest.parent].discard(dest.name)
