import shutil
import logging
from pathlib import Path

from ..exceptions import FileOperationError


class FileMover:
    """
    Applies placement decisions to disk. With dry_run set nothing is touched.
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def move(self, src: Path, dest: Path):
        if self.dry_run:
            logging.debug(f"[DRY RUN] Move {src} -> {dest}")
            return
        if src == dest:
            return
        if dest.exists():
            raise FileOperationError(f"Refusing to overwrite {dest}")

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(src), str(dest))
        except OSError as e:
            raise FileOperationError(f"Failed to move {src} -> {dest}: {e}") from e

    def delete(self, path: Path):
        if self.dry_run:
            logging.debug(f"[DRY RUN] Delete {path}")
            return
        try:
            path.unlink()
        except OSError as e:
            raise FileOperationError(f"Failed to delete {path}: {e}") from e

    def ensure_dirs(self, *dirs: Path):
        if self.dry_run:
            return
        for d in dirs:
            d.mkdir(parents=True, exist_ok=True)
