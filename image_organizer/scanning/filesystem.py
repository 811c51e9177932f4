import os
import logging
from pathlib import Path
from typing import Iterable, Iterator, Set

from .. import config
from ..models import CandidateFile


class ImageScanner:
    def __init__(self, exclude_dirs: Iterable[Path] = ()):
        # Output folders; anything below them is already organized
        self.exclude_dirs: Set[Path] = {Path(d) for d in exclude_dirs}

    def scan(self, root: Path) -> Iterator[CandidateFile]:
        """
        Generator that yields a CandidateFile for every image under root.

        Order is deterministic for a given tree, which keeps duplicate
        "first seen wins" decisions stable between runs.
        """
        for path in self._iter_files(root):
            ext = path.suffix.lower()
            if ext not in config.IMAGE_EXTS:
                continue
            try:
                size_bytes = path.stat().st_size
            except OSError as e:
                logging.warning(f"Cannot stat {path}: {e}")
                continue
            yield CandidateFile(path=path, ext=ext, size_bytes=size_bytes)

    def _is_excluded(self, directory: Path) -> bool:
        return any(ex == directory or ex in directory.parents for ex in self.exclude_dirs)

    def _iter_files(self, root: Path) -> Iterator[Path]:
        """
        Pre-order walk: a folder's files, then each subfolder in name order
        (case-insensitive). Symlinks are neither followed nor yielded.
        """
        if self._is_excluded(root):
            return

        def on_error(err: OSError):
            logging.warning(f"Cannot read {err.filename}: {err.strerror}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            here = Path(dirpath)
            # Pruning and sorting in place steers os.walk
            dirnames[:] = sorted(
                (d for d in dirnames
                 if not os.path.islink(os.path.join(dirpath, d)) and not self._is_excluded(here / d)),
                key=str.lower,
            )
            for name in sorted(filenames, key=str.lower):
                path = here / name
                if not path.is_symlink():
                    yield path
