import hashlib
from pathlib import Path

from .. import config
from ..exceptions import FileHashError


class FileHasher:
    def compute_hash(self, path: Path) -> str:
        """
        Full-content SHA-256 of ``path``.

        Every byte is read, so two files share a hash only when their content
        is identical. I/O problems surface as FileHashError; a file that cannot
        be hashed is never classified as a duplicate.
        """
        h = hashlib.sha256()
        try:
            with open(path, 'rb') as f:
                while chunk := f.read(config.HASH_CHUNK_SIZE):
                    h.update(chunk)
        except OSError as e:
            raise FileHashError(f"Could not hash {path}: {e}") from e
        return h.hexdigest()
