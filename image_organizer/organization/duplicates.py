from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from ..models import Detection, Signature
from ..scanning.hasher import FileHasher


class SignatureTable:
    """
    Signatures accepted so far in one run, mapped to where their file went.

    Lives for exactly one run and is never persisted.
    """

    def __init__(self):
        self._seen: Dict[Signature, Path] = {}

    def lookup(self, signature: Signature) -> Optional[Path]:
        return self._seen.get(signature)

    def register(self, signature: Signature, destination: Path):
        # First seen wins
        self._seen.setdefault(signature, destination)

    def __contains__(self, signature) -> bool:
        return signature in self._seen

    def __len__(self) -> int:
        return len(self._seen)


class DuplicateDetector:
    def __init__(self, table: SignatureTable, hasher: Optional[FileHasher] = None):
        self.table = table
        self.hasher = hasher or FileHasher()

    def detect(self, path: Path, timestamp: datetime) -> Detection:
        """
        Builds the (timestamp, content hash) signature for ``path``.

        ``duplicate_of`` is set when an earlier file in this run already holds
        the signature. FileHashError propagates to the caller.
        """
        signature = (timestamp, self.hasher.compute_hash(path))
        return Detection(signature=signature, duplicate_of=self.table.lookup(signature))

    def register(self, signature: Signature, destination: Path):
        self.table.register(signature, destination)
