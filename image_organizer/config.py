"""
Configuration constants and run settings for the image organizer.
"""
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

import pytz

from .exceptions import ConfigurationError

# --- File Type Definitions ---
IMAGE_EXTS = {'.jpg', '.jpeg', '.png', '.gif', '.bmp', '.tiff'}

# --- Metadata Parsing ---
DATE_TAG = 'EXIF DateTimeOriginal'
METADATA_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"
METADATA_DATE_RE = re.compile(r'^\d{4}:\d{2}:\d{2} \d{2}:\d{2}:\d{2}$', re.ASCII)

# Filename fallbacks, tried in this order. The first syntactic match decides.
# ASCII digits only; int() would happily accept other Unicode digits.
FILENAME_PATTERNS = [
    ('datetime_underscore', re.compile(r'(?<!\d)(\d{8}_\d{6})(?!\d)', re.ASCII), "%Y%m%d_%H%M%S"),
    ('datetime_compact', re.compile(r'(?<!\d)(\d{14})(?!\d)', re.ASCII), "%Y%m%d%H%M%S"),
    ('unix_seconds', re.compile(r'^(\d{10})$', re.ASCII), None),
    ('unix_millis', re.compile(r'^(\d{13})$', re.ASCII), None),
]

MIN_YEAR = 1900
MAX_YEAR = 2200

# --- Hashing ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- Organization ---
# U+A789 MODIFIER LETTER COLON; ':' is illegal on some filesystems
COLON_SUBSTITUTE = '꞉'
DEST_NAME_FORMAT = "%Y-%m-%d %H{sep}%M{sep}%S"
THUMBNAIL_MAX_DIMENSION = 600

DEFAULT_ORGANIZED_FOLDER = "Organized Photos"
DEFAULT_THUMBNAIL_FOLDER = "Thumbnails"
DEFAULT_LOG_FILE = "organizer.log"
DEFAULT_TIMEZONE = "UTC"


@dataclass
class OrganizerSettings:
    """
    Everything a single organizer run needs to know.

    Relative folder and log paths are resolved under ``root``.
    """
    root: Path = field(default_factory=lambda: Path(os.getcwd()))
    organized_folder: str = DEFAULT_ORGANIZED_FOLDER
    thumbnail_folder: str = DEFAULT_THUMBNAIL_FOLDER
    log_file: Path = Path(DEFAULT_LOG_FILE)
    append_log: bool = True
    timezone: str = DEFAULT_TIMEZONE
    dry_run: bool = False
    confirm: bool = False
    thumbnail_max_dimension: int = THUMBNAIL_MAX_DIMENSION

    @property
    def organized_dir(self) -> Path:
        return self.root / self.organized_folder

    @property
    def thumbnail_dir(self) -> Path:
        return self.root / self.thumbnail_folder

    @property
    def log_path(self) -> Path:
        return Path(self.log_file) if Path(self.log_file).is_absolute() else self.root / self.log_file

    def resolve_timezone(self):
        """Returns the pytz zone for ``timezone`` or raises ConfigurationError."""
        try:
            return pytz.timezone(self.timezone)
        except pytz.UnknownTimeZoneError as e:
            raise ConfigurationError(f"Unknown time zone: {self.timezone!r}") from e

    def validate(self):
        if not self.root.is_dir():
            raise ConfigurationError(f"Root directory {self.root} does not exist.")
        if self.organized_folder == self.thumbnail_folder:
            raise ConfigurationError("Organized and thumbnail folders must differ.")
        if self.thumbnail_max_dimension <= 0:
            raise ConfigurationError("Thumbnail size must be positive.")
        self.resolve_timezone()
