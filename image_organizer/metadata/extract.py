from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import exifread
import pytz
from PIL import Image

from .. import config
from ..exceptions import ImageLoadError
from ..models import ExtractedDate, ImageInfo

_EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)


class MetadataExtractor:
    """
    Reads what the pipeline needs from an image file.

    Strategies:
      - Dimensions: Pillow (also proves the file decodes at all).
      - Capture date: 'exifread' on the same open handle.
    """

    def read_image(self, path: Path) -> ImageInfo:
        """
        Decodes ``path`` and returns its size plus the raw DateTimeOriginal
        value (or None).

        Raises ImageLoadError if Pillow cannot decode the file. The handle is
        released on every exit path. An unreadable EXIF block is not fatal;
        it is noted in ``ImageInfo.warnings``.
        """
        with path.open('rb') as f:
            try:
                with Image.open(f) as im:
                    im.load()
                    width, height = im.size
            except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
                raise ImageLoadError(f"Cannot decode {path}: {e}") from e

            f.seek(0)
            warnings = []
            try:
                raw_date = self._read_date_tag(f)
            except Exception as e:
                # A broken EXIF block only costs us the metadata date
                raw_date = None
                warnings.append(f"{path}: EXIF unreadable ({e}); trying filename")

        return ImageInfo(width=width, height=height, metadata_date=raw_date, warnings=warnings)

    def _read_date_tag(self, fileobj):
        # details=False speeds up processing significantly
        tags = exifread.process_file(fileobj, details=False)

        tag = tags.get(config.DATE_TAG) if tags else None
        if tag is None:
            return None
        return getattr(tag, 'values', tag)


def parse_metadata_date(raw) -> Optional[datetime]:
    """
    Parses an EXIF date value of the form ``yyyy:MM:dd HH:mm:ss``.

    Bytes are decoded as ASCII and trailing NULs are dropped. Anything that
    does not fit the pattern yields None rather than an error.
    """
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        if not raw:
            return None
        raw = raw[0]
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode('ascii')
        except UnicodeDecodeError:
            return None

    text = str(raw).rstrip('\x00').strip()
    if not config.METADATA_DATE_RE.match(text):
        return None
    try:
        return datetime.strptime(text, config.METADATA_DATE_FORMAT)
    except ValueError:
        return None


def parse_filename_date(stem: str, tz=pytz.utc) -> Optional[datetime]:
    """
    Derives a timestamp from a filename stem.

    Patterns are tried in config.FILENAME_PATTERNS order and the first one
    that matches decides, even if its value turns out to be invalid.
    Unix times are taken as UTC and converted to ``tz``.
    """
    for kind, pattern, fmt in config.FILENAME_PATTERNS:
        m = pattern.search(stem)
        if not m:
            continue

        value = m.group(1)
        try:
            if fmt:
                return datetime.strptime(value, fmt)
            if kind == 'unix_seconds':
                utc_dt = _EPOCH + timedelta(seconds=int(value))
            else:
                utc_dt = _EPOCH + timedelta(milliseconds=int(value))
            return utc_dt.astimezone(tz).replace(tzinfo=None)
        except (ValueError, OverflowError):
            return None
    return None


def is_valid_date(dt: Optional[datetime]) -> bool:
    return dt is not None and config.MIN_YEAR <= dt.year <= config.MAX_YEAR


class DateExtractor:
    def __init__(self, tz=pytz.utc):
        self.tz = tz

    def extract(self, path: Path, info: ImageInfo) -> Optional[ExtractedDate]:
        """
        Metadata date first, then the filename. Returns None when neither
        yields a date within [MIN_YEAR, MAX_YEAR].
        """
        dt = parse_metadata_date(info.metadata_date)
        if is_valid_date(dt):
            return ExtractedDate(dt, 'metadata')

        if info.metadata_date is not None:
            info.warnings.append(f"{path}: unusable metadata date {info.metadata_date!r}; trying filename")

        dt = parse_filename_date(path.stem, self.tz)
        if is_valid_date(dt):
            return ExtractedDate(dt, 'filename')
        return None
