#!/usr/bin/env python3
"""
EXIF date extraction

Reads the DateTimeOriginal tag out of JPEG and TIFF files and falls back
to the filesystem modification time when the tag is missing, malformed,
or the file type carries no EXIF block we know how to read.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

try:
    from PIL import Image
    from PIL.ExifTags import Base, IFD
except ImportError:
    print("Error: Pillow library not found. Please install with: pip install Pillow")
    exit(1)

from camera_uploads.errors import (
    BlankValueError,
    FilesystemUnreadable,
    MetadataMalformed,
    MetadataUnavailable,
)

logger = logging.getLogger(__name__)

U16_MAX = 0xFFFF

BLANK_SENTINELS = (b"    :  :     :  :  ", b" " * 19)


def parse_unsigned(field: bytes, max_value: int = U16_MAX) -> int:
    """Parse a fixed-width run of ASCII digits.

    Every byte must be a decimal digit and the running value must never
    exceed ``max_value``.
    """
    if not field:
        raise MetadataMalformed("empty numeric field")
    value = 0
    for byte in field:
        if not 0x30 <= byte <= 0x39:
            raise MetadataMalformed(f"non-digit byte {bytes([byte])!r} in {field!r}")
        value = value * 10 + (byte - 0x30)
        if value > max_value:
            raise MetadataMalformed(f"{field!r} overflows {max_value}")
    return value


@dataclass(frozen=True)
class DateTime:
    """Calendar date and wall-clock time as stored in EXIF.

    Fields are taken verbatim; no calendar validation is applied.
    """
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    @classmethod
    def from_ascii(cls, data: Union[bytes, str]) -> "DateTime":
        """Parse ``YYYY:MM:DD HH:MM:SS``. Anything after byte 19 is ignored."""
        if isinstance(data, str):
            try:
                data = data.encode('ascii')
            except UnicodeEncodeError as e:
                raise MetadataMalformed(f"non-ASCII DateTime {data!r}") from e

        if data in BLANK_SENTINELS:
            raise BlankValueError("DateTime is blank")
        if len(data) < 19:
            raise MetadataMalformed(f"DateTime too short: {data!r}")
        if not (data[4:5] == b':' and data[7:8] == b':' and data[10:11] == b' '
                and data[13:14] == b':' and data[16:17] == b':'):
            raise MetadataMalformed(f"invalid DateTime delimiter: {data!r}")

        return cls(
            year=parse_unsigned(data[0:4]),
            month=parse_unsigned(data[5:7]),
            day=parse_unsigned(data[8:10]),
            hour=parse_unsigned(data[11:13]),
            minute=parse_unsigned(data[14:16]),
            second=parse_unsigned(data[17:19]),
        )

    @classmethod
    def from_datetime(cls, value: datetime) -> "DateTime":
        return cls(value.year, value.month, value.day,
                   value.hour, value.minute, value.second)


class DateTimeExtractor:
    """Resolves a capture time for a file, EXIF first, mtime second."""

    SUPPORTED_EXTENSIONS = {'jpg', 'jpeg', 'tif', 'tiff'}

    def is_supported(self, file_extension: Optional[str]) -> bool:
        return file_extension is not None and file_extension.lower() in self.SUPPORTED_EXTENSIONS

    def read_exif_datetime(self, file_path: Path) -> DateTime:
        """Return DateTimeOriginal or raise MetadataUnavailable/MetadataMalformed."""
        try:
            with Image.open(file_path) as image:
                exif = image.getexif()
                value = exif.get_ifd(IFD.Exif).get(Base.DateTimeOriginal)
                if value is None:
                    value = exif.get(Base.DateTimeOriginal)
        except Exception as e:
            raise MetadataUnavailable(f"failed to read exif: {e}") from e

        if value is None:
            raise MetadataUnavailable("no DateTimeOriginal EXIF tag found")
        if not isinstance(value, str) or not value:
            raise MetadataMalformed(f"DateTimeOriginal EXIF tag has non-ASCII value: {value!r}")

        return DateTime.from_ascii(value)

    def ensure_readable(self, file_path: Path) -> None:
        """Raise FilesystemUnreadable unless the file can be opened for reading."""
        try:
            with open(file_path, 'rb'):
                pass
        except OSError as e:
            raise FilesystemUnreadable(f"failed to open file {file_path}: {e}") from e

    def mtime_datetime(self, file_path: Path) -> DateTime:
        """Local modification time of the file, without sub-second precision."""
        try:
            mtime = os.stat(file_path).st_mtime
            local = datetime.fromtimestamp(mtime)
        except (OSError, OverflowError, ValueError) as e:
            raise FilesystemUnreadable(f"cannot read modification time of {file_path}: {e}") from e
        return DateTime.from_datetime(local)

    def extract(self, file_path: Path, file_extension: Optional[str]) -> DateTime:
        """Capture time from EXIF when possible, otherwise from mtime."""
        return self.extract_with_source(file_path, file_extension)[0]

    def extract_with_source(self, file_path: Path, file_extension: Optional[str]) -> tuple[DateTime, str]:
        """Like ``extract`` but also report where the value came from ('exif' or 'mtime')."""
        if self.is_supported(file_extension):
            try:
                return self.read_exif_datetime(file_path), 'exif'
            except MetadataMalformed as e:
                logger.warning(f"{file_path}: Couldn't parse EXIF DateTime: {e}")
            except MetadataUnavailable as e:
                logger.warning(f"{file_path}: Couldn't get EXIF DateTime: {e}")
        else:
            logger.debug(f"{file_path}: no EXIF support for extension {file_extension!r}")

        return self.mtime_datetime(file_path), 'mtime'
