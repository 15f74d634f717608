"""
Destination naming in the Dropbox Camera Uploads style.

Files land in ``<root>/<year>/YYYY-MM-DD HH.MM.SS.ext``. When that name is
taken a counter is appended straight after the seconds, so the second copy
of ``2024-01-01 10.00.00.jpg`` becomes ``2024-01-01 10.00.001.jpg``.
"""

import logging
from pathlib import Path
from typing import Optional

from camera_uploads.exif_datetime import DateTime

logger = logging.getLogger(__name__)


def file_extension(file_path: Path) -> Optional[str]:
    """Text after the last dot of the file name, or None.

    A name whose only dot is the leading one (``.bashrc``) has no extension.
    """
    stem, dot, ext = Path(file_path).name.rpartition('.')
    if not dot or not stem:
        return None
    return ext


def format_filename(dt: DateTime, extension: Optional[str], counter: int = 0) -> str:
    name = (f"{dt.year:04}-{dt.month:02}-{dt.day:02} "
            f"{dt.hour:02}.{dt.minute:02}.{dt.second:02}")
    if counter > 0:
        name += str(counter)
    if extension is not None:
        name += '.' + extension
    return name


class DestinationNamer:
    """Picks a destination path that does not exist yet.

    The destination tree is checked on every call and never cached, so
    another writer creating the same name between the check and the copy
    is not detected.
    """

    def __init__(self, destination_root: Path, create_dirs: bool = True):
        self.destination_root = Path(destination_root)
        self.create_dirs = create_dirs

    def year_dir(self, dt: DateTime) -> Path:
        year_dir = self.destination_root / str(dt.year)
        if self.create_dirs and not year_dir.exists():
            logger.debug(f"Creating year directory {year_dir}")
            year_dir.mkdir(parents=True, exist_ok=True)
        return year_dir

    def resolve(self, dt: DateTime, extension: Optional[str]) -> Path:
        year_dir = self.year_dir(dt)

        candidate = year_dir / format_filename(dt, extension)
        counter = 1
        while candidate.exists():
            candidate = year_dir / format_filename(dt, extension, counter)
            counter += 1

        if counter > 1:
            logger.info(f"Name collision, using {candidate.name}")
        return candidate
