#!/usr/bin/env python3
"""
Example usage of the camera uploads copier.
This demonstrates how to use the CameraUploadsCopier class programmatically.
"""

import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

from PIL import Image
from PIL.ExifTags import Base

from camera_uploads.copy_photos import CameraUploadsCopier


def create_sample_files():
    """Create a few sample photos, some with EXIF dates and some without."""
    temp_dir = Path(tempfile.mkdtemp())
    source_dir = temp_dir / "phone_dump"

    exif_photos = [
        ("DCIM/IMG_0001.jpg", "2021:06:15 08:30:00"),
        ("DCIM/IMG_0002.jpg", "2021:06:15 08:30:00"),  # Same second, gets a counter
        ("old/scan.tif", "1998:12:24 19:00:00"),
    ]
    for file_path, date_time_original in exif_photos:
        full_path = source_dir / file_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        exif = Image.Exif()
        exif[Base.DateTimeOriginal] = date_time_original
        Image.new('RGB', (16, 16)).save(full_path, exif=exif)

    mtime_files = [
        ("screenshots/shot.png", datetime(2020, 1, 1, 0, 0, 0)),
        ("notes/README", datetime(2019, 3, 4, 5, 6, 7)),
    ]
    for file_path, mtime in mtime_files:
        full_path = source_dir / file_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_bytes(b"not really an image")
        os.utime(full_path, (mtime.timestamp(), mtime.timestamp()))

    return temp_dir, source_dir


def main():
    """Demonstrate the copier."""
    print("Camera Uploads Copier Example")
    print("=" * 50)

    temp_dir, source_dir = create_sample_files()
    target_dir = temp_dir / "Camera Uploads"

    print(f"Source directory: {source_dir}")
    print(f"Target directory: {target_dir}")
    print()

    print("Running in DRY-RUN mode...")
    CameraUploadsCopier(str(source_dir), str(target_dir), dry_run=True).copy_all()

    print("\nCopying for real...")
    stats = CameraUploadsCopier(str(source_dir), str(target_dir)).copy_all()

    print("\nFiles in target directory:")
    for file_path in sorted(target_dir.rglob('*')):
        if file_path.is_file():
            print(f"  {file_path.relative_to(target_dir)}")

    print(f"\nResults:")
    print(f"  Files processed: {stats['processed']}")
    print(f"  Files copied: {stats['copied']}")
    print(f"  Errors: {stats['errors']}")

    shutil.rmtree(temp_dir)
    print(f"\nDemo completed. Temporary files cleaned up.")


if __name__ == "__main__":
    main()
