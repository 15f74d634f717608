#!/usr/bin/env python3
"""
Camera Uploads Copier

This script recursively copies every file from a source tree into a
destination tree, renaming each one the way Dropbox Camera Uploads would
(``YYYY-MM-DD HH.MM.SS.ext``) and splitting them up by year.

The date and time come from the EXIF DateTimeOriginal tag where possible
and from the file modification time otherwise. Source files are never
modified or removed.
"""

import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional
import argparse
import logging

from camera_uploads.errors import FilesystemUnreadable, TraversalError
from camera_uploads.exif_datetime import DateTime, DateTimeExtractor
from camera_uploads.naming import DestinationNamer, file_extension


@dataclass
class FileTask:
    """One source file on its way to the destination tree."""
    source: Path
    extension: Optional[str]
    datetime: DateTime
    destination: Optional[Path] = None


class CameraUploadsCopier:
    """Copies files into year buckets under Camera Uploads style names."""

    def __init__(self, source_dir: str, target_dir: str, dry_run: bool = False):
        self.source_dir = Path(source_dir).resolve()
        self.target_dir = Path(target_dir).resolve()
        self.dry_run = dry_run
        self.stats = {
            'processed': 0,
            'copied': 0,
            'from_exif': 0,
            'from_mtime': 0,
            'errors': 0
        }

        # Setup logging
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s'
        )
        self.logger = logging.getLogger(__name__)

        self.extractor = DateTimeExtractor()
        # A dry run must leave the destination untouched, year directories included
        self.namer = DestinationNamer(self.target_dir, create_dirs=not dry_run)

    def iter_source_files(self) -> Iterator[Path]:
        """Lazily yield every regular file below the source directory."""
        def on_error(error: OSError):
            raise TraversalError(f"failed to walk {error.filename}: {error}") from error

        for dirpath, dirnames, filenames in os.walk(self.source_dir, onerror=on_error):
            dirnames.sort()
            for filename in sorted(filenames):
                file_path = Path(dirpath) / filename
                if file_path.is_file():
                    yield file_path

    def build_task(self, file_path: Path) -> FileTask:
        """Resolve the capture time and destination for a single file."""
        self.extractor.ensure_readable(file_path)
        extension = file_extension(file_path)
        dt, source = self.extractor.extract_with_source(file_path, extension)
        self.stats['from_exif' if source == 'exif' else 'from_mtime'] += 1

        task = FileTask(source=file_path, extension=extension, datetime=dt)
        task.destination = self.namer.resolve(dt, extension)
        return task

    def copy_file(self, task: FileTask) -> bool:
        """Copy (or in dry-run mode, print) one task. Returns True on success."""
        if self.dry_run:
            print(f"{task.source} -> {task.destination}")
            return True

        try:
            shutil.copy2(task.source, task.destination)
        except OSError as e:
            self.logger.error(f"failed to copy {task.source} to {task.destination}: {e}")
            # Drop a partial copy so a rerun can claim the same name
            task.destination.unlink(missing_ok=True)
            return False

        self.logger.debug(f"Copied: {task.source} -> {task.destination}")
        return True

    def process_file(self, file_path: Path) -> Optional[FileTask]:
        """Extract, name and copy one file. Per-file failures are logged and skipped."""
        self.stats['processed'] += 1
        try:
            task = self.build_task(file_path)
        except FilesystemUnreadable as e:
            self.logger.error(f"Skipping {file_path}: {e}")
            self.stats['errors'] += 1
            return None
        except OSError as e:
            self.logger.error(f"Skipping {file_path}: cannot prepare destination: {e}")
            self.stats['errors'] += 1
            return None

        if not self.copy_file(task):
            self.stats['errors'] += 1
            return None

        self.stats['copied'] += 1
        return task

    def copy_all(self) -> Dict[str, int]:
        """Main method: process every file under the source directory.

        Raises TraversalError if the source tree cannot be walked.
        """
        self.logger.info(f"Starting copy...")
        self.logger.info(f"Source: {self.source_dir}")
        self.logger.info(f"Target: {self.target_dir}")
        self.logger.info(f"Dry run: {self.dry_run}")

        for file_path in self.iter_source_files():
            self.process_file(file_path)

        self.logger.info("Copy complete!")
        self.logger.info(f"Statistics: {self.stats}")
        return self.stats


def main(argv: Optional[List[str]] = None) -> int:
    """Command line interface."""
    parser = argparse.ArgumentParser(
        description="Copy all files from a directory tree into another, using names that match "
                    "how Dropbox Camera Uploads would rename them (additionally split up by year).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Date and time of files is taken from EXIF metadata if possible,
or file modification time otherwise.

Examples:
  camera-uploads --src /path/to/photos --dst /path/to/camera-uploads
  camera-uploads --src /path/to/photos --dst /path/to/camera-uploads --dry-run
        """
    )

    parser.add_argument(
        '--src',
        required=True,
        help='Path to copy files from. This tree is walked recursively.'
    )

    parser.add_argument(
        '--dst',
        required=True,
        help='Path to copy the files to. A subdirectory under this will be added for each year.'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help="Don't actually copy, just display what would be copied"
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args(argv)

    source_path = Path(args.src)
    if not source_path.exists():
        print(f"Error: Source directory '{source_path}' does not exist", file=sys.stderr)
        return 1

    if not source_path.is_dir():
        print(f"Error: '{source_path}' is not a directory", file=sys.stderr)
        return 1

    copier = CameraUploadsCopier(
        source_dir=args.src,
        target_dir=args.dst,
        dry_run=args.dry_run
    )

    # Set logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    copier.logger.debug(f"Arguments: {args}")

    try:
        stats = copier.copy_all()
    except TraversalError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 1

    print("\n" + "="*50)
    print("COPY SUMMARY")
    print("="*50)
    print(f"Total files processed: {stats['processed']}")
    print(f"Files {'to copy' if args.dry_run else 'copied'}: {stats['copied']}")
    print(f"Dated from EXIF: {stats['from_exif']}")
    print(f"Dated from modification time: {stats['from_mtime']}")
    print(f"Errors: {stats['errors']}")
    print("="*50)

    return 0


if __name__ == "__main__":
    exit(main())
