"""
Text file storage for the data directory.

Writes go to a temporary file first and are moved into place, so a crash
mid-write leaves the previous file intact. Backups are timestamped copies of
the data files in their own directory under the backup root.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

from core.exceptions import DataFileError
from logging_config import get_logger

logger = get_logger(__name__)

BACKUP_PREFIX = "backup_"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S_%f"


class FileStore:
    """Reads and writes named files under a data directory."""

    def __init__(self, data_dir: Union[str, Path], backup_dir: Optional[Union[str, Path]] = None):
        self.data_dir = Path(data_dir)
        self.backup_dir = Path(backup_dir) if backup_dir else self.data_dir / "backups"

    def path(self, filename: str) -> Path:
        return self.data_dir / filename

    def exists(self, filename: str) -> bool:
        return self.path(filename).is_file()

    def read_text(self, filename: str) -> Optional[str]:
        """
        Read a data file.

        Returns:
            File contents, or None if the file does not exist

        Raises:
            DataFileError: If the file exists but cannot be read
        """
        path = self.path(filename)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DataFileError(filename, "read", str(e)) from e

    def write_text(self, filename: str, content: str) -> Path:
        """
        Replace a data file's contents atomically.

        Raises:
            DataFileError: If the directory or file cannot be written
        """
        path = self.path(filename)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{filename}.", dir=self.data_dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                    handle.write(content)
                os.replace(tmp_name, path)
            except OSError:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise DataFileError(filename, "write", str(e)) from e
        logger.debug(f"Wrote {path}")
        return path

    def delete(self, filename: str) -> bool:
        path = self.path(filename)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise DataFileError(filename, "delete", str(e)) from e
        return True

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    def backup(self, filenames: Iterable[str]) -> Path:
        """
        Copy the existing data files into a new timestamped backup directory.

        Files that do not exist yet are skipped.

        Returns:
            The backup directory
        """
        stamp = datetime.now().strftime(BACKUP_TIMESTAMP_FORMAT)
        target = self.backup_dir / f"{BACKUP_PREFIX}{stamp}"
        try:
            target.mkdir(parents=True, exist_ok=False)
            for filename in filenames:
                source = self.path(filename)
                if source.is_file():
                    shutil.copy2(source, target / filename)
        except OSError as e:
            raise DataFileError(str(target), "back up", str(e)) from e
        logger.info(f"Backup created at {target}")
        return target

    def list_backups(self) -> List[Path]:
        """Backup directories, oldest first."""
        if not self.backup_dir.is_dir():
            return []
        return sorted(
            p for p in self.backup_dir.iterdir()
            if p.is_dir() and p.name.startswith(BACKUP_PREFIX)
        )

    def prune_backups(self, keep: int) -> int:
        """Delete all but the newest `keep` backups. Returns how many were deleted."""
        backups = self.list_backups()
        stale = backups[:-keep] if keep > 0 else backups
        for backup in stale:
            try:
                shutil.rmtree(backup)
            except OSError as e:
                raise DataFileError(str(backup), "delete", str(e)) from e
        if stale:
            logger.info(f"Pruned {len(stale)} old backup(s)")
        return len(stale)

    def restore(self, backup: Path, filenames: Iterable[str]) -> List[str]:
        """
        Copy files from a backup directory back into the data directory.

        Returns:
            Names of the files restored
        """
        restored = []
        for filename in filenames:
            source = backup / filename
            if not source.is_file():
                continue
            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, self.path(filename))
            except OSError as e:
                raise DataFileError(filename, "restore", str(e)) from e
            restored.append(filename)
        logger.info(f"Restored {len(restored)} file(s) from {backup}")
        return restored
