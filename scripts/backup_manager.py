"""
Backups before conversion, and undo from those backups.

Not meant to be called directly. For an original file P the backups are
P.bak, P.bak.1, P.bak.2, ... An existing backup is never overwritten; undo
restores from the most recently modified one and deletes it.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from converter_console import ConsolePrompter
from converter_models import ConversionResult, UndoSummary
from encoding_constants import BACKUP_SUFFIX, LATEST_BACKUP_CANDIDATES, MAX_BACKUP_ATTEMPTS
from file_storage import FileStorage


class BackupError(Exception):
    """Raised when no free backup name is left."""


def backup_path(path, index: int = 0) -> Path:
    """P.bak for index 0, P.bak.<index> otherwise."""
    suffix = BACKUP_SUFFIX if index == 0 else f"{BACKUP_SUFFIX}.{index}"
    return Path(f"{path}{suffix}")


class BackupManager:
    def __init__(
        self,
        storage: Optional[FileStorage] = None,
        prompter=None,
        logger: Optional[logging.Logger] = None,
        reopen: Optional[Callable[[Path], None]] = None,
        max_attempts: int = MAX_BACKUP_ATTEMPTS,
    ):
        self.storage = storage or FileStorage()
        self.prompter = prompter or ConsolePrompter()
        self.logger = logger or logging.getLogger(__name__)
        self.reopen = reopen
        self.max_attempts = max_attempts

    def create_backup(self, path) -> bool:
        """Copy the file's current bytes to the first unused backup name.

        Returns False (and logs) instead of raising; a missing backup only
        disables undo for that file.
        """
        try:
            data = self.storage.read_bytes(path)
            target = self._write_unique(path, data)
        except (OSError, BackupError) as e:
            self.logger.error(f"Failed to create backup: {e}")
            return False
        self.logger.info(f"Backup created: {target}")
        return True

    def _write_unique(self, path, data: bytes) -> Path:
        for index in range(self.max_attempts):
            candidate = backup_path(path, index)
            try:
                self.storage.create_new(candidate, data)
            except FileExistsError:
                continue
            return candidate
        raise BackupError(f"Too many backup files exist for {path}")

    def find_latest_backup(self, path) -> Optional[Path]:
        """Most recently modified of P.bak ... P.bak.5; ties go to the later suffix."""
        latest = None
        latest_time = None
        for index in range(LATEST_BACKUP_CANDIDATES):
            candidate = backup_path(path, index)
            try:
                mtime = self.storage.stat_mtime(candidate)
            except FileNotFoundError:
                continue
            if latest_time is None or mtime >= latest_time:
                latest, latest_time = candidate, mtime
        return latest

    def undo_conversion(self, path, reopen: bool = False) -> bool:
        """Restore a file from its latest backup, then delete that backup."""
        name = Path(path).name
        try:
            backup = self.find_latest_backup(path)
            if backup is None:
                self.prompter.error(f"No backup file found for: {name}")
                return False

            data = self.storage.read_bytes(backup)
            self.storage.write_bytes(path, data)
            self.storage.delete_file(backup)
        except OSError as e:
            self.logger.error(f"Failed to undo conversion: {e}")
            self.prompter.error(f"Failed to undo conversion: {e}")
            return False

        if reopen:
            self.reopen_file(path)

        self.logger.info(f"Undone conversion: {name} (restored from {backup.name})")
        return True

    def reopen_file(self, path) -> None:
        """Ask the host to reload the file; failures are only logged."""
        if self.reopen is None:
            return
        try:
            self.reopen(Path(path))
        except Exception as e:
            self.logger.warning(f"Failed to reopen file: {e}")

    def undo_batch(self, results: Iterable[ConversionResult], progress=None) -> UndoSummary:
        """Undo every converted file that has a backup, after confirmation."""
        candidates = [r for r in results if r.undoable]
        summary = UndoSummary()

        if not candidates:
            self.prompter.info('No files to undo (no backups found)')
            return summary

        if not self.prompter.confirm(f"Are you sure you want to undo conversion for {len(candidates)} files?"):
            self.logger.info('Batch undo declined')
            return summary

        for i, result in enumerate(candidates, 1):
            summary.record(result.file_path, self.undo_conversion(result.file_path))
            if progress is not None:
                progress.report(i / len(candidates) * 100,
                                f"Undoing {result.file_name} ({i}/{len(candidates)})")

        if summary.failed:
            self.logger.warning(summary.message)
        else:
            self.logger.info(summary.message)
        self.prompter.info(summary.message)
        return summary
