"""
Byte storage used by the converter.

Not meant to be called directly. Everything above this layer goes through
FileStorage so tests and other hosts can substitute their own storage.
"""

from pathlib import Path
from typing import List, Tuple

FILE = 'file'
DIRECTORY = 'directory'


class FileStorage:
    """Local-disk implementation of the storage collaborator."""

    def read_bytes(self, path) -> bytes:
        return Path(path).read_bytes()

    def write_bytes(self, path, data: bytes) -> None:
        Path(path).write_bytes(data)

    def create_new(self, path, data: bytes) -> None:
        """Write data to a path that must not exist yet (FileExistsError otherwise)."""
        with open(path, 'xb') as f:
            f.write(data)

    def exists(self, path) -> bool:
        return Path(path).exists()

    def is_dir(self, path) -> bool:
        return Path(path).is_dir()

    def stat_size(self, path) -> int:
        return Path(path).stat().st_size

    def stat_mtime(self, path) -> float:
        return Path(path).stat().st_mtime

    def list_directory(self, path) -> List[Tuple[str, str]]:
        """(name, kind) pairs for the entries of a directory, sorted by name.

        Entries that are neither regular files nor directories are left out.
        """
        entries = []
        for child in sorted(Path(path).iterdir(), key=lambda p: p.name):
            if child.is_dir():
                entries.append((child.name, DIRECTORY))
            elif child.is_file():
                entries.append((child.name, FILE))
        return entries

    def delete_file(self, path) -> None:
        Path(path).unlink()
