"""Entries visited during traversal, before they are accepted or rejected."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from projsnap.types import FileType


@dataclass(frozen=True)
class CandidateEntry:
    """A filesystem entry seen by a walker.

    Attributes:
        path: Absolute path of the entry.
        relative_path: Path relative to the scan root, with forward slashes.
        file_type: What kind of entry this is.
    """

    path: Path
    relative_path: str
    file_type: FileType

    @property
    def is_dir(self) -> bool:
        return self.file_type is FileType.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.file_type is FileType.FILE

    @classmethod
    def from_dir_entry(
        cls, entry: "os.DirEntry[str]", relative_dir: str, follow_symlinks: bool = False
    ) -> Optional["CandidateEntry"]:
        """Classify an ``os.scandir`` entry.

        Args:
            entry: The directory entry.
            relative_dir: Relative path of the directory being listed ("" for the root).
            follow_symlinks: Whether symlinks are classified by their target.

        Returns:
            The candidate, or None if the entry vanished or cannot be inspected.
        """
        relative_path = f"{relative_dir}/{entry.name}" if relative_dir else entry.name
        try:
            if entry.is_symlink() and not follow_symlinks:
                file_type = FileType.SYMLINK
            elif entry.is_dir(follow_symlinks=follow_symlinks):
                file_type = FileType.DIRECTORY
            elif entry.is_file(follow_symlinks=follow_symlinks):
                file_type = FileType.FILE
            else:
                file_type = FileType.OTHER
        except OSError:
            return None
        return cls(Path(entry.path), relative_path, file_type)
