"""File identifier for uniquely identifying directories by device and inode."""

import os
from typing import Any, Optional

from projsnap.types import PathType


class FileIdentifier:
    """Identity of a directory on disk, used for symlink loop detection.

    Two paths that reach the same directory, for instance a directory and a
    symlink pointing at it, share the same device ID and inode number.

    Attributes:
        device_id (int): The device ID from stat information.
        inode_number (int): The inode number from stat information.
    """

    def __init__(self, device_id: int, inode_number: int):
        self.device_id = device_id
        self.inode_number = inode_number

    @classmethod
    def of(cls, path: PathType) -> Optional["FileIdentifier"]:
        """Stat a path, following symlinks, and return its identifier.

        Returns:
            The identifier, or None if the path cannot be stat'ed.
        """
        try:
            stat_info = os.stat(path)
        except OSError:
            return None
        return cls(stat_info.st_dev, stat_info.st_ino)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, FileIdentifier):
            return False
        return self.device_id == other.device_id and self.inode_number == other.inode_number

    def __hash__(self) -> int:
        return hash((self.device_id, self.inode_number))

    def __repr__(self) -> str:
        return f"FileIdentifier(device_id={self.device_id}, inode_number={self.inode_number})"
