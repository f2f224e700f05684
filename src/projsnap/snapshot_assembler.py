"""Assembly of the snapshot document.

The document layout is the only format contract of projsnap and is
reproduced byte-for-byte for the same inputs:

    # Project Snapshot: <name>

    This file contains a snapshot of the project structure and source code, formatted for AI consumption.
    Total files included: <count>

    ```
    <tree diagram>
    ```

    ## File Contents

    ```<extension>:<relative path>
    <content>
    ```

with one fenced block per file, in list order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePath
from typing import Iterator, Sequence

from .file_system_tree.tree_builder import build_tree
from .file_system_tree.tree_renderer import render_tree
from .types import PathType

logger = logging.getLogger(__name__)

SUMMARY_LINE = "This file contains a snapshot of the project structure and source code, formatted for AI consumption."


class SnapshotAssembler:
    """Renders a FilteredPathList into the snapshot document.

    File contents are read as text, without newline translation. A file that
    cannot be read (permission denied, invalid encoding, deleted or replaced
    by a directory since the scan) does not stop the assembly: its block body
    becomes an error message and the next file is processed.

    Attributes:
        root_path (Path): Root the displayed paths are relative to.
        encoding (str): Encoding used to read files.
        read_workers (int): Number of threads reading file contents. Blocks
            are always emitted in list order.

    Example:
        >>> assembler = SnapshotAssembler("project")  # doctest: +SKIP
        >>> document = assembler.assemble("project", paths)  # doctest: +SKIP
    """

    def __init__(self, root_path: PathType, *, encoding: str = "utf-8", read_workers: int = 1) -> None:
        """Initialize the assembler.

        Args:
            root_path: Root of the scan.
            encoding: Encoding used to read files. Defaults to "utf-8".
            read_workers: Threads used to read files. Defaults to 1.

        Raises:
            ValueError: If read_workers is less than 1.
            LookupError: If the encoding is not available.
        """
        if read_workers < 1:
            raise ValueError(f"read_workers must be at least 1, got {read_workers}")
        try:
            "test".encode(encoding).decode(encoding)
        except LookupError as e:
            raise LookupError(f"Encoding '{encoding}' is not available") from e

        self.root_path = Path(root_path)
        self.encoding = encoding
        self.read_workers = read_workers

    def display_path(self, path: PathType) -> str:
        """Path shown on a block's fence line: relative to the root, with forward slashes."""
        pure = PurePath(path)
        try:
            pure = pure.relative_to(self.root_path)
        except ValueError:
            pass
        return pure.as_posix()

    @staticmethod
    def language_tag(path: PathType) -> str:
        """The file's last extension without the dot, or "" if it has none.

        Example:
            >>> SnapshotAssembler.language_tag("src/main.rs")
            'rs'
            >>> SnapshotAssembler.language_tag(".gitignore")
            ''
        """
        return PurePath(path).suffix[1:]

    def read_content(self, path: PathType) -> str:
        """Read a file's full text, or describe why it could not be read."""
        try:
            with open(path, "r", encoding=self.encoding, newline="") as f:
                return f.read()
        except (OSError, UnicodeError) as e:
            logger.debug("Failed to read %s: %s", path, e)
            return f"Error reading file: {e}"

    def _read_all(self, paths: Sequence[PathType]) -> Iterator[str]:
        if self.read_workers == 1 or len(paths) < 2:
            yield from map(self.read_content, paths)
            return
        with ThreadPoolExecutor(max_workers=self.read_workers, thread_name_prefix="projsnap-read") as executor:
            # map() yields results in submission order
            yield from executor.map(self.read_content, paths)

    def format_block(self, path: PathType, content: str) -> str:
        """Format one file's fenced block, including the trailing blank line."""
        return f"```{self.language_tag(path)}:{self.display_path(path)}\n{content}\n```\n\n"

    def stream(self, project_name: str, paths: Sequence[PathType]) -> Iterator[str]:
        """Generate the document piece by piece.

        Args:
            project_name: Name shown in the title line.
            paths: The FilteredPathList. Must not be empty.

        Yields:
            Consecutive pieces of the document.

        Raises:
            ValueError: If paths is empty. Callers report "no files" instead.
        """
        if not paths:
            raise ValueError("Cannot assemble a snapshot without files")

        yield f"# Project Snapshot: {project_name}\n\n"
        yield f"{SUMMARY_LINE}\n"
        yield f"Total files included: {len(paths)}\n\n"
        yield f"```\n{render_tree(build_tree(self.root_path, paths))}\n```\n\n"
        yield "## File Contents\n\n"
        for path, content in zip(paths, self._read_all(paths)):
            yield self.format_block(path, content)

    def assemble(self, project_name: str, paths: Sequence[PathType]) -> str:
        """Build the complete document as one string."""
        return "".join(self.stream(project_name, paths))
