"""Project scanning and snapshot generation.

This module wires the pipeline together: the RuleSet Resolver and Parallel
Walker produce candidate paths on a channel, the Path Collector turns them
into the sorted FilteredPathList, and the Snapshot Assembler renders the
document. Every stage is constructed fresh per call.
"""

import logging
import queue
from pathlib import Path
from typing import Iterator, List, Optional

from projsnap.exceptions import InvalidRootError, TokenizationError
from projsnap.exclusion_rules.git_rules import GitIgnoreExclusionRules
from projsnap.exclusion_rules.resolver import RuleSetResolver
from projsnap.file_system_walk.parallel_walker import ParallelWalker
from projsnap.file_system_walk.path_collector import PathCollector
from projsnap.snapshot_assembler import SnapshotAssembler
from projsnap.token_counter import TokenCounter
from projsnap.types import PathType

logger = logging.getLogger(__name__)


def scan(
    root: PathType,
    *,
    overrides: Optional[GitIgnoreExclusionRules] = None,
    threads: Optional[int] = None,
    follow_symlinks: bool = False,
    use_global: bool = True,
    use_repo_exclude: bool = True,
    use_parents: bool = True,
    global_excludes_file: Optional[PathType] = None,
) -> List[Path]:
    """Scan a directory and return the files that survive the ignore rules.

    Args:
        root: Directory to scan.
        overrides: Extra gitignore-style patterns with the highest precedence
            (below the unconditional .git exclusion).
        threads: Number of walker threads. Defaults to the CPU count.
        follow_symlinks: Whether to follow symbolic links.
        use_global: Whether to apply the user's global git excludes file.
        use_repo_exclude: Whether to apply ``.git/info/exclude``.
        use_parents: Whether to apply ignore files above the root.
        global_excludes_file: Explicit global excludes file.

    Returns:
        The FilteredPathList: regular files, each starting with ``root``,
        sorted by full path and free of duplicates. Empty if nothing is left.

    Raises:
        InvalidRootError: If root is not an existing directory.

    Example:
        >>> for path in scan("."):  # doctest: +SKIP
        ...     print(path)
        .gitignore
        src/main.py
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise InvalidRootError(str(root))

    resolver = RuleSetResolver(
        root_path,
        overrides=overrides,
        use_global=use_global,
        use_repo_exclude=use_repo_exclude,
        use_parents=use_parents,
        global_excludes_file=global_excludes_file,
    )
    channel: "queue.Queue[object]" = queue.Queue()
    walker = ParallelWalker(root_path, resolver, threads=threads, follow_symlinks=follow_symlinks)
    walker.walk(channel)
    paths = PathCollector(channel).drain()
    logger.info("Scanned %s: %d file(s) included", root_path, len(paths))
    return paths


def default_project_name(root: PathType) -> str:
    """Name of the scanned directory, resolving "." and ".." to real names."""
    root_path = Path(root)
    return root_path.resolve().name or str(root_path)


class ProjectSnapshot:
    """Scans a project once and renders its snapshot document.

    The scan runs during construction, so the file list and count are
    available immediately. The document can be streamed once; counts of
    lines, characters and (optionally) tokens accumulate while it streams.

    Streaming properties:
    - stream() can only be called once
    - counts are partial until streaming_complete is True
    - a scan that found no files has no document; check is_empty first

    Attributes:
        root (Path): Directory that was scanned.
        project_name (str): Name shown in the document title.
        paths (List[Path]): The FilteredPathList.

    Example:
        >>> snapshot = ProjectSnapshot("src")  # doctest: +SKIP
        >>> if snapshot.is_empty:  # doctest: +SKIP
        ...     print("No files to include in the snapshot.")
        ... else:
        ...     print(snapshot.generate())

    Raises:
        InvalidRootError: If root is not an existing directory.
        TokenizerNotAvailableError: If a tokenizer model is given but tiktoken is missing.
    """

    def __init__(
        self,
        root: PathType,
        *,
        project_name: Optional[str] = None,
        overrides: Optional[GitIgnoreExclusionRules] = None,
        threads: Optional[int] = None,
        read_workers: int = 1,
        follow_symlinks: bool = False,
        use_global: bool = True,
        use_repo_exclude: bool = True,
        use_parents: bool = True,
        global_excludes_file: Optional[PathType] = None,
        encoding: str = "utf-8",
        tokenizer_model: Optional[str] = None,
    ) -> None:
        """Scan the project.

        Args:
            root: Directory to scan.
            project_name: Title of the document. Defaults to the directory's name.
            overrides: Extra gitignore-style patterns, see scan().
            threads: Number of walker threads.
            read_workers: Number of threads reading file contents.
            follow_symlinks: Whether to follow symbolic links.
            use_global: Whether to apply the user's global git excludes file.
            use_repo_exclude: Whether to apply ``.git/info/exclude``.
            use_parents: Whether to apply ignore files above the root.
            global_excludes_file: Explicit global excludes file.
            encoding: Encoding used to read files.
            tokenizer_model: Model to count tokens for. None disables token counting.
        """
        self.root = Path(root)
        self._counter = TokenCounter(model=tokenizer_model)
        self.paths = scan(
            self.root,
            overrides=overrides,
            threads=threads,
            follow_symlinks=follow_symlinks,
            use_global=use_global,
            use_repo_exclude=use_repo_exclude,
            use_parents=use_parents,
            global_excludes_file=global_excludes_file,
        )
        self.project_name = project_name if project_name is not None else default_project_name(self.root)
        self._assembler = SnapshotAssembler(self.root, encoding=encoding, read_workers=read_workers)
        self._streamed = False
        self._complete = False

    @property
    def is_empty(self) -> bool:
        """True when the scan found nothing to include."""
        return not self.paths

    @property
    def file_count(self) -> int:
        return len(self.paths)

    @property
    def streaming_complete(self) -> bool:
        return self._complete

    @property
    def line_count(self) -> int:
        return self._counter.get_total_lines()

    @property
    def character_count(self) -> int:
        return self._counter.get_total_characters()

    @property
    def token_count(self) -> Optional[int]:
        """Tokens streamed so far, or None when token counting is disabled."""
        return self._counter.get_total_tokens()

    def stream(self) -> Iterator[str]:
        """Stream the snapshot document.

        Raises:
            RuntimeError: If the document has already been streamed, or the
                scan found no files.
        """
        if self._streamed:
            raise RuntimeError("Snapshot has already been streamed")
        if self.is_empty:
            raise RuntimeError("No files to include in the snapshot")
        self._streamed = True

        for chunk in self._assembler.stream(self.project_name, self.paths):
            try:
                self._counter.count(chunk)
            except TokenizationError as e:
                # Continue even if token counting fails
                logger.warning("%s", e)
            yield chunk
        self._complete = True

    def generate(self) -> Optional[str]:
        """Return the complete document, or None when there are no files."""
        if self.is_empty:
            return None
        return "".join(self.stream())
