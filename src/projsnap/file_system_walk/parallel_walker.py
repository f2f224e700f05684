"""Parallel directory traversal with layered ignore rules.

The walker fans out over the directory tree with a thread pool: every
directory is one task, and a task submits one new task per accepted
subdirectory. Accepted regular files are put on a result channel in whatever
order the workers find them. Ordering is restored later by the PathCollector.
"""

import logging
import os
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import FrozenSet, Optional

from projsnap.exclusion_rules.resolver import RuleSetResolver
from projsnap.exclusion_rules.rule_chain import IgnoreRuleChain
from projsnap.types import PathType

from .candidate_entry import CandidateEntry
from .file_identifier import FileIdentifier
from .path_collector import END_OF_SCAN

logger = logging.getLogger(__name__)


class ParallelWalker:
    """Walks a directory tree on a pool of worker threads.

    Workers share nothing but the result channel, a lock-protected count of
    outstanding directory tasks, and a slot for the first unexpected error.
    Each task derives its own rule chain from its parent's by adding the
    directory's ignore files, so chains never need locking.

    Errors on individual entries (permission denied, broken symlinks, entries
    deleted while the walk runs) are logged and skipped. Rejected directories
    are not descended into.

    Symbolic Link Behavior:
        By default symlinks are neither emitted nor descended into. With
        follow_symlinks, a symlink to a file is emitted under the link's path
        and a symlink to a directory is walked, skipping any directory that is
        already an ancestor on the current branch.

    Attributes:
        root (Path): The scan root as given; emitted paths start with it.
        resolver (RuleSetResolver): Source of the rule layers.
        threads (int): Number of worker threads.
        follow_symlinks (bool): Whether symlinks are followed.

    Example:
        >>> import queue
        >>> walker = ParallelWalker("src", RuleSetResolver("src"))  # doctest: +SKIP
        >>> channel = queue.Queue()  # doctest: +SKIP
        >>> walker.walk(channel)  # doctest: +SKIP
    """

    def __init__(
        self,
        root: PathType,
        resolver: RuleSetResolver,
        *,
        threads: Optional[int] = None,
        follow_symlinks: bool = False,
    ) -> None:
        """Initialize a ParallelWalker.

        Args:
            root: Directory to walk.
            resolver: Resolver providing the root's rule chain and the ignore
                files of every directory visited.
            threads: Number of worker threads. Defaults to the CPU count.
            follow_symlinks: Whether to follow symbolic links.

        Raises:
            ValueError: If threads is less than 1.
        """
        if threads is not None and threads < 1:
            raise ValueError(f"threads must be at least 1, got {threads}")
        self.root = Path(root)
        self.resolver = resolver
        self.threads = threads or os.cpu_count() or 1
        self.follow_symlinks = follow_symlinks

        self._root_abs = Path(os.path.abspath(self.root))
        self._lock = threading.Lock()
        self._finished = threading.Event()
        self._pending = 0
        self._error: Optional[BaseException] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._channel: "Optional[queue.Queue[object]]" = None

    def walk(self, channel: "queue.Queue[object]") -> None:
        """Walk the tree, putting accepted file paths on the channel.

        Blocks until every worker has finished, then puts END_OF_SCAN on the
        channel. A walker can only be run once.

        Args:
            channel: Queue receiving ``Path`` objects, then END_OF_SCAN.

        Raises:
            RuntimeError: If the walker has already been run.
            Exception: Re-raises the first unexpected worker error, after
                END_OF_SCAN has been sent.
        """
        if self._channel is not None:
            raise RuntimeError("Walker has already been run")
        self._channel = channel

        try:
            chain = self.resolver.resolve()
            ancestors: FrozenSet[FileIdentifier] = frozenset()
            if self.follow_symlinks:
                root_id = FileIdentifier.of(self._root_abs)
                if root_id is not None:
                    ancestors = frozenset([root_id])

            with ThreadPoolExecutor(max_workers=self.threads, thread_name_prefix="projsnap-walk") as executor:
                self._executor = executor
                self._submit(self._root_abs, "", chain, ancestors)
                self._finished.wait()
        finally:
            self._executor = None
            channel.put(END_OF_SCAN)

        if self._error is not None:
            raise self._error

    def _submit(
        self, directory: Path, relative_dir: str, chain: IgnoreRuleChain, ancestors: FrozenSet[FileIdentifier]
    ) -> None:
        assert self._executor is not None
        with self._lock:
            self._pending += 1
        self._executor.submit(self._visit, directory, relative_dir, chain, ancestors)

    def _visit(
        self, directory: Path, relative_dir: str, chain: IgnoreRuleChain, ancestors: FrozenSet[FileIdentifier]
    ) -> None:
        """Process one directory: evaluate its entries and fan out into subdirectories."""
        try:
            if relative_dir:
                chain = chain.extended(self.resolver.load_directory_layers(directory))

            try:
                with os.scandir(directory) as it:
                    entries = list(it)
            except OSError as e:
                logger.debug("Skipping unreadable directory %s: %s", directory, e)
                return

            for dir_entry in entries:
                candidate = CandidateEntry.from_dir_entry(dir_entry, relative_dir, self.follow_symlinks)
                if candidate is None:
                    logger.debug("Skipping inaccessible entry %s", dir_entry.path)
                    continue
                if not (candidate.is_file or candidate.is_dir):
                    continue
                if chain.exclude(candidate.path, is_dir=candidate.is_dir):
                    continue

                if candidate.is_file:
                    assert self._channel is not None
                    self._channel.put(self.root / candidate.relative_path)
                    continue

                child_ancestors = ancestors
                if self.follow_symlinks:
                    child_id = FileIdentifier.of(candidate.path)
                    if child_id is None:
                        logger.debug("Skipping inaccessible directory %s", candidate.path)
                        continue
                    if child_id in ancestors:
                        logger.debug("Skipping symlink loop at %s", candidate.path)
                        continue
                    child_ancestors = ancestors | {child_id}
                self._submit(candidate.path, candidate.relative_path, chain, child_ancestors)
        except Exception as e:
            with self._lock:
                if self._error is None:
                    self._error = e
        finally:
            with self._lock:
                self._pending -= 1
                if self._pending == 0:
                    self._finished.set()
