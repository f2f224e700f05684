"""Draining of the walker's result channel into the sorted file list."""

import queue
from pathlib import Path
from typing import List

# Put on the channel once no further paths will be emitted
END_OF_SCAN = object()


class PathCollector:
    """Turns the walker's unordered emissions into the FilteredPathList.

    This is the single synchronization point between the concurrent walk and
    everything after it. drain() blocks until END_OF_SCAN arrives, then
    deduplicates and sorts the paths by their full path string (with forward
    slashes, so the order is the same on every platform).

    The string order is not the per-component order the tree diagram uses:
    "a-b.txt" sorts before "a/x.txt" here, while the diagram lists directory
    "a" before "a-b.txt" because "a" is a shorter name. Content blocks follow
    this list, so in such cases they appear in a different order than the
    diagram entries.

    Example:
        >>> import queue
        >>> from pathlib import Path
        >>> channel = queue.Queue()
        >>> for item in (Path("b.txt"), Path("a/z.txt"), Path("b.txt"), END_OF_SCAN):
        ...     channel.put(item)
        >>> [p.as_posix() for p in PathCollector(channel).drain()]
        ['a/z.txt', 'b.txt']
    """

    def __init__(self, channel: "queue.Queue[object]") -> None:
        self.channel = channel

    def drain(self) -> List[Path]:
        """Collect every path emitted before END_OF_SCAN.

        Returns:
            The sorted, deduplicated list of paths. An empty list means the
            walk accepted no files.
        """
        collected = set()
        while True:
            item = self.channel.get()
            if item is END_OF_SCAN:
                break
            collected.add(Path(item))  # type: ignore[arg-type]
        return sorted(collected, key=lambda path: path.as_posix())
