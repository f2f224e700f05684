"""Text rendering of the snapshot tree."""

from typing import Iterator

from .file_system_node import FileSystemNode

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
SPACE_PREFIX = "    "


def stream_tree_representation(root: FileSystemNode) -> Iterator[str]:
    """Generate the tree diagram one line at a time, without line endings.

    The first line is ``.`` for the root. Children of every directory are
    listed sorted by name, whatever order they were inserted in, so the same
    tree always renders the same way.

    Yields:
        Lines of the tree representation, including the connecting lines.

    Example:
        >>> from projsnap.file_system_tree.tree_builder import build_tree
        >>> for line in stream_tree_representation(build_tree("", ["b/c.txt", "a.txt"])):
        ...     print(line)
        .
        ├── a.txt
        └── b
            └── c.txt
    """
    yield "."

    def write_children(node: FileSystemNode, prefix: str) -> Iterator[str]:
        children = sorted(node.children, key=lambda child: child.name)
        for i, child in enumerate(children):
            is_last = i == len(children) - 1
            yield f"{prefix}{LAST_BRANCH if is_last else BRANCH}{child.name}"
            if child.is_dir:
                yield from write_children(child, prefix + (SPACE_PREFIX if is_last else PIPE_PREFIX))

    yield from write_children(root, "")


def render_tree(root: FileSystemNode) -> str:
    """Render the complete tree diagram, every line terminated by a newline."""
    return "".join(f"{line}\n" for line in stream_tree_representation(root))
