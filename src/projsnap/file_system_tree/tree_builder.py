"""Folding of a flat path list into a directory tree."""

from pathlib import PurePath
from typing import Iterable, Sequence, Tuple

from projsnap.types import PathType

from .file_system_node import FileSystemNode

ROOT_NAME = "."


def relative_parts(root_path: PathType, path: PathType) -> Tuple[str, ...]:
    """Split a path into segments relative to the root.

    Paths that do not lie under root_path keep all of their own segments.

    Example:
        >>> relative_parts("/project", "/project/src/main.py")
        ('src', 'main.py')
        >>> relative_parts("/project", "/elsewhere/x.py")
        ('/', 'elsewhere', 'x.py')
    """
    pure = PurePath(path)
    try:
        pure = pure.relative_to(root_path)
    except ValueError:
        pass
    return pure.parts


def insert_path(root: FileSystemNode, parts: Sequence[str]) -> None:
    """Insert one file into the tree.

    Every segment but the last becomes a directory node, created on demand;
    the last becomes a file leaf. Inserting the same path twice replaces the
    leaf rather than duplicating it. An empty segment sequence is a no-op, as
    is a path that would have to descend through an existing file.

    Args:
        root: Directory node to insert under.
        parts: Path segments relative to root.
    """
    if not parts:
        return

    node = root
    for name in parts[:-1]:
        child = node.get_child(name)
        if child is None:
            child = FileSystemNode(name, parent=node, is_dir=True)
        elif not child.is_dir:
            return
        node = child

    existing = node.get_child(parts[-1])
    if existing is not None:
        existing.parent = None
    FileSystemNode(parts[-1], parent=node, is_dir=False)


def build_tree(root_path: PathType, paths: Iterable[PathType]) -> FileSystemNode:
    """Build the directory tree for a list of file paths.

    Args:
        root_path: Root the paths are made relative to.
        paths: File paths, typically the sorted FilteredPathList.

    Returns:
        The root directory node, named ".".

    Example:
        >>> root = build_tree("/p", ["/p/src/main.py", "/p/README.md"])
        >>> sorted(child.name for child in root.children)
        ['README.md', 'src']
    """
    root = FileSystemNode(ROOT_NAME, is_dir=True)
    for path in paths:
        insert_path(root, relative_parts(root_path, path))
    return root
