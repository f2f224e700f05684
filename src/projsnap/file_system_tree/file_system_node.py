"""Node representation for file system elements in the tree."""

from typing import Any, Dict, Optional

from anytree import Node


class FileSystemNode(Node):  # type: ignore
    """Node class representing a file or directory in the snapshot tree.

    Extends anytree.Node with a directory flag and a name-to-child mapping,
    so a directory can look up a child by path segment without scanning its
    children. The mapping is kept in step with anytree's parent links through
    the attach/detach hooks. Neither the mapping nor ``children`` carries any
    ordering guarantee; renderers must sort.

    Attributes:
        name (str): The path segment this node stands for.
        parent (Optional[FileSystemNode]): The parent node in the tree.
        is_dir (bool): True for directories, False for files.
        children (tuple[FileSystemNode]): The child nodes (inherited from anytree.Node).

    Example:
        >>> root = FileSystemNode(".", is_dir=True)
        >>> child = FileSystemNode("main.py", parent=root)
        >>> root.get_child("main.py") is child
        True
        >>> child.parent = None
        >>> print(root.get_child("main.py"))
        None
    """

    def __init__(
        self,
        name: str,
        parent: Optional["FileSystemNode"] = None,
        is_dir: bool = False,
        **kwargs: Any,
    ) -> None:
        """Initialize a FileSystemNode.

        Args:
            name: The path segment of the file or directory.
            parent: The parent node. Defaults to None.
            is_dir: Whether this node represents a directory. Defaults to False.
            **kwargs: Additional arguments passed to anytree.Node.
        """
        self.is_dir = is_dir
        self._entries: Dict[str, "FileSystemNode"] = {}
        super().__init__(name, parent, **kwargs)

    def get_child(self, name: str) -> Optional["FileSystemNode"]:
        """Return the child registered under a path segment, if any."""
        return self._entries.get(name)

    def _post_attach(self, parent: "FileSystemNode") -> None:
        parent._entries[self.name] = self

    def _post_detach(self, parent: "FileSystemNode") -> None:
        if parent._entries.get(self.name) is self:
            del parent._entries[self.name]
