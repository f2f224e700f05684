from anytree import Node

from projsnap.file_system_tree.file_system_node import FileSystemNode


def test_node_creation():
    root = FileSystemNode(".", is_dir=True)
    child = FileSystemNode("main.py", parent=root)

    assert isinstance(root, Node)
    assert root.is_dir
    assert not child.is_dir
    assert child.parent is root
    assert root.children == (child,)


def test_get_child():
    root = FileSystemNode(".", is_dir=True)
    src = FileSystemNode("src", parent=root, is_dir=True)

    assert root.get_child("src") is src
    assert root.get_child("missing") is None
    assert src.get_child("src") is None


def test_detach_removes_lookup_entry():
    root = FileSystemNode(".", is_dir=True)
    child = FileSystemNode("a.txt", parent=root)

    child.parent = None
    assert root.get_child("a.txt") is None
    assert root.children == ()


def test_reattach_moves_lookup_entry():
    root = FileSystemNode(".", is_dir=True)
    first = FileSystemNode("first", parent=root, is_dir=True)
    second = FileSystemNode("second", parent=root, is_dir=True)
    child = FileSystemNode("file.txt", parent=first)

    child.parent = second
    assert first.get_child("file.txt") is None
    assert second.get_child("file.txt") is child


def test_extra_attributes_are_passed_to_anytree():
    node = FileSystemNode("x", mtime="2023")
    assert node.mtime == "2023"
