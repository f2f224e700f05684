"""Hierarchical representation of the filtered file list.

This module provides the tree node type, the builder that folds a flat path
list into a tree, and the renderer that draws the tree as text.
"""

from .file_system_node import FileSystemNode
from .tree_builder import build_tree, insert_path
from .tree_renderer import render_tree, stream_tree_representation

__all__ = ["FileSystemNode", "build_tree", "insert_path", "render_tree", "stream_tree_representation"]
