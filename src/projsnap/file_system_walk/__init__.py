"""Parallel traversal of a directory tree and collection of the accepted files."""

from .parallel_walker import ParallelWalker
from .path_collector import END_OF_SCAN, PathCollector

__all__ = ["END_OF_SCAN", "ParallelWalker", "PathCollector"]
