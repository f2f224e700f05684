"""Command-line interface for projsnap."""
