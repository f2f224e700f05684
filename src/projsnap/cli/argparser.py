"""Command-line argument parsing for projsnap.

This module defines the command-line interface for projsnap,
handling argument parsing and validation.
"""

import argparse
import os
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from projsnap import __version__
from projsnap.exclusion_rules.base_rules import BaseExclusionRules


def create_override_action(overrides: BaseExclusionRules) -> Type[argparse.Action]:
    """Create a custom action class that feeds the override rule layer.

    The action updates the provided rules object as arguments are processed,
    which preserves the exact order of -e/--exclude and -i/--ignore options
    as they appear on the command line. Later options take precedence.

    Args:
        overrides: The rules object to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class OverrideRulesAction(argparse.Action):
        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return
            if option_string in ("-e", "--exclude"):
                if isinstance(values, (str, os.PathLike)):
                    overrides.load_rules(values)
                else:
                    overrides.load_rules(Path(str(values)))
            else:  # -i/--ignore
                overrides.add_rule(str(values))

            collected = getattr(namespace, self.dest, None) or []
            collected.append(values)
            setattr(namespace, self.dest, collected)

    return OverrideRulesAction


def positive_int(value: str) -> int:
    """argparse type accepting integers of at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def create_parser(overrides: BaseExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        overrides: The rules object that -e/--exclude and -i/--ignore populate.

    Returns:
        An ArgumentParser instance configured with projsnap's options.
    """
    description = """
    projsnap: a fast project scanner that creates snapshots for AI consumption.

    The scanner walks a project directory in parallel, skips everything ignored
    by the usual gitignore rules, and writes a single Markdown document: a tree
    diagram of the included files followed by the contents of each file.

    Ignore rules are taken, in increasing order of precedence, from the global
    git excludes file, the repository's .git/info/exclude, .gitignore and
    .ignore files in parent directories and throughout the project, and the
    -e/-i options. The .git directory is always excluded. Hidden files are not
    skipped unless a rule says so. A git repository is not required.
    """

    epilog = """
    Examples:
      # Snapshot the current directory to standard output
      projsnap

      # Snapshot a project into a file
      projsnap /path/to/project -o snapshot.md

      # Exclude more files with gitignore-style patterns
      projsnap -i "*.lock" -i "docs/" /path/to/project

      # Add patterns from an extra ignore file
      projsnap -e .dockerignore /path/to/project

      # Follow symbolic links
      projsnap -L /path/to/project

      # Print a summary with token counts to stderr
      projsnap -s stderr -t gpt-4 /path/to/project

      # Display version information and exit
      projsnap --version
    """

    parser = argparse.ArgumentParser(
        prog="projsnap",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"projsnap {__version__}", help="Show the version and exit"
    )

    OverrideAction = create_override_action(overrides)

    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=Path("."),
        help="The project directory to scan (default: current directory).",
    )
    parser.add_argument(
        "-o",
        "--out",
        dest="output",
        type=Path,
        metavar="FILE",
        help="Write the snapshot to FILE. If not specified, it is written to stdout.",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        dest="overrides",
        type=Path,
        metavar="FILE",
        action=OverrideAction,
        help="Read additional gitignore-style patterns from FILE (can be specified multiple times).",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        dest="overrides",
        type=str,
        metavar="PATTERN",
        action=OverrideAction,
        help=(
            "Additional gitignore-style pattern, e.g. '*.txt', 'build/' or '!keep.txt'. Can be specified "
            "multiple times; patterns are processed in order, mixed with -e/--exclude options."
        ),
    )
    parser.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        help="Follow symbolic links. By default symlinks are left out of the snapshot.",
    )
    parser.add_argument(
        "-j",
        "--threads",
        type=positive_int,
        metavar="N",
        help="Number of threads used to walk the directory tree (default: number of CPUs).",
    )
    parser.add_argument(
        "--no-global",
        dest="use_global",
        action="store_false",
        help="Do not apply the global git excludes file.",
    )
    parser.add_argument(
        "--no-parents",
        dest="use_parents",
        action="store_false",
        help="Do not apply ignore files found in parent directories of PATH.",
    )
    parser.add_argument(
        "--no-repo-exclude",
        dest="use_repo_exclude",
        action="store_false",
        help="Do not apply the repository's .git/info/exclude file.",
    )
    parser.add_argument(
        "-s",
        "--summary",
        metavar="DEST",
        choices=["stderr", "stdout", "file"],
        help="Print summary report. Valid destinations: stderr, stdout, file (requires -o)",
    )
    parser.add_argument(
        "-t",
        "--tokenizer",
        metavar="MODEL",
        help="Tokenizer model to use for counting tokens (e.g., gpt-4). Specifying this enables token counting.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr; repeat (-vv) for per-entry debug messages.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments beyond what argparse can express.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.summary == "file" and not args.output:
        raise ValueError("--summary=file requires -o/--out to be specified")
