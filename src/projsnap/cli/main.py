"""Command-line interface for projsnap.

This module provides the `projsnap` command. It parses the command line,
scans the project, and writes the snapshot either to standard output or to a
file, with signal handling for graceful interruption.

Signal Handling Notes:
    - SIGPIPE: Handled when the output pipe is closed (e.g., when piping to `head`) on Unix-like systems
    - SIGINT: Handled for clean exit on Ctrl+C

Exit Codes:
    0: Successful completion, including "no files to include"
    1: Runtime error (invalid root, unwritable output, ...)
    2: Command-line syntax error
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE) on Unix-like systems

Example:
    # Snapshot the current directory to stdout
    $ projsnap

    # Snapshot a project to a file
    $ projsnap /path/to/project -o snapshot.md
"""

import importlib.util
import logging
import sys
from collections.abc import Mapping
from typing import Optional

from projsnap.cli.argparser import create_parser, validate_args
from projsnap.cli.safe_writer import SafeWriter
from projsnap.cli.signal_handler import setup_signal_handling, signal_handler
from projsnap.exceptions import TokenizerNotAvailableError
from projsnap.exclusion_rules.git_rules import GitIgnoreExclusionRules
from projsnap.projsnap import ProjectSnapshot

NO_FILES_MESSAGE = "No files to include in the snapshot. Exiting."


def format_counts(counts: Mapping[str, Optional[int]]) -> str:
    """Format the counts into a human-readable string.

    Args:
        counts: Mapping containing the "files", "lines", "characters" and
            "tokens" metrics. Tokens are omitted when None.
    """
    result = [
        f"Files: {counts['files']}",
        f"Lines: {counts['lines']}",
        f"Characters: {counts['characters']}",
    ]

    if counts["tokens"] is not None:
        result.insert(2, f"Tokens: {counts['tokens']}")

    return "\n".join(result)


def check_tiktoken_available() -> bool:
    """Check if the tiktoken library is available."""
    return importlib.util.find_spec("tiktoken") is not None


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr: warnings by default, more with -v/-vv."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(name)s: %(message)s", stream=sys.stderr)


def main() -> None:
    """Main entry point for the projsnap command-line interface.

    Exit codes:
        0: Successful completion, including "no files to include"
        1: Runtime error during execution
        2: Command-line syntax error
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe (SIGPIPE) on Unix-like systems
    """
    setup_signal_handling()

    try:
        # Populated by -e/--exclude and -i/--ignore while parsing
        overrides = GitIgnoreExclusionRules(source="command line")

        parser = create_parser(overrides)
        args = parser.parse_args()
        validate_args(args)
        configure_logging(args.verbose)

        if args.tokenizer and not check_tiktoken_available():
            raise TokenizerNotAvailableError(
                "Token counting was requested with -t/--tokenizer, but the required tiktoken library is not installed."
            )

        snapshot = ProjectSnapshot(
            args.path,
            overrides=overrides,
            threads=args.threads,
            follow_symlinks=args.follow_symlinks,
            use_global=args.use_global,
            use_repo_exclude=args.use_repo_exclude,
            use_parents=args.use_parents,
            tokenizer_model=args.tokenizer,
        )

        if snapshot.is_empty:
            print(NO_FILES_MESSAGE, file=sys.stderr)
            return

        output_file = args.output if args.output else sys.stdout.fileno()

        with SafeWriter(output_file) as safe_writer:
            try:
                for chunk in snapshot.stream():
                    safe_writer.write(chunk)
                if not args.output:
                    safe_writer.write("\n")

                if args.summary:
                    count_output_str = format_counts(
                        {
                            "files": snapshot.file_count,
                            "lines": snapshot.line_count,
                            "characters": snapshot.character_count,
                            "tokens": snapshot.token_count,
                        }
                    )
                    if args.summary == "file" or (args.summary == "stdout" and not args.output):
                        safe_writer.write("\n" + count_output_str + "\n")
                    elif args.summary == "stdout":
                        print(count_output_str)
                    else:
                        print(count_output_str, file=sys.stderr)

            except BrokenPipeError:
                pass  # SafeWriter will automatically close in the context manager

        if args.output and not signal_handler.interrupted():
            print(f"Snapshot successfully written to: {args.output}", file=sys.stderr)

    except TokenizerNotAvailableError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        print("To enable token counting, install projsnap with the 'token_counting' extra:", file=sys.stderr)
        print('    pip install "projsnap[token_counting]"', file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    # Handle exit codes based on received signals
    if signal_handler.sigpipe_received.is_set():
        sys.exit(141)
    elif signal_handler.sigint_received.is_set():
        sys.exit(130)


if __name__ == "__main__":
    main()
