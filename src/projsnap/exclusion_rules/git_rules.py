"""Ignore rule layer using .gitignore pattern syntax."""

from os import PathLike
from pathlib import Path, PurePath
from typing import List, Match, Optional, Sequence, Union

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern  # type: ignore

from projsnap.types import PathType

from .base_rules import BaseExclusionRules

# Group name pathspec gives the slash that starts a directory pattern's tail.
_DIR_MARK = "ps_d"

_TAIL_HIT = 1
_DIRECT_HIT = 2


def _hit_priority(match: Match[str], candidate: str, is_dir: bool) -> int:
    """Rank a pattern hit as direct or as coming from a matched parent directory.

    pathspec compiles "docs/" so that it also matches "docs/a.txt". A hit
    through that tail is a tail hit; a directory candidate ending at the mark
    is a direct hit.
    """
    if match.groupdict().get(_DIR_MARK) is None:
        return _DIRECT_HIT
    if is_dir and match.start(_DIR_MARK) == len(candidate) - 1:
        return _DIRECT_HIT
    return _TAIL_HIT


class GitIgnoreExclusionRules(BaseExclusionRules):
    """One layer of ignore rules using .gitignore pattern syntax.

    Patterns are compiled with the pathspec library and matched the way Git
    matches them:
    - Basic globs (*, ?, [abc], [0-9], etc.)
    - Directory-only patterns (ending in /)
    - Negation patterns (starting with !)
    - Anchored patterns (leading / or a slash in the middle)
    - Double-asterisk matching (**)
    - Comment lines (starting with #)

    Inside a layer the last matching pattern decides, so a later negation can
    re-include a path excluded by an earlier, broader pattern. A pattern that
    only matches one of the path's parent directories ranks below a pattern
    matching the path itself, so "*.txt" followed by "!docs/" still excludes
    "docs/a.txt", as Git does.

    A layer may be anchored at a base directory. Absolute paths handed to
    match() are then made relative to that directory first, which is how a
    nested .gitignore only speaks about its own subtree. Paths outside the
    base directory are not matched at all.

    Attributes:
        spec (PathSpec): Compiled pattern matcher from the pathspec library.
        base_dir (Optional[Path]): Directory the patterns are relative to.
        source (str): Where the patterns came from, for diagnostics.

    Example:
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule("*.log")
        >>> rules.add_rule("!keep.log")
        >>> rules.exclude("app.log")
        True
        >>> rules.exclude("keep.log")
        False

    Note:
        Relative paths handed to match() should use forward slashes (/) as
        separators, even on Windows, to match Git's behavior.
    """

    def __init__(
        self,
        rules_files: Optional[Union[PathType, Sequence[PathType]]] = None,
        *,
        base_dir: Optional[PathType] = None,
        source: str = "<patterns>",
    ):
        """Initialize with patterns from the specified files.

        Args:
            rules_files: Path(s) to the file(s) containing .gitignore patterns.
            base_dir: Directory the patterns are anchored at. When None,
                paths are matched exactly as given.
            source: Label describing where the patterns came from.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        self.spec = PathSpec.from_lines(GitWildMatchPattern, [])
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.source = source

        if rules_files is not None:
            self.load_rules(rules_files)

    def __repr__(self) -> str:
        return f"GitIgnoreExclusionRules(source={self.source!r}, patterns={len(self._patterns())})"

    def _patterns(self) -> List[GitWildMatchPattern]:
        # Ensure patterns is a list that supports append/extend
        if not isinstance(self.spec.patterns, list):
            self.spec.patterns = list(self.spec.patterns)
        return self.spec.patterns

    def _candidate(self, path: PathType) -> Optional[str]:
        """Express a path in the form the patterns are written against."""
        pure = PurePath(path)
        if self.base_dir is not None and pure.is_absolute():
            try:
                pure = pure.relative_to(self.base_dir)
            except ValueError:
                return None
        candidate = pure.as_posix()
        if candidate in ("", "."):
            return None
        return candidate

    def match(self, path: PathType, is_dir: bool = False) -> Optional[bool]:
        """Evaluate a path against the loaded patterns.

        Args:
            path: Path to check. Absolute paths are made relative to base_dir
                when one is set; relative paths are used as they are.
            is_dir: Whether the path names a directory.

        Returns:
            True if the last matching pattern excludes the path, False if it is
            a negation, None if no pattern matches or the path lies outside
            base_dir.

        Example:
            >>> rules = GitIgnoreExclusionRules()
            >>> rules.add_rule("build/")
            >>> rules.match("build", is_dir=True)
            True
            >>> print(rules.match("build", is_dir=False))
            None
        """
        candidate = self._candidate(path)
        if candidate is None:
            return None
        if is_dir and not candidate.endswith("/"):
            candidate += "/"

        decision: Optional[bool] = None
        decision_priority = 0
        for pattern in self._patterns():
            if pattern.include is None:
                continue
            result = pattern.match_file(candidate)
            if result is None:
                continue

            priority = _hit_priority(result.match, candidate, is_dir)
            if (pattern.include and priority == _TAIL_HIT) or priority >= decision_priority:
                decision = pattern.include
                decision_priority = priority
        return decision

    def has_rules(self) -> bool:
        """Check whether any effective pattern has been loaded."""
        return any(pattern.include is not None for pattern in self._patterns())

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load and append .gitignore patterns from one or more files.

        Patterns are appended in the order the files are given, so patterns
        from later files take precedence over earlier ones.

        Args:
            rules_files: Path(s) to file(s) containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
            UnicodeDecodeError: If a rules file is not valid UTF-8.
            ValueError: If a pattern is malformed.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")

            with open(path, "r", encoding="utf-8") as f:
                gitignore_content = f.read().splitlines()

            new_patterns = PathSpec.from_lines(GitWildMatchPattern, gitignore_content).patterns
            self._patterns().extend(new_patterns)

    def add_rule(self, rule: str) -> None:
        """Add a single .gitignore pattern directly.

        Args:
            rule: A single .gitignore pattern (e.g., "*.pyc", "node_modules/",
                 "!important.txt").

        Example:
            >>> rules = GitIgnoreExclusionRules()
            >>> rules.add_rule("*.pyc")
            >>> rules.add_rule("!important.pyc")
            >>> rules.exclude("important.pyc")
            False
        """
        self._patterns().append(GitWildMatchPattern(rule))

    def anchored_at(self, base_dir: PathType) -> "GitIgnoreExclusionRules":
        """Return a copy of this layer anchored at another directory.

        The compiled patterns are shared; neither layer is modified afterwards.

        Args:
            base_dir: New directory the patterns are relative to.
        """
        layer = GitIgnoreExclusionRules(base_dir=base_dir, source=self.source)
        layer._patterns().extend(self._patterns())
        return layer
