from abc import ABC, abstractmethod
from typing import Optional, Sequence, Union

from projsnap.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for ignore rules.

    Ignore rules answer a three-way question for a path: it is explicitly
    excluded (True), explicitly re-included by a negation (False), or the rules
    have nothing to say about it (None). The tri-state answer is what lets
    several layers of rules be stacked with gitignore precedence: the first
    layer with an opinion wins, and silence defers to the next layer.

    Example:
        >>> from projsnap.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule('*.pyc')
        >>> rules.exclude('test.pyc')
        True
        >>> print(rules.match('test.py'))
        None
    """

    @abstractmethod
    def match(self, path: PathType, is_dir: bool = False) -> Optional[bool]:
        """
        Evaluate a path against the rules.

        Args:
            path: The file or directory path to check.
            is_dir: Whether the path names a directory. Directory-only patterns
                (those ending in a slash) only apply when this is True.

        Returns:
            True if the path is excluded, False if a negation re-includes it,
            None if no rule matches.
        """
        pass

    def exclude(self, path: PathType, is_dir: bool = False) -> bool:
        """
        Determine if a given path should be excluded.

        Args:
            path: The file or directory path to check.
            is_dir: Whether the path names a directory.

        Returns:
            bool: True if the path should be excluded, False if it should be included.
        """
        return self.match(path, is_dir) is True

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load and parse rules from one or more files.

        Args:
            rules_files: Path to a file or sequence of paths containing rules.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
            FileNotFoundError: If any rules file does not exist (for file-supporting rule types).
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single rule directly.

        Args:
            rule (str): The rule to add, e.g. a gitignore pattern like "*.pyc".

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
