"""Layered ignore rules with gitignore precedence."""

from pathlib import PurePath
from typing import Iterable, Optional, Sequence, Tuple

from projsnap.types import PathType

from .base_rules import BaseExclusionRules

VCS_DIRECTORY = ".git"


class IgnoreRuleChain(BaseExclusionRules):
    """An immutable stack of ignore rule layers for one position in the tree.

    Layers are grouped by origin. In increasing order of precedence:

    1. global layers (the user's global excludes file)
    2. repository layers (``.git/info/exclude``)
    3. directory layers, outermost directory first; the root's parents, the
       root, then every directory the walk has descended into
    4. override layers (patterns given explicitly by the caller)
    5. the version-control metadata directory, which is always excluded

    The first layer, counted from the highest precedence, that has an opinion
    about a path decides. A chain is never modified: extended() returns a new
    chain, so a chain can be handed to several worker threads at once.

    Attributes:
        root (PurePath): Absolute path of the scan root.

    Example:
        >>> from projsnap.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> outer = GitIgnoreExclusionRules(base_dir="/project")
        >>> outer.add_rule("*.log")
        >>> inner = GitIgnoreExclusionRules(base_dir="/project/logs")
        >>> inner.add_rule("!keep.log")
        >>> chain = IgnoreRuleChain("/project", directory_layers=[outer, inner])
        >>> chain.exclude("/project/app.log")
        True
        >>> chain.exclude("/project/logs/keep.log")
        False
        >>> chain.exclude("/project/.git", is_dir=True)
        True
    """

    def __init__(
        self,
        root: PathType,
        *,
        global_layers: Iterable[BaseExclusionRules] = (),
        repository_layers: Iterable[BaseExclusionRules] = (),
        directory_layers: Iterable[BaseExclusionRules] = (),
        override_layers: Iterable[BaseExclusionRules] = (),
    ) -> None:
        self.root = PurePath(root)
        self._global_layers: Tuple[BaseExclusionRules, ...] = tuple(global_layers)
        self._repository_layers: Tuple[BaseExclusionRules, ...] = tuple(repository_layers)
        self._directory_layers: Tuple[BaseExclusionRules, ...] = tuple(directory_layers)
        self._override_layers: Tuple[BaseExclusionRules, ...] = tuple(override_layers)

    @property
    def layers(self) -> Tuple[BaseExclusionRules, ...]:
        """All user-visible layers in increasing order of precedence."""
        return self._global_layers + self._repository_layers + self._directory_layers + self._override_layers

    def extended(self, directory_layers: Sequence[BaseExclusionRules]) -> "IgnoreRuleChain":
        """Return a new chain with deeper directory layers appended.

        Args:
            directory_layers: Layers of a directory below every directory
                already in the chain, in increasing order of precedence.
        """
        if not directory_layers:
            return self
        return IgnoreRuleChain(
            self.root,
            global_layers=self._global_layers,
            repository_layers=self._repository_layers,
            directory_layers=self._directory_layers + tuple(directory_layers),
            override_layers=self._override_layers,
        )

    def is_vcs_metadata(self, path: PathType, is_dir: bool = False) -> bool:
        """Check whether a path is, or lies inside, a version-control metadata directory."""
        pure = PurePath(path)
        if pure.is_absolute():
            try:
                pure = pure.relative_to(self.root)
            except ValueError:
                return False
        parts = pure.parts
        if not parts:
            return False
        if VCS_DIRECTORY in parts[:-1]:
            return True
        return is_dir and parts[-1] == VCS_DIRECTORY

    def match(self, path: PathType, is_dir: bool = False) -> Optional[bool]:
        """Evaluate a path against every layer, highest precedence first.

        Args:
            path: Absolute path of the entry, or a path relative to the root.
            is_dir: Whether the entry is a directory.

        Returns:
            True if excluded, False if explicitly re-included, None if no layer
            matched.
        """
        if self.is_vcs_metadata(path, is_dir):
            return True

        pure = PurePath(path)
        if not pure.is_absolute():
            pure = self.root / pure

        for layer in reversed(self.layers):
            decision = layer.match(pure, is_dir)
            if decision is not None:
                return decision
        return None
