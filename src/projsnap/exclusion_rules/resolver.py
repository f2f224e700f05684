"""Discovery of the ignore rule layers that apply to a scan root."""

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence

from projsnap.types import PathType

from .git_rules import GitIgnoreExclusionRules
from .rule_chain import VCS_DIRECTORY, IgnoreRuleChain

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_FILENAMES = (".gitignore", ".ignore")


def _config_home() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path(os.path.expanduser("~")) / ".config"


def _read_excludes_file_setting(config_file: Path) -> Optional[str]:
    """Return the value of core.excludesFile from one git config file, if set."""
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except (OSError, ValueError) as e:
        logger.debug("Skipping git config %s: %s", config_file, e)
        return None

    section = ""
    value = None
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line[0] in "#;":
            continue
        if line.startswith("["):
            section = line[1:].split("]", 1)[0].split(None, 1)[0].split(".", 1)[0].lower()
            continue
        if section != "core" or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        if key.strip().lower() == "excludesfile":
            value = raw_value.strip().strip('"')
    return value


def find_global_excludes_file() -> Optional[Path]:
    """Locate the user's global git excludes file.

    The file named by ``core.excludesFile`` wins; the last git config file
    that sets it (``$XDG_CONFIG_HOME/git/config``, then ``~/.gitconfig``) takes
    precedence, as it does for git itself. Without the setting the default
    ``$XDG_CONFIG_HOME/git/ignore`` is used.

    Returns:
        The path of the excludes file, or None if it does not exist.
    """
    configured = None
    for config_file in (_config_home() / "git" / "config", Path(os.path.expanduser("~")) / ".gitconfig"):
        value = _read_excludes_file_setting(config_file)
        if value:
            configured = value

    candidate = Path(os.path.expanduser(configured)) if configured else _config_home() / "git" / "ignore"
    return candidate if candidate.is_file() else None


def find_repository_root(start: Path) -> Optional[Path]:
    """Find the innermost directory at or above ``start`` that holds a .git entry."""
    for directory in (start, *start.parents):
        if (directory / VCS_DIRECTORY).exists():
            return directory
    return None


class RuleSetResolver:
    """Builds the ignore rule chain for a scan root.

    The resolver is constructed per scan with explicit inputs and holds no
    global state. Layers that cannot be read (missing permissions, bad
    encoding, malformed patterns) are logged and contribute no rules; they
    never abort a scan. A git repository is not required: without one, only
    the ignore files found in the directory tree apply.

    Attributes:
        root (Path): The scan root as given.
        root_abs (Path): Absolute, lexically normalized scan root.
        repository_root (Optional[Path]): Work tree containing the root, if any.

    Example:
        >>> resolver = RuleSetResolver(".", use_global=False)  # doctest: +SKIP
        >>> chain = resolver.resolve()  # doctest: +SKIP
        >>> chain.exclude(resolver.root_abs / ".git", is_dir=True)  # doctest: +SKIP
        True
    """

    def __init__(
        self,
        root: PathType,
        *,
        overrides: Optional[GitIgnoreExclusionRules] = None,
        use_global: bool = True,
        use_repo_exclude: bool = True,
        use_parents: bool = True,
        global_excludes_file: Optional[PathType] = None,
        ignore_filenames: Sequence[str] = DEFAULT_IGNORE_FILENAMES,
    ) -> None:
        """Initialize the resolver.

        Args:
            root: Directory the scan starts from.
            overrides: Explicit patterns that take precedence over every
                ignore file. They are anchored at the root.
            use_global: Whether to apply the user's global excludes file.
            use_repo_exclude: Whether to apply the repository's
                ``.git/info/exclude``.
            use_parents: Whether to apply ignore files found in the root's
                parent directories.
            global_excludes_file: Explicit global excludes file, bypassing
                discovery through the git configuration.
            ignore_filenames: Names of per-directory ignore files, in
                increasing order of precedence.
        """
        self.root = Path(root)
        self.root_abs = Path(os.path.abspath(self.root))
        self.overrides = overrides
        self.use_global = use_global
        self.use_repo_exclude = use_repo_exclude
        self.use_parents = use_parents
        self.global_excludes_file = Path(global_excludes_file) if global_excludes_file is not None else None
        self.ignore_filenames = tuple(ignore_filenames)
        self.repository_root = find_repository_root(self.root_abs)

    def _load_layer(self, rules_file: Path, base_dir: Path) -> Optional[GitIgnoreExclusionRules]:
        try:
            if not rules_file.is_file():
                return None
            layer = GitIgnoreExclusionRules(rules_file, base_dir=base_dir, source=str(rules_file))
        except (OSError, ValueError) as e:
            logger.debug("Ignoring unreadable rules file %s: %s", rules_file, e)
            return None
        return layer if layer.has_rules() else None

    def load_directory_layers(self, directory: PathType) -> List[GitIgnoreExclusionRules]:
        """Load the ignore files of one directory.

        Args:
            directory: Absolute path of the directory.

        Returns:
            The directory's layers in increasing order of precedence. Missing
            or unreadable files are left out.
        """
        base_dir = Path(directory)
        layers = []
        for filename in self.ignore_filenames:
            layer = self._load_layer(base_dir / filename, base_dir)
            if layer is not None:
                layers.append(layer)
        return layers

    def _global_layers(self) -> List[GitIgnoreExclusionRules]:
        if not self.use_global:
            return []
        excludes_file = self.global_excludes_file or find_global_excludes_file()
        if excludes_file is None:
            return []
        layer = self._load_layer(excludes_file, self.repository_root or self.root_abs)
        return [layer] if layer is not None else []

    def _repository_layers(self) -> List[GitIgnoreExclusionRules]:
        if not self.use_repo_exclude or self.repository_root is None:
            return []
        git_dir = self.repository_root / VCS_DIRECTORY
        if not git_dir.is_dir():
            return []
        layer = self._load_layer(git_dir / "info" / "exclude", self.repository_root)
        return [layer] if layer is not None else []

    def _parent_directories(self) -> List[Path]:
        """Ancestors of the root whose ignore files apply, outermost first."""
        if not self.use_parents:
            return []
        parents = []
        for parent in self.root_abs.parents:
            if self.repository_root is not None and self.repository_root not in (parent, *parent.parents):
                break
            parents.append(parent)
        return list(reversed(parents))

    def resolve(self) -> IgnoreRuleChain:
        """Build the chain that applies to entries directly inside the root.

        Returns:
            An IgnoreRuleChain with the global, repository, parent, root and
            override layers. Chains for deeper directories are derived from it
            with ``chain.extended(resolver.load_directory_layers(directory))``.
        """
        directory_layers: List[GitIgnoreExclusionRules] = []
        for directory in self._parent_directories():
            directory_layers.extend(self.load_directory_layers(directory))
        directory_layers.extend(self.load_directory_layers(self.root_abs))

        override_layers = []
        if self.overrides is not None and self.overrides.has_rules():
            override_layers.append(self.overrides.anchored_at(self.root_abs))

        chain = IgnoreRuleChain(
            self.root_abs,
            global_layers=self._global_layers(),
            repository_layers=self._repository_layers(),
            directory_layers=directory_layers,
            override_layers=override_layers,
        )
        logger.debug("Resolved %d ignore rule layer(s) for %s", len(chain.layers), self.root_abs)
        return chain
