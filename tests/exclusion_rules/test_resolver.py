"""Unit tests for RuleSetResolver layer discovery."""

import os
from pathlib import Path

import pytest

from projsnap.exclusion_rules.git_rules import GitIgnoreExclusionRules
from projsnap.exclusion_rules.resolver import (
    RuleSetResolver,
    find_global_excludes_file,
    find_repository_root,
)


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "workspace" / "project"
    root.mkdir(parents=True)
    return root


def test_no_ignore_files_and_no_repository(project):
    resolver = RuleSetResolver(project, use_global=False)
    chain = resolver.resolve()

    assert resolver.repository_root is None
    assert chain.layers == ()
    assert not chain.exclude(project / "anything.txt")
    assert not chain.exclude(project / ".env")
    assert chain.exclude(project / ".git", is_dir=True)


def test_root_ignore_files(project):
    (project / ".gitignore").write_text("*.log\n!keep.log\n")
    (project / ".ignore").write_text("keep.log\n")
    chain = RuleSetResolver(project).resolve()

    assert chain.exclude(project / "app.log")
    # .ignore takes precedence over .gitignore in the same directory
    assert chain.exclude(project / "keep.log")


def test_load_directory_layers_skips_missing_files(project):
    (project / "sub").mkdir()
    (project / "sub" / ".gitignore").write_text("*.tmp\n")
    resolver = RuleSetResolver(project)

    layers = resolver.load_directory_layers(project / "sub")
    assert len(layers) == 1
    assert layers[0].base_dir == project / "sub"
    assert resolver.load_directory_layers(project) == []


def test_parent_ignore_files_apply_without_repository(project):
    (project.parent / ".gitignore").write_text("*.secret\n")
    chain = RuleSetResolver(project).resolve()
    assert chain.exclude(project / "db.secret")

    chain = RuleSetResolver(project, use_parents=False).resolve()
    assert not chain.exclude(project / "db.secret")


def test_parent_patterns_are_anchored_at_their_directory(project):
    (project.parent / ".gitignore").write_text("/project/generated/\n")
    chain = RuleSetResolver(project).resolve()
    assert chain.exclude(project / "generated", is_dir=True)
    assert not chain.exclude(project / "src" / "generated", is_dir=True)


def test_parent_search_stops_at_repository_root(tmp_path):
    outer = tmp_path / "outer"
    repo = outer / "repo"
    root = repo / "pkg"
    (repo / ".git" / "info").mkdir(parents=True)
    root.mkdir()
    (outer / ".gitignore").write_text("*.py\n")
    (repo / ".gitignore").write_text("*.log\n")

    resolver = RuleSetResolver(root)
    chain = resolver.resolve()

    assert resolver.repository_root == repo
    assert chain.exclude(root / "debug.log")
    assert not chain.exclude(root / "main.py")


def test_repository_exclude_file(tmp_path):
    (tmp_path / ".git" / "info").mkdir(parents=True)
    (tmp_path / ".git" / "info" / "exclude").write_text("local-only.txt\n")

    chain = RuleSetResolver(tmp_path).resolve()
    assert chain.exclude(tmp_path / "local-only.txt")

    chain = RuleSetResolver(tmp_path, use_repo_exclude=False).resolve()
    assert not chain.exclude(tmp_path / "local-only.txt")


def test_repository_exclude_has_lower_precedence_than_gitignore(tmp_path):
    (tmp_path / ".git" / "info").mkdir(parents=True)
    (tmp_path / ".git" / "info" / "exclude").write_text("*.txt\n")
    (tmp_path / ".gitignore").write_text("!notes.txt\n")

    chain = RuleSetResolver(tmp_path).resolve()
    assert not chain.exclude(tmp_path / "notes.txt")
    assert chain.exclude(tmp_path / "other.txt")


def test_explicit_global_excludes_file(project, tmp_path):
    global_file = tmp_path / "global-ignore"
    global_file.write_text("*.swp\n")

    chain = RuleSetResolver(project, global_excludes_file=global_file).resolve()
    assert chain.exclude(project / "main.py.swp")

    chain = RuleSetResolver(project, global_excludes_file=global_file, use_global=False).resolve()
    assert not chain.exclude(project / "main.py.swp")


def test_global_excludes_default_location(project, isolated_git_config):
    ignore_file = isolated_git_config / ".config" / "git" / "ignore"
    ignore_file.parent.mkdir(parents=True)
    ignore_file.write_text(".DS_Store\n")

    assert find_global_excludes_file() == ignore_file
    chain = RuleSetResolver(project).resolve()
    assert chain.exclude(project / ".DS_Store")


def test_global_excludes_from_gitconfig(project, isolated_git_config):
    excludes = isolated_git_config / "my-excludes"
    excludes.write_text("*.orig\n")
    (isolated_git_config / ".gitconfig").write_text(
        "[user]\n\tname = Someone\n[core]\n\tautocrlf = input\n\texcludesFile = ~/my-excludes\n"
    )

    assert find_global_excludes_file() == excludes
    chain = RuleSetResolver(project).resolve()
    assert chain.exclude(project / "merge.orig")


def test_global_excludes_missing_file_is_ignored(project, isolated_git_config):
    (isolated_git_config / ".gitconfig").write_text('[core]\n    excludesfile = "~/does-not-exist"\n')
    assert find_global_excludes_file() is None
    assert RuleSetResolver(project).resolve().layers == ()


def test_overrides_are_anchored_at_root(project):
    overrides = GitIgnoreExclusionRules(source="command line")
    overrides.add_rule("/top.txt")
    (project / ".gitignore").write_text("*.md\n")
    overrides.add_rule("!README.md")

    chain = RuleSetResolver(project, overrides=overrides).resolve()
    assert chain.exclude(project / "top.txt")
    assert not chain.exclude(project / "nested" / "top.txt")
    assert not chain.exclude(project / "README.md")
    assert chain.exclude(project / "CHANGES.md")


def test_overrides_cannot_reinclude_git_directory(project):
    overrides = GitIgnoreExclusionRules()
    overrides.add_rule("!.git/")
    chain = RuleSetResolver(project, overrides=overrides).resolve()
    assert chain.exclude(project / ".git", is_dir=True)


def test_unreadable_ignore_file_contributes_no_rules(project):
    (project / ".gitignore").write_bytes(b"\xff\xfe\xfa*.py\n")
    (project / ".ignore").write_text("*.log\n")

    chain = RuleSetResolver(project).resolve()
    assert not chain.exclude(project / "main.py")
    assert chain.exclude(project / "app.log")


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root can read anything")
def test_permission_denied_ignore_file_contributes_no_rules(project):
    gitignore = project / ".gitignore"
    gitignore.write_text("*.py\n")
    gitignore.chmod(0)
    try:
        chain = RuleSetResolver(project).resolve()
        assert not chain.exclude(project / "main.py")
    finally:
        gitignore.chmod(0o644)


def test_find_repository_root(tmp_path):
    (tmp_path / "repo" / ".git").mkdir(parents=True)
    (tmp_path / "repo" / "a" / "b").mkdir(parents=True)

    assert find_repository_root(tmp_path / "repo" / "a" / "b") == tmp_path / "repo"
    assert find_repository_root(tmp_path / "repo") == tmp_path / "repo"


def test_relative_root_is_made_absolute(project, monkeypatch):
    monkeypatch.chdir(project)
    resolver = RuleSetResolver(".")
    assert resolver.root == Path(".")
    assert resolver.root_abs == Path(os.path.abspath("."))
