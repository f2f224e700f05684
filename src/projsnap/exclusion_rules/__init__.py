"""Ignore rules for filtering files and directories."""

from .base_rules import BaseExclusionRules
from .git_rules import GitIgnoreExclusionRules
from .resolver import RuleSetResolver
from .rule_chain import IgnoreRuleChain

__all__ = [
    "BaseExclusionRules",
    "GitIgnoreExclusionRules",
    "IgnoreRuleChain",
    "RuleSetResolver",
]
