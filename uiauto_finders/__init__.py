# uiauto_finders/__init__.py
"""
uiauto-finders - locate elements in hierarchical UI trees.

This package provides:
- Finders: MatchFinder (depth-first, pre-order, visible-only search) and ChainFinder
- by: factory for attribute, composite and relational finders
- Snapshot: YAML/JSON tree loading into in-memory elements
- Repository/Resolver: object-map finders resolved with timeouts
- Exceptions: common exception types
"""

from uiauto_finders import by
from uiauto_finders.config import TimeConfig, TimeoutSettings
from uiauto_finders.exceptions import (
    UIAutoError,
    ConfigError,
    TimeoutError,
    ElementNotFoundError,
)
from uiauto_finders.finders import ChainFinder, Finder, FindResult, MatchFinder, log_match
from uiauto_finders.node import Attribute, UiElement, Visibility, build_path
from uiauto_finders.predicates import MatchStrategy, always_true
from uiauto_finders.repository import Repository, finder_from_locator
from uiauto_finders.resolver import Resolver
from uiauto_finders.snapshot import TreeElement, load_tree, tree_from_dict, tree_to_dict

__all__ = [
    "by",
    "TimeConfig",
    "TimeoutSettings",
    "UIAutoError",
    "ConfigError",
    "TimeoutError",
    "ElementNotFoundError",
    "ChainFinder",
    "Finder",
    "FindResult",
    "MatchFinder",
    "log_match",
    "Attribute",
    "UiElement",
    "Visibility",
    "build_path",
    "MatchStrategy",
    "always_true",
    "Repository",
    "finder_from_locator",
    "Resolver",
    "TreeElement",
    "load_tree",
    "tree_from_dict",
    "tree_to_dict",
]

__version__ = "1.0.0"
