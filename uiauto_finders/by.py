# uiauto_finders/by.py
"""
@file by.py
@brief Convenience factory for common finders.

Usage:
    from uiauto_finders import by

    ok = by.all_of(by.control_type("Button"), by.name("OK"))
    dialog_ok = by.chain(by.auto_id("confirmDialog"), ok)
"""

from __future__ import annotations

from typing import Any, Sequence

from . import predicates
from .finders import ChainFinder, Finder, MatchFinder
from .node import Attribute
from .predicates import MatchStrategy, Predicate


def _describe(kind: str, finders: Sequence[MatchFinder]) -> str:
    return kind + "{" + ", ".join(str(f) for f in finders) + "}"


def _require_match_finders(kind: str, finders: Sequence[Any]) -> None:
    if not finders:
        raise ValueError(f"{kind} needs at least one finder")
    for f in finders:
        if not isinstance(f, MatchFinder):
            raise TypeError(f"{kind} accepts MatchFinder only, got: {type(f).__name__}")


# =========================================================
# Attribute finders
# =========================================================

def attribute(
    attr: Attribute,
    expected: Any,
    strategy: MatchStrategy = MatchStrategy.EQUALS,
) -> MatchFinder:
    """Matches elements whose attr compares to expected under strategy."""
    return MatchFinder(
        predicates.attribute_predicate(attr, expected, strategy),
        f"ByAttribute{{{attr} {strategy} {expected}}}",
    )


def name(value: str) -> MatchFinder:
    return attribute(Attribute.NAME, value)


def name_regex(pattern: str) -> MatchFinder:
    return attribute(Attribute.NAME, pattern, MatchStrategy.MATCHES)


def name_contains(value: str) -> MatchFinder:
    return attribute(Attribute.NAME, value, MatchStrategy.CONTAINS)


def title(value: str) -> MatchFinder:
    return attribute(Attribute.TITLE, value)


def title_regex(pattern: str) -> MatchFinder:
    return attribute(Attribute.TITLE, pattern, MatchStrategy.MATCHES)


def auto_id(value: str) -> MatchFinder:
    return attribute(Attribute.AUTO_ID, value)


def control_type(value: str) -> MatchFinder:
    return attribute(Attribute.CONTROL_TYPE, value)


def class_name(value: str) -> MatchFinder:
    return attribute(Attribute.CLASS_NAME, value)


def enabled(value: bool = True) -> MatchFinder:
    return attribute(Attribute.ENABLED, value)


def focused(value: bool = True) -> MatchFinder:
    return attribute(Attribute.FOCUSED, value)


def selected(value: bool = True) -> MatchFinder:
    return attribute(Attribute.SELECTED, value)


def checked(value: bool = True) -> MatchFinder:
    return attribute(Attribute.CHECKED, value)


def predicate(test: Predicate, description: str) -> MatchFinder:
    """Wrap an arbitrary predicate with a caller-supplied description."""
    return MatchFinder(test, description)


def anything() -> MatchFinder:
    """Matches the search root itself."""
    return MatchFinder(None, "ByAny{}")


# =========================================================
# Composites (combine members via matches(), never re-traverse)
# =========================================================

def any_of(*finders: MatchFinder) -> MatchFinder:
    """Matches elements accepted by at least one of finders."""
    _require_match_finders("AnyOf", finders)
    return MatchFinder(
        predicates.any_of(*(f.matches for f in finders)),
        lambda: _describe("AnyOf", finders),
    )


def all_of(*finders: MatchFinder) -> MatchFinder:
    """Matches elements accepted by every one of finders."""
    _require_match_finders("AllOf", finders)
    return MatchFinder(
        predicates.all_of(*(f.matches for f in finders)),
        lambda: _describe("AllOf", finders),
    )


def not_(finder: MatchFinder) -> MatchFinder:
    _require_match_finders("Not", (finder,))
    return MatchFinder(predicates.not_(finder.matches), lambda: _describe("Not", (finder,)))


def with_parent(parent: MatchFinder) -> MatchFinder:
    _require_match_finders("ByParent", (parent,))
    return MatchFinder(
        predicates.with_parent(parent.matches),
        lambda: _describe("ByParent", (parent,)),
    )


def with_ancestor(ancestor: MatchFinder) -> MatchFinder:
    _require_match_finders("ByAncestor", (ancestor,))
    return MatchFinder(
        predicates.with_ancestor(ancestor.matches),
        lambda: _describe("ByAncestor", (ancestor,)),
    )


def with_child(child: MatchFinder) -> MatchFinder:
    _require_match_finders("ByChild", (child,))
    return MatchFinder(
        predicates.with_child(child.matches),
        lambda: _describe("ByChild", (child,)),
    )


def with_descendant(descendant: MatchFinder) -> MatchFinder:
    _require_match_finders("ByDescendant", (descendant,))
    return MatchFinder(
        predicates.with_descendant(descendant.matches),
        lambda: _describe("ByDescendant", (descendant,)),
    )


def with_sibling(sibling: MatchFinder) -> MatchFinder:
    _require_match_finders("BySibling", (sibling,))
    return MatchFinder(
        predicates.with_sibling(sibling.matches),
        lambda: _describe("BySibling", (sibling,)),
    )


def chain(*finders: Finder) -> ChainFinder:
    """Search with each finder inside the element found by the previous one."""
    return ChainFinder(finders)
