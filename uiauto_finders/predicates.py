# uiauto_finders/predicates.py
"""
@file predicates.py
@brief Element predicates: attribute tests, combinators and tree relations.

A predicate is any callable taking a UiElement and returning bool. It must
not raise and must not change the element.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Callable

from .node import Attribute, UiElement, Visibility

Predicate = Callable[[UiElement], bool]


def always_true(element: UiElement) -> bool:
    """Canonical predicate used when a finder is built without one."""
    return True


class MatchStrategy(Enum):
    """How an attribute value is compared with the expected value."""
    EQUALS = "equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts with"
    ENDS_WITH = "ends with"
    MATCHES = "matches"

    def __str__(self) -> str:
        return self.value

    def apply(self, actual: Any, expected: Any) -> bool:
        if actual is None:
            return False
        if self is MatchStrategy.EQUALS:
            return actual == expected
        text = str(actual)
        if self is MatchStrategy.CONTAINS:
            return str(expected) in text
        if self is MatchStrategy.STARTS_WITH:
            return text.startswith(str(expected))
        if self is MatchStrategy.ENDS_WITH:
            return text.endswith(str(expected))
        return re.search(str(expected), text) is not None


def attribute_predicate(
    attribute: Attribute,
    expected: Any,
    strategy: MatchStrategy = MatchStrategy.EQUALS,
) -> Predicate:
    """
    Test one attribute of the element against an expected value.

    MATCHES patterns are compiled here: a bad or non-string pattern fails
    at construction with ValueError or re.error.
    """
    if strategy is MatchStrategy.MATCHES:
        if not isinstance(expected, str):
            raise ValueError(
                f"{attribute} {strategy}: pattern must be a string, got {type(expected).__name__}"
            )
        pattern = re.compile(expected)

        def _search(element: UiElement) -> bool:
            value = element.get_attribute(attribute)
            return value is not None and pattern.search(str(value)) is not None

        return _search

    def _test(element: UiElement) -> bool:
        return strategy.apply(element.get_attribute(attribute), expected)

    return _test


def all_of(*predicates: Predicate) -> Predicate:
    def _test(element: UiElement) -> bool:
        return all(p(element) for p in predicates)
    return _test


def any_of(*predicates: Predicate) -> Predicate:
    def _test(element: UiElement) -> bool:
        return any(p(element) for p in predicates)
    return _test


def not_(predicate: Predicate) -> Predicate:
    def _test(element: UiElement) -> bool:
        return not predicate(element)
    return _test


# =========================================================
# Tree relations
# =========================================================

def with_parent(predicate: Predicate) -> Predicate:
    """Matches elements whose direct parent satisfies predicate."""
    def _test(element: UiElement) -> bool:
        parent = element.get_parent()
        return parent is not None and predicate(parent)
    return _test


def with_ancestor(predicate: Predicate) -> Predicate:
    """Matches elements with any ancestor satisfying predicate."""
    def _test(element: UiElement) -> bool:
        ancestor = element.get_parent()
        while ancestor is not None:
            if predicate(ancestor):
                return True
            ancestor = ancestor.get_parent()
        return False
    return _test


def with_child(predicate: Predicate) -> Predicate:
    """Matches elements with a visible direct child satisfying predicate."""
    def _test(element: UiElement) -> bool:
        return any(predicate(child) for child in element.get_children(Visibility.VISIBLE))
    return _test


def with_descendant(predicate: Predicate) -> Predicate:
    """Matches elements with a reachable (visible) descendant satisfying predicate."""
    def _reachable(element: UiElement) -> bool:
        if predicate(element):
            return True
        return any(_reachable(child) for child in element.get_children(Visibility.VISIBLE))

    def _test(element: UiElement) -> bool:
        return any(_reachable(child) for child in element.get_children(Visibility.VISIBLE))
    return _test


def with_sibling(predicate: Predicate) -> Predicate:
    """Matches elements with a visible sibling (other than itself) satisfying predicate."""
    def _test(element: UiElement) -> bool:
        parent = element.get_parent()
        if parent is None:
            return False
        return any(
            predicate(sibling)
            for sibling in parent.get_children(Visibility.VISIBLE)
            if sibling is not element
        )
    return _test
