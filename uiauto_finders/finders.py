# uiauto_finders/finders.py
"""
@file finders.py
@brief Finder interface and the tree-walking MatchFinder.

A MatchFinder walks the element tree depth-first, pre-order, over visible
children only, and returns the first element its predicate accepts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from .actionlogger import ACTION_LOGGER
from .exceptions import ElementNotFoundError
from .node import UiElement, Visibility, build_path
from .predicates import Predicate, always_true

Description = Union[str, Callable[[], str]]
MatchObserver = Callable[["Finder", UiElement], None]


@dataclass(frozen=True)
class FindResult:
    """Outcome of a search: found with an element, or not found."""
    found: bool
    element: Optional[UiElement] = None

    @classmethod
    def of(cls, element: UiElement) -> FindResult:
        return cls(found=True, element=element)

    @classmethod
    def not_found(cls) -> FindResult:
        return _NOT_FOUND


_NOT_FOUND = FindResult(found=False)


def log_match(finder: "Finder", element: UiElement) -> None:
    """Default match observer: reports the match to the action logger."""
    if not ACTION_LOGGER.is_enabled():
        return
    ACTION_LOGGER.log(
        action="find",
        event="match",
        finder=str(finder),
        element=str(element),
        path=build_path(element),
    )


class Finder(ABC):
    """
    Abstract finder interface.

    Concrete finders search an element tree for one element and describe
    themselves through __str__ for error messages and logs.
    """

    @abstractmethod
    def find(self, context: UiElement) -> UiElement:
        """
        Find an element starting at context.

        Args:
            context: Root of the search, tested before its children

        Returns:
            The matching element

        Raises:
            ElementNotFoundError: nothing reachable matches; references self
        """
        pass

    @abstractmethod
    def __str__(self) -> str:
        """Human-readable description, e.g. 'ByAttribute{name equals OK}'."""
        pass

    def search(self, context: UiElement) -> FindResult:
        """Non-raising form of find()."""
        try:
            return FindResult.of(self.find(context))
        except ElementNotFoundError:
            return FindResult.not_found()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"


class MatchFinder(Finder):
    """
    Traverses the element tree and returns the first element satisfying
    the predicate.

    Args:
        predicate: Element test; None means match anything
        description: String or zero-argument callable returning the description
        on_match: Observer called as on_match(finder, element) once per match;
            defaults to log_match
    """

    def __init__(
        self,
        predicate: Optional[Predicate],
        description: Description,
        *,
        on_match: Optional[MatchObserver] = None,
    ):
        self._predicate: Predicate = predicate if predicate is not None else always_true
        self._description = description
        self._on_match: MatchObserver = on_match if on_match is not None else log_match

    @property
    def predicate(self) -> Predicate:
        return self._predicate

    def __str__(self) -> str:
        if callable(self._description):
            return self._description()
        return self._description

    def matches(self, element: UiElement) -> bool:
        """
        Test exactly this element, without traversal or observer calls.

        Composite finders use this to combine members without re-walking
        the tree.
        """
        return bool(self._predicate(element))

    def search(self, context: UiElement) -> FindResult:
        if self.matches(context):
            self._on_match(self, context)
            return FindResult.of(context)
        for child in context.get_children(Visibility.VISIBLE):
            result = self.search(child)
            if result.found:
                return result
        return FindResult.not_found()

    def find(self, context: UiElement) -> UiElement:
        result = self.search(context)
        if not result.found:
            raise ElementNotFoundError(self)
        return result.element


class ChainFinder(Finder):
    """
    Runs finders in sequence; each one searches from the element the
    previous one found.
    """

    def __init__(self, finders: Sequence[Finder]):
        if not finders:
            raise ValueError("ChainFinder needs at least one finder")
        self.finders = tuple(finders)

    def __str__(self) -> str:
        return "ChainFinder{" + ", ".join(str(f) for f in self.finders) + "}"

    def search(self, context: UiElement) -> FindResult:
        element = context
        for finder in self.finders:
            result = finder.search(element)
            if not result.found:
                return result
            element = result.element
        return FindResult.of(element)

    def find(self, context: UiElement) -> UiElement:
        result = self.search(context)
        if not result.found:
            raise ElementNotFoundError(self)
        return result.element
