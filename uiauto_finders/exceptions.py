# uiauto_finders/exceptions.py
"""
@file exceptions.py
@brief Exception types raised by finders, loaders and waits.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .finders import Finder


class UIAutoError(Exception):
    """Base exception for the framework."""


class ConfigError(UIAutoError):
    """An object map, locator, timing setting or tree snapshot is invalid."""


class ElementNotFoundError(UIAutoError):
    """
    Raised when no reachable element satisfies a finder.

    Always references the finder the caller invoked, not the subtree or
    inner finder where the search ran dry.
    """

    def __init__(self, finder: "Finder", message: Optional[str] = None):
        self.finder = finder
        self.details = message
        super().__init__(self.__str__())

    def __str__(self) -> str:
        base = f"ElementNotFoundError: finder={self.finder}"
        if self.details:
            base += f" details='{self.details}'"
        return base


class TimeoutError(UIAutoError):
    """
    A wait or retry loop ran out of time.

    Attributes:
        last_error: Exception raised by the final attempt, usually an
            ElementNotFoundError; None when the condition just stayed false
        description: What was being waited for
        timeout: Budget in seconds
        attempts: Number of times the condition was evaluated
        elapsed: Seconds actually spent
        stage: Caller-supplied phase label such as "resolve" or "exists"
    """

    def __init__(
        self,
        message: str,
        *,
        description: str = "",
        timeout: float = 0.0,
        attempts: int = 0,
        elapsed: float = 0.0,
        stage: Optional[str] = None,
        last_error: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.description = description
        self.timeout = timeout
        self.attempts = attempts
        self.elapsed = elapsed
        self.stage = stage
        self.last_error = last_error

    def __str__(self) -> str:
        message = super().__str__()
        if not self.attempts:
            return message
        return f"{message} [attempts={self.attempts}, elapsed={self.elapsed:.2f}s]"

    @property
    def root_cause(self) -> Optional[BaseException]:
        """Innermost last_error when timeouts wrap other timeouts."""
        error = self.last_error
        while isinstance(error, TimeoutError) and error.last_error is not None:
            error = error.last_error
        return error

    @property
    def finder(self) -> Optional["Finder"]:
        """Finder that kept coming up empty, if the root cause names one."""
        return getattr(self.root_cause, "finder", None)
