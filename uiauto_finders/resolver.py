# uiauto_finders/resolver.py
"""
@file resolver.py
@brief Resolves windows and elements by semantic names using repository finders.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from .actionlogger import ACTION_LOGGER
from .config import TimeConfig
from .exceptions import ElementNotFoundError, TimeoutError
from .finders import Finder
from .node import UiElement, build_path
from .repository import Repository
from .waits import wait_until_not, wait_until_passes

RootProvider = Callable[[], UiElement]


class Resolver:
    """
    Resolves windows and elements by semantic names.

    Each attempt asks root_provider for a fresh root and runs one complete
    find() on it; polling only ever happens between whole finds.
    """

    def __init__(self, repo: Repository, root_provider: RootProvider):
        """
        @param repo Repository with element/window specifications
        @param root_provider Callable returning the current tree root
        """
        self.repo = repo
        self.root_provider = root_provider

    def _find_once(self, finder: Finder) -> UiElement:
        return finder.find(self.root_provider())

    def _resolve(self, kind: str, name: str, finder: Finder, timeout: Optional[float]) -> UiElement:
        config = TimeConfig.current().resolve_window if kind == "window" else TimeConfig.current().resolve_element
        effective_timeout = timeout if timeout is not None else config.timeout
        start = time.monotonic()
        try:
            element = wait_until_passes(
                self._find_once,
                effective_timeout,
                config.interval,
                (ElementNotFoundError,),
                f"{kind} '{name}' via {finder}",
                finder,
                stage="resolve",
            )
        except TimeoutError as e:
            ACTION_LOGGER.log(
                action=f"resolve_{kind}",
                finder=str(finder),
                status="error",
                duration_ms=int((time.monotonic() - start) * 1000),
                metadata={"name": name},
                exception=e,
            )
            raise
        ACTION_LOGGER.log(
            action=f"resolve_{kind}",
            finder=str(finder),
            element=str(element),
            path=build_path(element),
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"name": name},
        )
        return element

    def resolve_window(self, window_name: str, timeout: Optional[float] = None) -> UiElement:
        """
        Resolve a window by name.

        @param window_name Logical window name from configuration
        @param timeout Override timeout (uses TimeConfig if None)
        @return Window element
        @throws TimeoutError wrapping the last ElementNotFoundError
        """
        finder = self.repo.get_window_finder(window_name)
        return self._resolve("window", window_name, finder, timeout)

    def resolve(self, element_name: str, timeout: Optional[float] = None) -> UiElement:
        """
        Resolve an element by name, searching inside its window.

        @param element_name Logical element name from configuration
        @param timeout Override timeout (uses TimeConfig if None)
        @return Matching element
        @throws TimeoutError wrapping the last ElementNotFoundError
        """
        finder = self.repo.get_element_finder(element_name)
        return self._resolve("element", element_name, finder, timeout)

    def exists(self, element_name: str, timeout: Optional[float] = None) -> bool:
        """
        Return True if the element shows up within the exists_wait timeout.

        Only ElementNotFoundError means "absent"; errors from the root
        provider or a predicate propagate.
        """
        finder = self.repo.get_element_finder(element_name)
        config = TimeConfig.current().exists_wait
        try:
            wait_until_passes(
                self._find_once,
                timeout if timeout is not None else config.timeout,
                config.interval,
                (ElementNotFoundError,),
                f"element '{element_name}' exists",
                finder,
                stage="exists",
            )
        except TimeoutError:
            return False
        return True

    def wait_gone(self, element_name: str, timeout: Optional[float] = None) -> None:
        """
        Wait until the element is no longer reachable.

        @throws TimeoutError if it is still found when the timeout expires
        """
        finder = self.repo.get_element_finder(element_name)
        config = TimeConfig.current().disappear_wait
        wait_until_not(
            lambda: self._find_once(finder) is not None,
            timeout=timeout if timeout is not None else config.timeout,
            interval=config.interval,
            description=f"element '{element_name}' to disappear",
            stage="disappear",
            exceptions=(ElementNotFoundError,),
        )
