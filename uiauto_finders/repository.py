# uiauto_finders/repository.py
"""
@file repository.py
@brief Object map (elements.yaml) loading and locator-to-finder translation.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from . import by
from .exceptions import ConfigError
from .finders import Finder, MatchFinder


# locator key -> finder factory
LOCATOR_FACTORIES = {
    "name": by.name,
    "name_re": by.name_regex,
    "title": by.title,
    "title_re": by.title_regex,
    "auto_id": by.auto_id,
    "control_type": by.control_type,
    "class_name": by.class_name,
}

ALLOWED_LOCATOR_KEYS = set(LOCATOR_FACTORIES)
REGEX_LOCATOR_KEYS = ("name_re", "title_re")


@dataclass(frozen=True)
class AppConfig:
    default_timeout: float = 10.0
    polling_interval: float = 0.2
    strict_locator_keys: bool = True


def check_locator_patterns(locator: Dict[str, Any], where: str = "locator") -> None:
    """Raise ConfigError if a *_re value is not a compilable regex string."""
    for key in REGEX_LOCATOR_KEYS:
        if key not in locator:
            continue
        value = locator[key]
        if not isinstance(value, str):
            raise ConfigError(f"{where}: '{key}' must be a string, got: {type(value).__name__}")
        try:
            re.compile(value)
        except re.error as e:
            raise ConfigError(f"{where}: invalid regex for '{key}': {value!r} ({e})") from e


def finder_from_locator(locator: Dict[str, Any]) -> MatchFinder:
    """
    Build a MatchFinder from one locator dict, e.g.
    {"name": "OK", "control_type": "Button"} -> AllOf{ByAttribute{...}, ...}.

    Keys outside ALLOWED_LOCATOR_KEYS are ignored; Repository rejects them
    up front when strict_locator_keys is on.
    """
    check_locator_patterns(locator)
    parts = [
        LOCATOR_FACTORIES[key](value)
        for key, value in locator.items()
        if key in LOCATOR_FACTORIES
    ]
    if not parts:
        raise ConfigError(f"Locator has no usable keys: {locator}")
    if len(parts) == 1:
        return parts[0]
    return by.all_of(*parts)


def finder_from_locators(locators: List[Dict[str, Any]]) -> MatchFinder:
    """First element in document order matching any of the locators."""
    finders = [finder_from_locator(loc) for loc in locators]
    if len(finders) == 1:
        return finders[0]
    return by.any_of(*finders)


@dataclass(frozen=True)
class ObjectSpec:
    """A validated window or element entry of the object map."""
    name: str
    locators: List[Dict[str, Any]]
    finder: MatchFinder
    window: Optional[str] = None


def _mapping(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{where} must be a mapping, got: {type(value).__name__}")
    return value


class Repository:
    """
    Loads elements.yaml (object map) and turns every entry into a finder.

    The whole map is validated on load; a Repository that constructs
    without ConfigError never fails later when asked for a finder.
    """

    def __init__(self, path: str):
        self.path = os.path.abspath(path)
        raw = self._read(self.path)
        self._app = self._parse_app_config(_mapping(raw.get("app"), "app"))
        self._windows: Dict[str, ObjectSpec] = {
            name: self._parse_entry("windows", name, body)
            for name, body in _mapping(raw.get("windows"), "windows").items()
        }
        self._elements: Dict[str, ObjectSpec] = {
            name: self._parse_entry("elements", name, body)
            for name, body in _mapping(raw.get("elements"), "elements").items()
        }

    @staticmethod
    def _read(path: str) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Object map not found: {path}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read object map {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Object map must be a mapping at root: {path}")
        return data

    @staticmethod
    def _parse_app_config(section: Dict[str, Any]) -> AppConfig:
        try:
            return AppConfig(
                default_timeout=float(section.get("default_timeout", AppConfig.default_timeout)),
                polling_interval=float(section.get("polling_interval", AppConfig.polling_interval)),
                strict_locator_keys=bool(section.get("strict_locator_keys", AppConfig.strict_locator_keys)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"app: {e}") from e

    def _parse_entry(self, section: str, name: str, body: Any) -> ObjectSpec:
        where = f"{section}.{name}"
        body = _mapping(body, where)

        window = None
        if section == "elements":
            window = body.get("window")
            if not isinstance(window, str) or not window:
                raise ConfigError(f"{where}.window must name a window")
            if window not in self._windows:
                raise ConfigError(f"{where}.window references unknown window '{window}'")

        locators = body.get("locators")
        if isinstance(locators, dict):
            locators = [locators]
        if not isinstance(locators, list) or not locators:
            raise ConfigError(f"{where}: 'locators' must be a non-empty list")
        for i, locator in enumerate(locators):
            self._check_locator(locator, f"{where}.locators[{i}]")

        return ObjectSpec(name, locators, finder_from_locators(locators), window)

    def _check_locator(self, locator: Any, where: str) -> None:
        if not isinstance(locator, dict):
            raise ConfigError(f"{where}: locator must be a mapping, got: {type(locator).__name__}")
        unknown = set(locator) - ALLOWED_LOCATOR_KEYS
        if unknown and self._app.strict_locator_keys:
            raise ConfigError(
                f"{where}: unknown locator keys {sorted(unknown)}, allowed: {sorted(ALLOWED_LOCATOR_KEYS)}"
            )
        if len(unknown) == len(locator):
            raise ConfigError(f"{where}: locator has no usable keys")
        check_locator_patterns(locator, where)

    @property
    def app(self) -> AppConfig:
        return self._app

    def get_window_spec(self, name: str) -> ObjectSpec:
        try:
            return self._windows[name]
        except KeyError:
            raise ConfigError(f"Unknown window: {name}") from None

    def get_element_spec(self, name: str) -> ObjectSpec:
        try:
            return self._elements[name]
        except KeyError:
            raise ConfigError(f"Unknown element: {name}") from None

    def get_window_finder(self, name: str) -> MatchFinder:
        return self.get_window_spec(name).finder

    def get_element_finder(self, name: str) -> Finder:
        """Finder for an element, scoped to the subtree of its window."""
        spec = self.get_element_spec(name)
        return by.chain(self.get_window_finder(spec.window), spec.finder)

    def list_windows(self) -> List[str]:
        return sorted(self._windows)

    def list_elements(self) -> List[str]:
        return sorted(self._elements)
