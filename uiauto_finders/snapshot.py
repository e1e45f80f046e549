# uiauto_finders/snapshot.py
"""
@file snapshot.py
@brief In-memory element trees and YAML/JSON snapshot loading.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterable, List, Optional

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError
from .node import Attribute, STRING_ATTRIBUTES, UiElement, Visibility

DEFAULT_SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "tree.schema.json")

_ATTRIBUTE_KEYS = [a.value for a in Attribute]


class TreeElement(UiElement):
    """
    Plain in-memory element, e.g. restored from an inspector dump.

    Children get their parent reference set on construction.
    """

    def __init__(
        self,
        attributes: Optional[Dict[str, Any]] = None,
        visible: bool = True,
        children: Optional[Iterable[TreeElement]] = None,
        rect: Optional[List[int]] = None,
    ):
        self._attributes: Dict[str, Any] = dict(attributes or {})
        self._visible = bool(visible)
        self._children: List[TreeElement] = list(children or [])
        self._parent: Optional[TreeElement] = None
        self.rect = rect
        for child in self._children:
            child._parent = self

    def get_children(self, visibility: Visibility) -> List[UiElement]:
        if visibility is Visibility.VISIBLE:
            return [c for c in self._children if c.is_visible()]
        return list(self._children)

    def is_visible(self) -> bool:
        return self._visible

    def get_attribute(self, attribute: Attribute) -> Any:
        return self._attributes.get(attribute.value)

    def get_parent(self) -> Optional[UiElement]:
        return self._parent

    @property
    def attributes(self) -> Dict[str, Any]:
        return dict(self._attributes)

    def __str__(self) -> str:
        ctype = self._attributes.get("control_type") or "Element"
        props = [
            f"{key}={self._attributes[key]!r}"
            for key in ("name", "auto_id", "title", "class_name")
            if self._attributes.get(key)
        ]
        if not self._visible:
            props.append("visible=False")
        return f"{ctype}{{{', '.join(props)}}}"

    def __repr__(self) -> str:
        return f"<TreeElement {self}>"


def tree_from_dict(data: Dict[str, Any]) -> TreeElement:
    """Build a TreeElement tree from a snapshot mapping (not validated)."""
    attributes = {key: data[key] for key in _ATTRIBUTE_KEYS if key in data}
    children = [tree_from_dict(child) for child in data.get("children", []) or []]
    return TreeElement(
        attributes=attributes,
        visible=data.get("visible", True),
        children=children,
        rect=data.get("rect"),
    )


def tree_to_dict(element: UiElement) -> Dict[str, Any]:
    """Dump any UiElement tree (all children, hidden ones included) to a mapping."""
    data: Dict[str, Any] = {}
    for attr in Attribute:
        value = element.get_attribute(attr)
        if value is None:
            continue
        data[attr.value] = str(value) if attr in STRING_ATTRIBUTES else bool(value)
    if not element.is_visible():
        data["visible"] = False
    rect = getattr(element, "rect", None)
    if rect:
        data["rect"] = list(rect)
    children = element.get_children(Visibility.ALL)
    if children:
        data["children"] = [tree_to_dict(c) for c in children]
    return data


def _load_schema(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_tree(data: Any, schema_path: str = DEFAULT_SCHEMA_PATH) -> None:
    """Validate snapshot data against the tree JSON schema."""
    validator = Draft202012Validator(_load_schema(schema_path))
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = ["Tree snapshot schema validation failed:"]
        for e in errors:
            lines.append(f"- {list(e.path)}: {e.message}")
        raise ConfigError("\n".join(lines))


def _read_file(path: str) -> Any:
    if not os.path.exists(path):
        raise ConfigError(f"Tree snapshot not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        if path.lower().endswith(".json"):
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Invalid JSON: {e}") from e
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e


def load_tree(path: str, schema_path: str = DEFAULT_SCHEMA_PATH) -> TreeElement:
    """
    Load a UI tree snapshot from a YAML or JSON file.

    @param path Snapshot file (.json is parsed as JSON, anything else as YAML)
    @param schema_path JSON schema used for validation
    @return Root TreeElement
    @throws ConfigError if the file is missing, unparsable or invalid
    """
    data = _read_file(os.path.abspath(path))
    if not isinstance(data, dict):
        raise ConfigError("Tree snapshot must be a mapping at root.")
    validate_tree(data, schema_path)
    return tree_from_dict(data)
