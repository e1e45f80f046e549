# uiauto_finders/node.py
"""
@file node.py
@brief Element tree contract consumed by finders.

Framework backends (UIA, JAB, snapshot files) expose their elements through
UiElement so finders can walk any of them the same way.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional


class Visibility(Enum):
    """Child filter passed to UiElement.get_children()."""
    VISIBLE = "visible"
    ALL = "all"


class Attribute(Enum):
    """Element attributes a predicate can test."""
    NAME = "name"
    TITLE = "title"
    AUTO_ID = "auto_id"
    CONTROL_TYPE = "control_type"
    CLASS_NAME = "class_name"
    ENABLED = "enabled"
    FOCUSED = "focused"
    SELECTED = "selected"
    CHECKED = "checked"

    def __str__(self) -> str:
        return self.value


STRING_ATTRIBUTES = frozenset({
    Attribute.NAME,
    Attribute.TITLE,
    Attribute.AUTO_ID,
    Attribute.CONTROL_TYPE,
    Attribute.CLASS_NAME,
})


class UiElement(ABC):
    """
    Abstract element interface for tree traversal.

    Elements are owned by the tree; finders only read them.
    """

    @abstractmethod
    def get_children(self, visibility: Visibility) -> List["UiElement"]:
        """
        Get child elements in document order.

        Args:
            visibility: VISIBLE drops hidden children, ALL keeps every child

        Returns:
            Ordered list of children
        """
        pass

    @abstractmethod
    def is_visible(self) -> bool:
        """
        Check if element is visible.

        Returns:
            True if visible, False otherwise
        """
        pass

    @abstractmethod
    def get_attribute(self, attribute: Attribute) -> Any:
        """
        Get an attribute value.

        Args:
            attribute: Attribute to read

        Returns:
            Attribute value, or None when the element does not carry it
        """
        pass

    @abstractmethod
    def get_parent(self) -> Optional["UiElement"]:
        """Get the parent element, or None for the root."""
        pass


def build_path(element: UiElement, max_depth: int = 32) -> str:
    """
    Build a relative hierarchy path like 'Window[0]/Pane[0]/Button[1]'.

    The index is the position among all siblings, visible or not.
    """
    parts: List[str] = []
    cur: Optional[UiElement] = element
    depth = 0

    while cur is not None and depth < max_depth:
        ctype = cur.get_attribute(Attribute.CONTROL_TYPE) or "Unknown"
        idx = 0
        parent = cur.get_parent()
        if parent is not None:
            for i, sibling in enumerate(parent.get_children(Visibility.ALL)):
                if sibling is cur:
                    idx = i
                    break
        parts.append(f"{ctype}[{idx}]")
        cur = parent
        depth += 1

    return "/".join(reversed(parts))
