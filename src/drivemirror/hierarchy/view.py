"""Collapse/expand and single-selection state over a DriveHierarchy."""

from __future__ import annotations

from typing import Iterator, Optional

from drivemirror.errors import NotFoundError
from drivemirror.models import DriveRecord

from .drive_hierarchy import DriveHierarchy, HierarchyNode, compose_drive_name

_EXPANDED_MARK = "▼"
_COLLAPSED_MARK = "▶"


class HierarchyView:
    """
    Presentation state for a drive hierarchy.

    Nodes start collapsed. Only nodes with children can be expanded, and only
    nodes bound to a drive can become the (single) selection.
    """

    def __init__(self, hierarchy: DriveHierarchy) -> None:
        self.hierarchy = hierarchy
        self._expanded: set[str] = set()
        self._selected_path: Optional[str] = None

    @property
    def selected_path(self) -> Optional[str]:
        return self._selected_path

    @property
    def selected_drive(self) -> Optional[DriveRecord]:
        if self._selected_path is None:
            return None
        node = self.hierarchy.find(self._selected_path)
        return node.record if node is not None else None

    def is_expanded(self, path: str) -> bool:
        return path in self._expanded

    def toggle(self, path: str) -> bool:
        """Flip a node's expansion. Returns the new state (always False for leaves)."""
        node = self._node(path)
        if not node.is_collapsible:
            return False
        if node.path in self._expanded:
            self._expanded.discard(node.path)
            return False
        self._expanded.add(node.path)
        return True

    def expand_all(self) -> None:
        self._expanded = {n.path for n in self.hierarchy.walk() if n.is_collapsible}

    def collapse_all(self) -> None:
        self._expanded.clear()

    def select(self, path: str) -> Optional[DriveRecord]:
        """
        Make the drive at `path` the active selection.

        Synthetic nodes leave the current selection untouched and return None.
        """
        node = self._node(path)
        if node.record is None:
            return None
        self._selected_path = node.path
        return node.record

    def clear_selection(self) -> None:
        self._selected_path = None

    def click(self, path: str) -> Optional[DriveRecord]:
        """Toggle a node with children and select a bound node."""
        node = self._node(path)
        if node.is_collapsible:
            self.toggle(node.path)
        if node.record is not None:
            return self.select(node.path)
        return None

    def new_drive_name(self, label: str) -> str:
        """Name for a drive created under the current selection."""
        return compose_drive_name(self._selected_path, label)

    def visible_nodes(self) -> Iterator[HierarchyNode]:
        """Yield nodes in render order, skipping children of collapsed nodes."""
        stack = list(reversed(list(self.hierarchy.roots.values())))
        while stack:
            node = stack.pop()
            yield node
            if node.path in self._expanded:
                stack.extend(reversed(list(node.children.values())))

    def render_lines(self, indent: str = "  ") -> list[str]:
        lines: list[str] = []
        for node in self.visible_nodes():
            if node.is_collapsible:
                mark = _EXPANDED_MARK if node.path in self._expanded else _COLLAPSED_MARK
                prefix = f"{mark} "
            else:
                prefix = "  "
            selected = " *" if node.path == self._selected_path else ""
            lines.append(f"{indent * node.depth}{prefix}{node.label}{selected}")
        return lines

    def _node(self, path: str) -> HierarchyNode:
        node = self.hierarchy.find(path)
        if node is None:
            raise NotFoundError("No hierarchy node at path", details={"path": path})
        return node
