"""Public hierarchy exports for drivemirror."""

from __future__ import annotations

from .drive_hierarchy import (
    DELIMITER,
    PATH_JOINER,
    DriveHierarchy,
    HierarchyNode,
    NameConflict,
    compose_drive_name,
    hierarchy_sort_key,
    is_hierarchical,
    materialize_drive_hierarchy,
    split_segments,
)
from .folder_tree import FolderNode, materialize_folder_tree, sort_folder_records
from .view import HierarchyView

__all__ = [
    "FolderNode",
    "materialize_folder_tree",
    "sort_folder_records",
    "DELIMITER",
    "PATH_JOINER",
    "DriveHierarchy",
    "HierarchyNode",
    "NameConflict",
    "compose_drive_name",
    "hierarchy_sort_key",
    "is_hierarchical",
    "materialize_drive_hierarchy",
    "split_segments",
    "HierarchyView",
]
