"""Nominal drive hierarchy: '|'-delimited drive names -> presentation forest."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from drivemirror.errors import InvalidStateError, NameConflictError
from drivemirror.models import DriveRecord

logger = logging.getLogger(__name__)

DELIMITER: str = "|"
PATH_JOINER: str = f" {DELIMITER} "


@dataclass(slots=True)
class HierarchyNode:
    """
    One segment of a drive name.

    `record` is set only on the node where a drive name ends; intermediate
    nodes are synthetic groups.
    """

    label: str
    path: str
    depth: int
    record: Optional[DriveRecord] = None
    children: dict[str, HierarchyNode] = field(default_factory=dict)

    @property
    def is_collapsible(self) -> bool:
        return bool(self.children)

    @property
    def is_synthetic(self) -> bool:
        return self.record is None

    def walk(self) -> Iterator[HierarchyNode]:
        """Yield this node and its descendants depth-first (pre-order)."""
        yield self
        for child in self.children.values():
            yield from child.walk()


@dataclass(frozen=True, slots=True)
class NameConflict:
    """Two drives whose names normalize to the same hierarchical path."""

    path: str
    kept: DriveRecord
    rejected: DriveRecord


@dataclass(slots=True)
class DriveHierarchy:
    roots: dict[str, HierarchyNode] = field(default_factory=dict)
    conflicts: list[NameConflict] = field(default_factory=list)

    def find(self, path: str) -> Optional[HierarchyNode]:
        """Look up a node by its joined path ('Sales | 2024')."""
        segments = split_segments(path)
        if not segments:
            return None
        level = self.roots
        node: Optional[HierarchyNode] = None
        for segment in segments:
            node = level.get(segment)
            if node is None:
                return None
            level = node.children
        return node

    def walk(self) -> Iterator[HierarchyNode]:
        for root in self.roots.values():
            yield from root.walk()

    def bound_records(self) -> list[DriveRecord]:
        return [n.record for n in self.walk() if n.record is not None]


def split_segments(name: str) -> list[str]:
    """Split a drive name on the delimiter, trimming and dropping empty segments."""
    return [part.strip() for part in name.split(DELIMITER) if part.strip()]


def is_hierarchical(drive: DriveRecord) -> bool:
    return DELIMITER in drive.name


def hierarchy_sort_key(drive: DriveRecord) -> tuple[int, str, str]:
    """Shallow names first, then case-insensitive name, then id."""
    return (len(split_segments(drive.name)), drive.name.casefold(), drive.id)


def compose_drive_name(parent_path: Optional[str], label: str) -> str:
    """Build the name for a new drive nested under parent_path."""
    label = label.strip()
    if not parent_path or not parent_path.strip():
        return label
    return f"{parent_path.strip()}{PATH_JOINER}{label}"


def materialize_drive_hierarchy(
    drives: Iterable[DriveRecord],
    *,
    raise_on_conflict: bool = False,
) -> DriveHierarchy:
    """
    Build the nominal hierarchy of delimiter-bearing drive names.

    Drives without the delimiter are left out. When two drives land on the
    same path, the first in sort order stays bound and the pair is recorded
    in `conflicts` (or NameConflictError is raised if requested).
    """
    ordered = sorted((d for d in drives if is_hierarchical(d)), key=hierarchy_sort_key)
    hierarchy = DriveHierarchy()

    for drive in ordered:
        segments = split_segments(drive.name)
        if not segments:
            continue

        node = _terminal_node(hierarchy.roots, segments)
        if node.record is None:
            node.record = drive
            continue

        conflict = NameConflict(path=node.path, kept=node.record, rejected=drive)
        if raise_on_conflict:
            raise NameConflictError(
                f"Drive names collide on path: {node.path}",
                details={
                    "path": node.path,
                    "kept_id": node.record.id,
                    "rejected_id": drive.id,
                },
            )
        logger.warning(
            "Drive name conflict on %r: keeping %s, rejecting %s",
            node.path,
            node.record.id,
            drive.id,
        )
        hierarchy.conflicts.append(conflict)

    return hierarchy


def _terminal_node(roots: dict[str, HierarchyNode], segments: list[str]) -> HierarchyNode:
    """Find or create the node chain for `segments` and return its last node."""
    level = roots
    node = None
    for depth, segment in enumerate(segments):
        node = level.get(segment)
        if node is None:
            node = HierarchyNode(
                label=segment,
                path=PATH_JOINER.join(segments[: depth + 1]),
                depth=depth,
            )
            level[segment] = node
        level = node.children
    if node is None:
        raise InvalidStateError("Drive name has no segments", details={"segments": segments})
    return node
