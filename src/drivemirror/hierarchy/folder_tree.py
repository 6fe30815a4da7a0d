"""Relational folder hierarchy: flat FolderRecords -> ordered forest."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

from drivemirror.models import FolderRecord


@dataclass(slots=True)
class FolderNode:
    """A folder plus its ordered children. The record itself is never modified."""

    record: FolderRecord
    children: list[FolderNode] = field(default_factory=list)

    def walk(self) -> Iterator[FolderNode]:
        """Yield this node and its descendants depth-first (pre-order)."""
        stack: list[FolderNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> dict:
        doc = self.record.to_document()
        doc["children"] = [child.to_dict() for child in self.children]
        return doc


def sort_folder_records(folders: Iterable[FolderRecord]) -> list[FolderRecord]:
    """Order records by full_path ascending, ties broken by id."""
    return sorted(folders, key=lambda f: (f.full_path, f.id))


def materialize_folder_tree(folders: Sequence[FolderRecord]) -> list[FolderNode]:
    """
    Build a forest from folder records linked by `parent_id`.

    Policy:
        - A record attaches under the node whose id equals its parent_id when
          that id is among the inputs; otherwise it becomes a root (dangling
          parent, drive-root parent, or parent_id == id).
        - Sibling and root order follow input order.
        - Duplicate ids: the first occurrence owns the id; every record still
          appears exactly once.
        - Pointer cycles cannot come from Drive, but if one is supplied its
          earliest member (in input order) is promoted to root so that no
          record becomes unreachable.

    Only the id index built here is followed; raw pointers are never chased.
    """
    nodes = [FolderNode(record=f) for f in folders]

    index: dict[str, int] = {}
    for pos, node in enumerate(nodes):
        index.setdefault(node.record.id, pos)

    parent_pos: list[int | None] = []
    for pos, node in enumerate(nodes):
        pid = node.record.parent_id
        if pid and pid != node.record.id and pid in index and index[pid] != pos:
            parent_pos.append(index[pid])
        else:
            parent_pos.append(None)

    _break_cycles(parent_pos)

    roots: list[FolderNode] = []
    for pos, node in enumerate(nodes):
        ppos = parent_pos[pos]
        if ppos is None:
            roots.append(node)
        else:
            nodes[ppos].children.append(node)
    return roots


def _break_cycles(parent_pos: list[int | None]) -> None:
    """Detach the earliest member of every parent cycle (in place)."""
    children: dict[int, list[int]] = {}
    for pos, ppos in enumerate(parent_pos):
        if ppos is not None:
            children.setdefault(ppos, []).append(pos)

    reached = [False] * len(parent_pos)

    def mark(start: int) -> None:
        stack = [start]
        while stack:
            cur = stack.pop()
            if reached[cur]:
                continue
            reached[cur] = True
            stack.extend(children.get(cur, ()))

    for pos, ppos in enumerate(parent_pos):
        if ppos is None:
            mark(pos)

    for pos in range(len(parent_pos)):
        if reached[pos]:
            continue
        # Unreached nodes sit on or below a cycle; climb to the cycle first.
        seen: set[int] = set()
        cur = pos
        while cur not in seen:
            seen.add(cur)
            cur = parent_pos[cur]  # type: ignore[assignment]
        cycle = [cur]
        nxt = parent_pos[cur]
        while nxt != cur:
            cycle.append(nxt)  # type: ignore[arg-type]
            nxt = parent_pos[nxt]  # type: ignore[index]
        head = min(cycle)
        old_parent = parent_pos[head]
        parent_pos[head] = None
        children[old_parent].remove(head)  # type: ignore[index]
        mark(head)
