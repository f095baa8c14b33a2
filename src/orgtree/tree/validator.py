"""Validate and sanitize flat org-chart node collections.

Steps run in a fixed order on the records in place:

  1. ensure_unique_ids     - later duplicates get a fresh id
  2. fix_missing_parents   - dangling parent references are cleared
  3. handle_unnamed_nodes  - blank names get a placeholder
  4. has_cycle             - any cycle is a hard CircularHierarchyError

Steps 1-3 always succeed; only step 4 can fail.
"""

from __future__ import annotations

import logging
import uuid
from typing import Iterable

from ..exceptions import CircularHierarchyError
from .models import NodeRecord, TreeNode
from .shape import build_tree, flatten_tree

logger = logging.getLogger("orgtree")

PLACEHOLDER_NAME = "Unnamed Node"
ID_PREFIX = "node_"


def new_node_id(existing: set[str], prefix: str = ID_PREFIX) -> str:
    """Generate a short node id not present in ``existing``."""
    while True:
        candidate = f"{prefix}{uuid.uuid4().hex[:9]}"
        if candidate not in existing:
            return candidate


def ensure_unique_ids(nodes: list[NodeRecord], prefix: str = ID_PREFIX) -> None:
    seen: set[str] = set()
    for node in nodes:
        if node.id is None or node.id in seen:
            old = node.id
            node.id = new_node_id(seen, prefix)
            logger.debug("Reassigned node id %r -> %r", old, node.id)
        seen.add(node.id)


def fix_missing_parents(nodes: list[NodeRecord]) -> None:
    ids = {node.id for node in nodes}
    for node in nodes:
        if node.parent_id is not None and node.parent_id not in ids:
            logger.debug(
                "Node %r points at missing parent %r; promoting to root",
                node.id,
                node.parent_id,
            )
            node.parent_id = None


def handle_unnamed_nodes(
    nodes: list[NodeRecord], placeholder: str = PLACEHOLDER_NAME
) -> None:
    for node in nodes:
        name = node.name.strip()
        if not name:
            logger.debug("Node %r has no name; using %r", node.id, placeholder)
            name = placeholder
        node.name = name


def find_cycle(nodes: Iterable[NodeRecord]) -> str | None:
    """Return the id of a node on a parent-reference cycle, or None.

    Iterative depth-first walk over ``parent_id -> [child ids]`` with an
    explicit stack of (node id, next child index).
    """
    nodes = list(nodes)
    graph: dict[str | None, list[str]] = {}
    for node in nodes:
        graph.setdefault(node.parent_id, []).append(node.id)

    visited: set[str] = set()
    on_path: set[str] = set()

    for node in nodes:
        if node.id in visited:
            continue
        visited.add(node.id)
        on_path.add(node.id)
        stack: list[tuple[str, int]] = [(node.id, 0)]
        while stack:
            current, pos = stack[-1]
            children = graph.get(current, [])
            if pos >= len(children):
                stack.pop()
                on_path.discard(current)
                continue
            stack[-1] = (current, pos + 1)
            child = children[pos]
            if child in on_path:
                return child
            if child in visited:
                continue
            visited.add(child)
            on_path.add(child)
            stack.append((child, 0))
    return None


def has_cycle(nodes: Iterable[NodeRecord]) -> bool:
    return find_cycle(nodes) is not None


def validate_tree(
    nodes: list[NodeRecord],
    placeholder_name: str = PLACEHOLDER_NAME,
    id_prefix: str = ID_PREFIX,
) -> list[NodeRecord]:
    """Repair ``nodes`` in place and return them.

    Raises CircularHierarchyError when parent references form a cycle.
    """
    ensure_unique_ids(nodes, id_prefix)
    fix_missing_parents(nodes)
    handle_unnamed_nodes(nodes, placeholder_name)
    cycle_at = find_cycle(nodes)
    if cycle_at is not None:
        raise CircularHierarchyError(cycle_at)
    return nodes


def validate_nested(
    root: TreeNode,
    placeholder_name: str = PLACEHOLDER_NAME,
    id_prefix: str = ID_PREFIX,
) -> TreeNode:
    """Flatten, validate and rebuild a nested tree."""
    records = validate_tree(flatten_tree(root), placeholder_name, id_prefix)
    return build_tree(records)[0]
