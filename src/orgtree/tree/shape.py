"""Turn parsed JSON into a tree root, and convert between nested and flat forms."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from ..exceptions import InvalidShape
from .models import NodeRecord, TreeNode

DEFAULT_ROOT_NAME = "Root"


def _shallow_node(value: Any) -> TreeNode:
    """Validate one node's own fields; children are attached by the caller."""
    if not isinstance(value, dict):
        raise InvalidShape(
            "Tree contains a node that is not an object", type(value).__name__
        )
    try:
        return TreeNode.model_validate({**value, "children": []})
    except ValidationError as e:
        raise InvalidShape(
            f"Tree contains a malformed node: {e.error_count()} error(s)",
            type(value).__name__,
        ) from e


def _to_node(value: Any) -> TreeNode:
    """Build a TreeNode from nested dicts one level at a time."""
    root = _shallow_node(value)
    stack: list[tuple[dict, TreeNode]] = [(value, root)]
    while stack:
        raw, node = stack.pop()
        children = raw.get("children")
        if not isinstance(children, list):
            continue
        for child in children:
            child_node = _shallow_node(child)
            node.children.append(child_node)
            stack.append((child, child_node))
    return root


def normalize_shape(value: Any, root_name: str = DEFAULT_ROOT_NAME) -> TreeNode:
    """Pick the tree root out of a parsed JSON value.

    - a one-element array unwraps to that element
    - any other array becomes the children of a synthetic ``root_name`` node
    - an object with ``name`` and an array ``children`` is used as is

    Anything else raises InvalidShape.
    """
    if isinstance(value, list):
        if len(value) == 1:
            if not isinstance(value[0], dict):
                raise InvalidShape(
                    "Single-element array does not hold a node object",
                    type(value[0]).__name__,
                )
            return _to_node(value[0])
        return _to_node({"name": root_name, "children": value})

    if (
        isinstance(value, dict)
        and "name" in value
        and isinstance(value.get("children"), list)
    ):
        return _to_node(value)

    raise InvalidShape(
        "Expected an array of nodes or an object with 'name' and 'children'",
        type(value).__name__,
    )


def flatten_tree(root: TreeNode) -> list[NodeRecord]:
    """Flatten a nested tree into records with ids ``n0``, ``n1``, ... (pre-order)."""
    records: list[NodeRecord] = []
    stack: list[tuple[TreeNode, str | None]] = [(root, None)]
    while stack:
        node, parent_id = stack.pop()
        node_id = f"n{len(records)}"
        records.append(
            NodeRecord(
                id=node_id,
                parentId=parent_id,
                name=node.name,
                attributes=dict(node.attributes),
            )
        )
        for child in reversed(node.children):
            stack.append((child, node_id))
    return records


def build_tree(records: list[NodeRecord]) -> list[TreeNode]:
    """Rebuild nested roots from validated records.

    Expects unique ids and resolvable parents; children keep input order.
    """
    nodes: dict[str, TreeNode] = {}
    for record in records:
        extra = record.model_extra or {}
        nodes[record.id] = TreeNode(
            name=record.name, attributes=extra.get("attributes")
        )

    roots: list[TreeNode] = []
    for record in records:
        node = nodes[record.id]
        if record.parent_id is None:
            roots.append(node)
        else:
            nodes[record.parent_id].children.append(node)
    return roots
