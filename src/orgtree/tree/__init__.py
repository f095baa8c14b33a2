"""Tree shape normalization and structural validation."""

from .models import NodeRecord, TreeNode
from .shape import build_tree, flatten_tree, normalize_shape
from .validator import (
    ensure_unique_ids,
    find_cycle,
    fix_missing_parents,
    handle_unnamed_nodes,
    has_cycle,
    validate_nested,
    validate_tree,
)

__all__ = [
    "NodeRecord",
    "TreeNode",
    "build_tree",
    "ensure_unique_ids",
    "find_cycle",
    "fix_missing_parents",
    "flatten_tree",
    "handle_unnamed_nodes",
    "has_cycle",
    "normalize_shape",
    "validate_nested",
    "validate_tree",
]
