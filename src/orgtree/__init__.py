"""orgtree: resilient JSON repair and validation for LLM org-chart output."""

__version__ = "1.0.0"

from .exceptions import (
    CircularHierarchyError,
    ConfigError,
    InvalidShape,
    OrgTreeError,
    RepairFailure,
    TreeValidationError,
)
from .repair import ParseResult, repair_and_parse
from .tree import NodeRecord, TreeNode, normalize_shape, validate_tree

__all__ = [
    "__version__",
    "OrgTreeError",
    "RepairFailure",
    "InvalidShape",
    "TreeValidationError",
    "CircularHierarchyError",
    "ConfigError",
    "ParseResult",
    "repair_and_parse",
    "NodeRecord",
    "TreeNode",
    "normalize_shape",
    "validate_tree",
]
