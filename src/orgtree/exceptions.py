"""Custom exception hierarchy for orgtree.

All orgtree exceptions inherit from OrgTreeError, allowing callers
to catch broad or specific errors:

    try:
        records = validate_tree(records)
    except CircularHierarchyError as e:
        print(f"Bad hierarchy: {e}")
    except OrgTreeError as e:
        print(f"orgtree error: {e}")
"""

from __future__ import annotations


class OrgTreeError(Exception):
    """Base exception for all orgtree errors."""


class RepairFailure(OrgTreeError):
    """No repair strategy produced strictly valid JSON.

    Carries a bounded preview of the original text and the last parse
    error message so callers can surface a diagnostic.
    """

    def __init__(self, preview: str, error: str) -> None:
        super().__init__(f"Could not repair JSON: {error}")
        self.preview = preview
        self.error = error


class InvalidShape(OrgTreeError):
    """Parsed JSON is neither a tree root object nor an array of roots."""

    def __init__(self, message: str, value_type: str = "") -> None:
        super().__init__(message)
        self.value_type = value_type


class TreeValidationError(OrgTreeError):
    """Raised when node records violate a structural invariant."""


class CircularHierarchyError(TreeValidationError):
    """Raised when the parent references of a node collection form a cycle."""

    def __init__(self, node_id: str | None = None) -> None:
        msg = "Circular hierarchy detected"
        if node_id is not None:
            msg = f"{msg} at node '{node_id}'"
        super().__init__(msg)
        self.node_id = node_id


class ConfigError(OrgTreeError):
    """Raised when configuration is invalid or missing."""
