"""Tests for custom exception hierarchy."""

import pytest

from orgtree.exceptions import (
    CircularHierarchyError,
    ConfigError,
    InvalidShape,
    OrgTreeError,
    RepairFailure,
    TreeValidationError,
)


class TestExceptionHierarchy:
    def test_base_exception(self):
        with pytest.raises(OrgTreeError):
            raise OrgTreeError("test")

    def test_repair_failure_inherits(self):
        with pytest.raises(OrgTreeError):
            raise RepairFailure("{", "Expecting value")

    def test_repair_failure_carries_diagnostics(self):
        err = RepairFailure("{'a'", "Expecting property name")
        assert err.preview == "{'a'"
        assert err.error == "Expecting property name"
        assert "Expecting property name" in str(err)

    def test_invalid_shape_inherits(self):
        with pytest.raises(OrgTreeError):
            raise InvalidShape("bad shape", "int")

    def test_circular_hierarchy_inherits(self):
        with pytest.raises(TreeValidationError):
            raise CircularHierarchyError("A")
        with pytest.raises(OrgTreeError):
            raise CircularHierarchyError()

    def test_circular_hierarchy_message(self):
        assert str(CircularHierarchyError()) == "Circular hierarchy detected"
        err = CircularHierarchyError("A")
        assert err.node_id == "A"
        assert "'A'" in str(err)

    def test_config_error_inherits(self):
        with pytest.raises(OrgTreeError):
            raise ConfigError("bad config")

    def test_import_from_root(self):
        """Exceptions are importable from orgtree root."""
        from orgtree import CircularHierarchyError as CE
        from orgtree import OrgTreeError as OE

        assert issubclass(CE, OE)
