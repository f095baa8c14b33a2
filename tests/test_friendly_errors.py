"""Tests for user-facing error messages."""

from orgtree.exceptions import (
    CircularHierarchyError,
    ConfigError,
    InvalidShape,
    RepairFailure,
)
from orgtree.friendly_errors import (
    FriendlyError,
    format_friendly_error,
    friendly_error,
)


class TestFriendlyError:
    def test_repair_failure(self):
        err = friendly_error(RepairFailure("Sorry, I can't", "Expecting value"))
        assert "interpret" in err.title.lower()
        assert "Sorry" in err.fix

    def test_empty_response(self):
        err = friendly_error(RepairFailure("", "Expecting value: line 1 column 1 (char 0)"))
        assert "empty" in err.title.lower()

    def test_invalid_shape(self):
        err = friendly_error(InvalidShape("Expected an array", "int"))
        assert "shape" in err.title.lower()
        assert '"children"' in err.fix

    def test_circular_hierarchy(self):
        err = friendly_error(CircularHierarchyError("A"))
        assert "circular" in err.title.lower()
        assert "'A'" in err.message

    def test_config_error(self):
        err = friendly_error(ConfigError("Invalid YAML"))
        assert "configuration" in err.title.lower()

    def test_unknown_error(self):
        err = friendly_error(RuntimeError("boom"))
        assert "boom" in err.message


class TestFormatFriendlyError:
    def test_format_lines(self):
        text = format_friendly_error(
            FriendlyError(title="T", message="M", fix="line1\nline2")
        )
        assert text.splitlines() == [
            "Error: T",
            "   M",
            "",
            "How to fix:",
            "   line1",
            "   line2",
        ]
