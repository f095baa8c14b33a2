"""Human-readable messages for repair, shape and hierarchy failures.

Maps orgtree errors to short explanations with an actionable fix, for
display in the CLI or in an upload response.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import (
    CircularHierarchyError,
    ConfigError,
    InvalidShape,
    RepairFailure,
)


@dataclass
class FriendlyError:
    """A user-facing error with a fix suggestion."""

    title: str
    message: str
    fix: str


def friendly_error(error: Exception) -> FriendlyError:
    """Convert an orgtree error to a user-facing message."""
    if isinstance(error, RepairFailure):
        msg = error.error.lower()
        if "expecting value" in msg and not error.preview.strip():
            return FriendlyError(
                title="Empty response",
                message="The model returned no text to interpret.",
                fix="Retry the request; the model may have hit a token limit or refused.",
            )
        return FriendlyError(
            title="Could not interpret response",
            message=f"The response is not valid JSON even after repair: {error.error}",
            fix=(
                "Retry the request, or ask the model to return JSON only.\n"
                f"Response started with: {error.preview[:80]!r}"
            ),
        )

    if isinstance(error, InvalidShape):
        return FriendlyError(
            title="Unexpected JSON shape",
            message=f"The JSON parsed, but it is not an org-chart tree ({error}).",
            fix=(
                "Expected either an array of nodes or an object like:\n"
                '  {"name": "CEO", "attributes": {}, "children": []}'
            ),
        )

    if isinstance(error, CircularHierarchyError):
        where = f" (around node '{error.node_id}')" if error.node_id else ""
        return FriendlyError(
            title="Circular hierarchy",
            message=f"Some nodes are their own ancestors{where}.",
            fix="Check the parentId values; every chain must end at a root node.",
        )

    if isinstance(error, ConfigError):
        return FriendlyError(
            title="Configuration file error",
            message=f"There's a problem with your configuration: {error}",
            fix=(
                "Check ~/.orgtree/config.yaml for syntax errors. Common issues:\n"
                "- Missing spaces after colons (use 'key: value' not 'key:value')\n"
                "- Incorrect indentation (use 2 spaces, not tabs)"
            ),
        )

    return FriendlyError(
        title="Unexpected error",
        message=f"Something went wrong: {error}",
        fix="Re-run with --verbose for details.",
    )


def format_friendly_error(err: FriendlyError) -> str:
    """Format a FriendlyError for display in a terminal."""
    lines = [
        f"Error: {err.title}",
        f"   {err.message}",
        "",
        "How to fix:",
    ]
    for line in err.fix.split("\n"):
        lines.append(f"   {line}")
    return "\n".join(lines)
