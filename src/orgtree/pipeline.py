"""End-to-end handling of a raw model response.

fences -> repair -> shape -> validation.  Parse and shape failures
degrade to single-node placeholder trees so the caller always has
something to render; a circular hierarchy still propagates.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .config import OrgTreeConfig
from .exceptions import InvalidShape, RepairFailure
from .repair import repair_and_parse
from .tree import NodeRecord, TreeNode, normalize_shape, validate_nested, validate_tree

logger = logging.getLogger("orgtree")

_FENCE = re.compile(r"```json|```")


def strip_code_fences(text: str) -> str:
    """Remove every ```json / ``` marker and surrounding whitespace."""
    return _FENCE.sub("", text).strip()


def parse_response(raw: str, config: OrgTreeConfig | None = None) -> TreeNode:
    """Like process_response, but raise instead of returning placeholders."""
    config = config or OrgTreeConfig()
    text = strip_code_fences(raw) if config.repair.strip_fences else raw
    value = repair_and_parse(text, config.repair.preview_chars).unwrap()
    root = normalize_shape(value, config.tree.root_name)
    return validate_nested(
        root, config.tree.placeholder_name, config.tree.id_prefix
    )


def process_response(raw: str, config: OrgTreeConfig | None = None) -> TreeNode:
    """Turn raw model output into a validated tree.

    Raises CircularHierarchyError; every other failure yields a
    placeholder root named after the problem.
    """
    config = config or OrgTreeConfig()
    try:
        return parse_response(raw, config)
    except RepairFailure as e:
        logger.warning("JSON parse error: %s", e.error)
        logger.debug("Problematic JSON string: %s", e.preview)
        return TreeNode(name=config.tree.parse_error_name)
    except InvalidShape as e:
        logger.warning("Invalid tree structure: %s", e)
        return TreeNode(name=config.tree.invalid_shape_name)


def process_flat(value: Any, config: OrgTreeConfig | None = None) -> list[NodeRecord]:
    """Validate a parsed flat node list (JSON array of node objects)."""
    config = config or OrgTreeConfig()
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise InvalidShape(
            "Expected a flat array of node objects", type(value).__name__
        )
    records = [NodeRecord.model_validate(v) for v in value]
    return validate_tree(records, config.tree.placeholder_name, config.tree.id_prefix)
