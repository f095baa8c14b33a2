"""Pydantic models for nested org-chart trees and flat node records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TreeNode(BaseModel):
    """A node of the nested tree consumed by the chart renderer."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    attributes: dict[str, Any] = Field(default_factory=dict)
    children: list[TreeNode] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("attributes", mode="before")
    @classmethod
    def _coerce_attributes(cls, v: Any) -> dict:
        return v if isinstance(v, dict) else {}

    @field_validator("children", mode="before")
    @classmethod
    def _coerce_children(cls, v: Any) -> list:
        return v if isinstance(v, list) else []

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form, built level by level so tree depth is unbounded."""

        def shell(node: TreeNode) -> dict[str, Any]:
            return {"name": node.name, "attributes": dict(node.attributes), "children": []}

        root = shell(self)
        stack: list[tuple[TreeNode, dict[str, Any]]] = [(self, root)]
        while stack:
            node, out = stack.pop()
            for child in node.children:
                child_out = shell(child)
                out["children"].append(child_out)
                stack.append((child, child_out))
        return root


class NodeRecord(BaseModel):
    """A flat node that points at its parent by id.

    Fields other than ``id``/``parentId``/``name`` are kept as extras so
    a validated record round-trips to the caller unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = None
    parent_id: str | None = Field(default=None, alias="parentId")
    name: str = ""

    @field_validator("id", "parent_id", mode="before")
    @classmethod
    def _coerce_ref(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return v if isinstance(v, str) else str(v)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
