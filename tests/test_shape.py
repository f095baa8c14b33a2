"""Tests for tree shape normalization and nested/flat conversion."""

import pytest

from orgtree.exceptions import InvalidShape
from orgtree.tree import TreeNode, build_tree, flatten_tree, normalize_shape
from orgtree.tree.models import NodeRecord


def _chart() -> TreeNode:
    return TreeNode.model_validate(
        {
            "name": "A",
            "attributes": {"title": "CEO"},
            "children": [
                {"name": "B", "children": [{"name": "D", "children": []}]},
                {"name": "C", "children": []},
            ],
        }
    )


class TestNormalizeShape:
    def test_single_element_array_unwraps(self):
        root = normalize_shape([{"name": "CEO", "children": []}])
        assert root.name == "CEO"

    def test_multi_element_array_is_wrapped(self):
        root = normalize_shape(
            [{"name": "A", "children": []}, {"name": "B", "children": []}]
        )
        assert root.name == "Root"
        assert [c.name for c in root.children] == ["A", "B"]

    def test_custom_root_name(self):
        root = normalize_shape([], root_name="Start")
        assert root.name == "Start"
        assert root.children == []

    def test_object_with_name_and_children(self):
        root = normalize_shape({"name": "X", "children": [{"name": "Y"}]})
        assert root.name == "X"
        assert root.children[0].children == []
        assert root.children[0].attributes == {}

    def test_object_without_children_is_invalid(self):
        with pytest.raises(InvalidShape):
            normalize_shape({"name": "X"})

    def test_object_with_non_list_children_is_invalid(self):
        with pytest.raises(InvalidShape):
            normalize_shape({"name": "X", "children": "none"})

    @pytest.mark.parametrize("value", ["hello", 5, None, True, [5]])
    def test_scalars_are_invalid(self, value):
        with pytest.raises(InvalidShape) as exc:
            normalize_shape(value)
        assert exc.value.value_type

    def test_non_object_child_is_invalid(self):
        with pytest.raises(InvalidShape):
            normalize_shape([{"name": "A", "children": [1]}])

    def test_malformed_attributes_and_children_are_coerced(self):
        root = normalize_shape(
            {"name": "A", "attributes": "x", "children": [{"name": "B", "children": 3}]}
        )
        assert root.attributes == {}
        assert root.children[0].children == []

    def test_extra_keys_dropped(self):
        root = normalize_shape({"name": "A", "children": [], "title": "CEO"})
        assert root.to_dict() == {"name": "A", "attributes": {}, "children": []}


class TestFlattenAndBuild:
    def test_flatten_assigns_preorder_ids(self):
        records = flatten_tree(_chart())
        assert [(r.id, r.parent_id, r.name) for r in records] == [
            ("n0", None, "A"),
            ("n1", "n0", "B"),
            ("n2", "n1", "D"),
            ("n3", "n0", "C"),
        ]

    def test_flatten_keeps_attributes(self):
        records = flatten_tree(_chart())
        assert records[0].model_extra["attributes"] == {"title": "CEO"}

    def test_build_restores_tree(self):
        chart = _chart()
        roots = build_tree(flatten_tree(chart))
        assert len(roots) == 1
        assert roots[0].to_dict() == chart.to_dict()

    def test_build_multiple_roots_in_input_order(self):
        records = [
            NodeRecord(id="1", name="A"),
            NodeRecord(id="2", name="B"),
            NodeRecord(id="3", parentId="1", name="C"),
        ]
        roots = build_tree(records)
        assert [r.name for r in roots] == ["A", "B"]
        assert roots[0].children[0].name == "C"

    def test_build_handles_child_listed_before_parent(self):
        records = [
            NodeRecord(id="2", parentId="1", name="child"),
            NodeRecord(id="1", name="parent"),
        ]
        roots = build_tree(records)
        assert roots[0].name == "parent"
        assert roots[0].children[0].name == "child"

    def test_deep_tree_flattens_without_recursion(self):
        root = TreeNode(name="n")
        node = root
        for _ in range(3000):
            child = TreeNode(name="n")
            node.children.append(child)
            node = child
        records = flatten_tree(root)
        assert len(records) == 3001
        assert records[-1].parent_id == records[-2].id


class TestDeepTrees:
    def test_normalize_deep_nested_dicts(self):
        value = {"name": "leaf", "children": []}
        for i in range(3000):
            value = {"name": f"n{i}", "attributes": {"level": i}, "children": [value]}
        root = normalize_shape(value)
        assert root.name == "n2999"
        node = root
        for _ in range(3000):
            node = node.children[0]
        assert node.name == "leaf"
        assert node.children == []

    def test_to_dict_deep_tree(self):
        root = TreeNode(name="n")
        node = root
        for _ in range(3000):
            child = TreeNode(name="n")
            node.children.append(child)
            node = child
        out = root.to_dict()
        for _ in range(3000):
            out = out["children"][0]
        assert out == {"name": "n", "attributes": {}, "children": []}

    def test_malformed_node_deep_in_tree(self):
        value = {"name": "leaf", "children": ["bad"]}
        for i in range(500):
            value = {"name": f"n{i}", "children": [value]}
        with pytest.raises(InvalidShape):
            normalize_shape(value)
