from enum import Enum

from introspect.scene.topology import Topology, normalize_transforms
from introspect.scene.views import TransformOp

class Op(Enum):
    translate = "translate"

def test_parent_map_is_inverted_from_children():
    topology = Topology.build([
        ("_root_", {"children": ["a", "b"]}),
        ("a", {"children": ["c"]}),
    ])
    assert topology.parent_of("a") == "_root_"
    assert topology.parent_of("c") == "a"
    assert topology.parent_of("_root_") is None
    assert len(topology) == 2

def test_transform_shapes_normalize_to_ops():
    assert normalize_transforms([("translate", (1, 2)), ("scale", 2)]) == [
        TransformOp("translate", (1, 2)), TransformOp("scale", 2)]
    assert normalize_transforms({"translate": (1, 2)}) == [TransformOp("translate", (1, 2))]
    assert normalize_transforms([{"op": "rotate", "value": 0.5}]) == [TransformOp("rotate", 0.5)]
    assert normalize_transforms(("translate", (3, 4))) == [TransformOp("translate", (3, 4))]
    assert normalize_transforms([(Op.translate, (5, 6))]) == [TransformOp("translate", (5, 6))]
    assert normalize_transforms(None) == []
    assert normalize_transforms("nonsense") == []

def test_rendered_flag_follows_render_table():
    rows = [("_root_", {"children": ["a"]}), ("a", {"children": []})]
    topology = Topology.build(rows, render_keys=["_root_"])
    assert topology.nodes["_root_"].rendered is True
    assert topology.nodes["a"].rendered is False
    assert Topology.build(rows).nodes["a"].rendered is None

def test_malformed_rows_are_ignored():
    topology = Topology.build([("a",), None, ("b", None), ("c", {"children": ["d"]})])
    assert list(topology.nodes) == ["c"]
    assert topology.parent_of("d") == "c"

def test_tuple_keys_are_canonicalized():
    topology = Topology.build([(("modal", 1), {"children": [("button_group", 2)]})])
    assert topology.parent_of("(button_group, 2)") == "(modal, 1)"
