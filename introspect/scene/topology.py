import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from .views import GraphNode, TransformOp, canonical_key, field_of

logger = logging.getLogger(__name__)

class Topology:
    """
    Point-in-time view of the scene/script store: which sub-graph sits under
    which, and the transform ops each one applies. Built fresh per query;
    the host mutates the store every frame without notifying anyone.
    """

    def __init__(self, nodes: Dict[str, GraphNode], parents: Dict[str, str]):
        self.nodes = nodes
        self.parents = parents

    @classmethod
    def build(cls, rows: Iterable[Tuple[Any, Any]], render_keys: Optional[Iterable[Any]] = None) -> 'Topology':
        rendered = None
        if render_keys is not None:
            rendered = {canonical_key(k) for k in render_keys}

        nodes: Dict[str, GraphNode] = {}
        parents: Dict[str, str] = {}
        for row in rows:
            if not isinstance(row, (tuple, list)) or len(row) != 2:
                logger.debug(f"Skipping scene row of unknown shape: {type(row).__name__}")
                continue
            raw_key, record = row
            key = canonical_key(raw_key)
            if key is None or record is None:
                continue

            children = [canonical_key(c) for c in (field_of(record, "children") or []) if c is not None]
            node = GraphNode(
                key=key,
                children=children,
                transform_ops=normalize_transforms(field_of(record, "transforms")),
                rendered=(key in rendered) if rendered is not None else None,
            )
            nodes[key] = node

            for child in children:
                previous = parents.get(child)
                if previous is not None and previous != key:
                    # torn snapshot or a sub-graph moved mid-frame; last read wins
                    logger.debug(f"Graph {child} listed under both {previous} and {key}")
                parents[child] = key

        return cls(nodes, parents)

    def parent_of(self, key: str) -> Optional[str]:
        return self.parents.get(key)

    def transforms_of(self, key: str) -> List[TransformOp]:
        node = self.nodes.get(key)
        return node.transform_ops if node else []

    def __len__(self) -> int:
        return len(self.nodes)

def normalize_transforms(raw: Any) -> List[TransformOp]:
    """
    Accepts the transform shapes seen in scene records:
      [("translate", (10, 20)), ("scale", 2)]
      {"translate": (10, 20), "rotate": 0.5}
      [{"op": "translate", "value": (10, 20)}]
    """
    if raw is None:
        return []
    if isinstance(raw, dict):
        return [TransformOp(canonical_key(name), value) for name, value in raw.items()]

    ops = []
    if not isinstance(raw, (list, tuple)):
        return ops
    if len(raw) == 2 and isinstance(raw[0], str):
        # a single bare op
        raw = [raw]
    for item in raw:
        if isinstance(item, (tuple, list)) and len(item) == 2:
            ops.append(TransformOp(canonical_key(item[0]), item[1]))
        elif isinstance(item, dict):
            if "op" in item:
                ops.append(TransformOp(canonical_key(item["op"]), item.get("value")))
            else:
                ops.extend(TransformOp(canonical_key(name), value) for name, value in item.items())
        else:
            logger.debug(f"Ignoring transform op of unknown shape: {item!r}")
    return ops
