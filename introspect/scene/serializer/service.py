from collections import Counter
from enum import Enum
from typing import Any, Dict, List, Optional
from ..topology import Topology
from ..transforms import translate_of
from ..views import QueryResult, ResolvedElement, canonical_key

class ElementSerializer:
    """
    Turns query results into JSON-safe payloads. Nothing opaque crosses this
    boundary: ids and keys are canonical strings, numbers stay numbers.
    """

    @staticmethod
    def element_to_dict(item: ResolvedElement) -> Dict[str, Any]:
        element = item.element
        out = {
            "id": str(element.id),
            "type": element.type,
            "bounds": item.absolute_bounds.to_dict() if item.absolute_bounds else None,
            "center": item.absolute_center.to_dict() if item.absolute_center else None,
            "clickable": element.clickable,
        }
        if element.label is not None:
            out["label"] = element.label
        if element.role is not None:
            out["role"] = element.role
        if element.z_index is not None:
            out["z_index"] = element.z_index
        if item.position_approximate:
            out["approximate"] = True
        return out

    @classmethod
    def query_to_dict(cls, result: QueryResult) -> Dict[str, Any]:
        out = {
            "status": "ok",
            "count": result.count,
            "elements": [cls.element_to_dict(e) for e in result.elements],
        }
        if result.diagnostics:
            out["diagnostics"] = [d.to_dict() for d in result.diagnostics]
        return out

    @classmethod
    def describe_viewport(cls, result: QueryResult, script_keys: Optional[List[Any]], topology: Optional[Topology] = None) -> Dict[str, Any]:
        script_keys = script_keys or []
        by_type = Counter(e.element.type for e in result.elements)
        summary = ", ".join(f"{count} {kind}" for kind, count in by_type.items())

        out = {
            "status": "ok",
            "script_count": len(script_keys),
            "visual_description": cls.describe_components(script_keys),
            "semantic_elements": {
                "count": result.count,
                "summary": summary if result.registry_present else "No semantic registry available",
                "by_type": dict(by_type),
                "clickable_count": sum(1 for e in result.elements if e.element.clickable),
                "elements": [cls.element_to_dict(e) for e in result.elements],
            },
            "raw_scripts": [canonical_key(k) for k in script_keys],
        }
        if topology is not None:
            out["tree"] = cls.tree_to_string(topology)
        if result.diagnostics:
            out["diagnostics"] = [d.to_dict() for d in result.diagnostics]
        return sanitize_for_json(out)

    @staticmethod
    def describe_components(script_keys: List[Any]) -> str:
        # scripts keyed {component, uid} are grouped by component name
        names = Counter()
        for key in script_keys:
            if isinstance(key, (tuple, list)) and key:
                names[canonical_key(key[0])] += 1
            else:
                names[canonical_key(key)] += 1
        return ", ".join(f"{name} ({count} instances)" for name, count in names.items())

    @staticmethod
    def tree_to_string(topology: Topology) -> str:
        lines = []
        roots = [key for key in topology.nodes if topology.parent_of(key) is None]
        seen = set()
        stack = [(key, 0) for key in reversed(roots)]
        while stack:
            key, depth = stack.pop()
            if key in seen:
                continue
            seen.add(key)
            dx, dy, approximate = translate_of(topology.transforms_of(key))
            suffix = ""
            if dx or dy:
                suffix = f" translate=({dx}, {dy})"
            if approximate:
                suffix += " ~approximate"
            node = topology.nodes.get(key)
            if node is not None and node.rendered is False:
                suffix += " (not rendered)"
            lines.append(f"{'  ' * depth}{key}{suffix}")
            children = node.children if node else []
            for child in reversed(children):
                stack.append((child, depth + 1))
        return "\n".join(lines)

def sanitize_for_json(data: Any) -> Any:
    """Recursively converts tuples, enums and other host values to JSON types."""
    if isinstance(data, dict):
        return {canonical_key(k): sanitize_for_json(v) for k, v in data.items()}
    if isinstance(data, list):
        return [sanitize_for_json(v) for v in data]
    if isinstance(data, (str, int, float, bool)) or data is None:
        return data
    if isinstance(data, Enum):
        return data.name
    return canonical_key(data)
