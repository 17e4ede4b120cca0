from typing import Dict, List
from .views import ElementId, SemanticElement

def resolve_versions(entries: List[SemanticElement], root_key: str) -> List[SemanticElement]:
    """
    Collapses duplicate ids to one entry each.

    The registry only ever appends or overwrites, so a sub-graph replaced on
    hot-reload leaves its old registrations behind. Order of preference:
    entries owned by the root graph, then the latest registration timestamp,
    then whichever was read first. Output keeps first-seen id order.
    """
    best: Dict[ElementId, SemanticElement] = {}
    for entry in entries:
        current = best.get(entry.id)
        if current is None or _rank(entry, root_key) > _rank(current, root_key):
            best[entry.id] = entry
    return list(best.values())

def _rank(entry: SemanticElement, root_key: str):
    return (entry.owning_graph_key == root_key, entry.registration_timestamp)
