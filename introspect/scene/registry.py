import logging
from typing import Any, Iterable, List, Optional, Tuple
from .views import (
    Bounds,
    Diagnostic,
    ElementId,
    RegistrySnapshot,
    SemanticElement,
    canonical_key,
    field_of,
)

logger = logging.getLogger(__name__)

BOUNDS_FIELDS = ("local_bounds", "screen_bounds", "bounds")
TIMESTAMP_FIELDS = ("timestamp", "registered_at")

def decode_registry(raw_entries: Optional[Iterable[Tuple[Any, Any]]]) -> RegistrySnapshot:
    """
    Normalizes the rows copied out of the host registry into SemanticElements.

    Two row shapes are understood and may appear side by side:
      flat:   ((scene, element_id), element_record)
      nested: (graph_key, {"elements": {id: element_record}, "timestamp": ts})
    Rows that fit neither are counted in `skipped` and otherwise ignored.
    `None` means the registry itself is missing.
    """
    if raw_entries is None:
        return RegistrySnapshot.missing()

    entries: List[SemanticElement] = []
    skipped = 0
    for row in raw_entries:
        decoded = _decode_row(row)
        if decoded is None:
            skipped += 1
            logger.debug(f"Skipping registry row of unknown shape: {type(row).__name__}")
            continue
        elements, bad = decoded
        entries.extend(elements)
        skipped += bad

    diagnostics = []
    if skipped:
        logger.warning(f"Skipped {skipped} registry entries of unknown shape")
        diagnostics.append(Diagnostic(kind="unknown_registry_shape", message=f"{skipped} registry entries had an unknown shape and were skipped"))
    return RegistrySnapshot(entries=entries, skipped=skipped, present=True, diagnostics=diagnostics)

def _decode_row(row: Any) -> Optional[Tuple[List[SemanticElement], int]]:
    if not isinstance(row, (tuple, list)) or len(row) != 2:
        return None
    key, value = row
    if value is None:
        return None

    # flat: {scene, id} key pointing straight at an element record
    if isinstance(key, (tuple, list)) and len(key) == 2 and field_of(value, "id") is not None:
        scene = canonical_key(key[0])
        element = _decode_element(field_of(value, "id"), value, scene, _timestamp(value))
        if element is None:
            return None
        return [element], 0

    # nested: graph key pointing at a record with an id -> element map
    elements = field_of(value, "elements")
    if isinstance(elements, dict) or (hasattr(elements, "items") and hasattr(elements, "keys")):
        graph_key = canonical_key(key)
        timestamp = _timestamp(value)
        out = []
        bad = 0
        for element_id, record in list(elements.items()):
            element = _decode_element(element_id, record, graph_key, timestamp)
            if element is None:
                bad += 1
            else:
                out.append(element)
        return out, bad

    return None

def _decode_element(raw_id: Any, record: Any, owner: Optional[str], timestamp: float) -> Optional[SemanticElement]:
    if record is None or isinstance(record, (str, bytes, int, float, bool)):
        return None

    raw_bounds = None
    for name in BOUNDS_FIELDS:
        raw_bounds = _semantic_field(record, name)
        if raw_bounds is not None:
            break

    z_index = _semantic_field(record, "z_index")
    if not isinstance(z_index, int) or isinstance(z_index, bool):
        z_index = None

    return SemanticElement(
        id=ElementId.from_raw(raw_id),
        type=canonical_key(_semantic_field(record, "type")) or "unknown",
        clickable=bool(_semantic_field(record, "clickable", False)),
        local_bounds=Bounds.parse(raw_bounds),
        owning_graph_key=owner,
        registration_timestamp=timestamp,
        label=canonical_key(_semantic_field(record, "label")),
        role=canonical_key(_semantic_field(record, "role")),
        description=canonical_key(_semantic_field(record, "description")),
        z_index=z_index,
    )

def _semantic_field(record: Any, name: str, default: Any = None) -> Any:
    # some registrations keep their attributes under a `semantic` sub-record
    value = field_of(record, name)
    if value is None:
        semantic = field_of(record, "semantic")
        if semantic is not None and not isinstance(semantic, (str, bytes, int, float, bool)):
            value = field_of(semantic, name)
    return default if value is None else value

def _timestamp(record: Any) -> float:
    for name in TIMESTAMP_FIELDS:
        value = field_of(record, name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
    return 0
