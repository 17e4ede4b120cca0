import logging
from typing import Any, List, Optional, Tuple
from runner.errors import NoTopology
from runner.host import ViewportHost
from .registry import decode_registry
from .resolver import resolve_versions
from .topology import Topology
from .transforms import DEFAULT_MAX_DEPTH, accumulate
from .views import (
    Diagnostic,
    QueryResult,
    RegistrySnapshot,
    ResolvedElement,
    SemanticElement,
)

logger = logging.getLogger(__name__)

class SceneQueryService:
    """
    Finds semantic elements in the live scene and places them in viewport
    coordinates. Holds no state between calls: every query takes its own
    registry and topology snapshot.
    """

    def __init__(self, host: ViewportHost, root_key: str = "_root_", max_depth: int = DEFAULT_MAX_DEPTH):
        self.host = host
        self.root_key = root_key
        self.max_depth = max_depth

    async def read_registry(self) -> RegistrySnapshot:
        return decode_registry(await self.host.read_registry())

    async def read_topology(self) -> Optional[Topology]:
        topology, _ = await self.read_scene()
        return topology

    async def read_scene(self) -> Tuple[Optional[Topology], Optional[List[Any]]]:
        """Topology plus the raw render keys, each table read once."""
        rows = await self.host.read_topology()
        render_keys = await self.host.read_render_keys()
        topology = Topology.build(rows, render_keys) if rows is not None else None
        return topology, render_keys

    async def find_clickable(self, filter: Optional[str] = None) -> QueryResult:
        snapshot = await self.read_registry()
        elements = [e for e in resolve_versions(snapshot.entries, self.root_key) if e.clickable]
        if filter is not None:
            elements = [e for e in elements if e.id.matches(filter)]
        return await self._resolve(elements, snapshot)

    async def inspect(self) -> Tuple[QueryResult, Optional[Topology], Optional[List[Any]]]:
        """
        All elements together with the topology and render keys they were
        placed against, so a viewport description is internally consistent.
        """
        snapshot = await self.read_registry()
        topology, render_keys = await self.read_scene()
        result = self._place_all(resolve_versions(snapshot.entries, self.root_key), snapshot, topology)
        return result, topology, render_keys

    async def _resolve(self, elements: List[SemanticElement], snapshot: RegistrySnapshot) -> QueryResult:
        topology = await self.read_topology() if elements else None
        return self._place_all(elements, snapshot, topology)

    def _place_all(self, elements: List[SemanticElement], snapshot: RegistrySnapshot, topology: Optional[Topology]) -> QueryResult:
        diagnostics = list(snapshot.diagnostics)
        if not elements:
            return QueryResult(elements=[], diagnostics=diagnostics, skipped_entries=snapshot.skipped, registry_present=snapshot.present)

        if topology is None:
            logger.warning("No scene store in viewport; using zero ancestor offsets")
            diagnostics.append(Diagnostic(kind=NoTopology.kind, message="Scene store unavailable; positions are local, not absolute"))

        resolved = []
        for element in elements:
            item, notes = self._place(element, topology)
            resolved.append(item)
            # without a topology the summary diagnostic above already says it all
            if topology is not None:
                diagnostics.extend(notes)

        return QueryResult(elements=resolved, diagnostics=diagnostics, skipped_entries=snapshot.skipped, registry_present=snapshot.present)

    def _place(self, element: SemanticElement, topology: Optional[Topology]) -> Tuple[ResolvedElement, List[Diagnostic]]:
        acc = accumulate(element.owning_graph_key, topology, self.root_key, self.max_depth)
        for diagnostic in acc.diagnostics:
            diagnostic.element_id = str(element.id)

        absolute_bounds = None
        absolute_center = None
        if element.local_bounds is not None:
            absolute_bounds = element.local_bounds.translate(acc.dx, acc.dy)
            absolute_center = absolute_bounds.center

        return ResolvedElement(
            element=element,
            absolute_bounds=absolute_bounds,
            absolute_center=absolute_center,
            position_approximate=acc.approximate,
        ), acc.diagnostics
