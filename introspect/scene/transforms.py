import logging
import math
from typing import Any, Iterable, Optional, Tuple
from runner.errors import DepthLimitExceeded, NoTopology
from .topology import Topology
from .views import Accumulation, Diagnostic, TransformOp

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10

def accumulate(graph_key: Optional[str], topology: Optional[Topology], root_key: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Accumulation:
    """
    Sums the translate offsets of every ancestor of `graph_key`, from its
    immediate parent up to (not including) the root.

    The walk is iterative and stops when no parent is found, when the parent
    is the root, or after `max_depth` ancestors. A cyclic or over-deep chain
    therefore terminates with the partial sum and a depth_limit_exceeded
    diagnostic. Only translation is applied; scale, rotation and non-identity
    matrices mark the result approximate.
    """
    acc = Accumulation()
    if graph_key is None or graph_key == root_key:
        return acc

    if topology is None:
        acc.approximate = True
        acc.diagnostics.append(Diagnostic(
            kind=NoTopology.kind,
            message="Scene store unavailable; ancestor transforms were not applied",
            graph_key=graph_key,
        ))
        return acc

    current = graph_key
    while True:
        parent = topology.parent_of(current)
        if parent is None or parent == root_key:
            break
        if acc.depth >= max_depth:
            message = f"Max hierarchy depth ({max_depth}) reached walking up from {graph_key}, stopped at {current}"
            logger.warning(message)
            acc.depth_limited = True
            acc.approximate = True
            acc.diagnostics.append(Diagnostic(kind=DepthLimitExceeded.kind, message=message, graph_key=graph_key))
            break

        dx, dy, approximate = translate_of(topology.transforms_of(parent))
        logger.debug(f"Parent {parent} of {current} translates by ({dx}, {dy})")
        acc.dx += dx
        acc.dy += dy
        acc.approximate = acc.approximate or approximate
        acc.depth += 1
        current = parent

    return acc

def translate_of(ops: Iterable[TransformOp]) -> Tuple[float, float, bool]:
    """Returns (dx, dy, approximate) for one node's transform ops."""
    dx = 0
    dy = 0
    approximate = False
    for op in ops:
        if op.name == "translate":
            pair = _pair(op.value)
            if pair is None:
                logger.debug(f"Unreadable translate value: {op.value!r}")
                approximate = True
                continue
            dx += pair[0]
            dy += pair[1]
        elif op.name == "matrix":
            matrix = _numbers(op.value)
            if matrix is None or len(matrix) != 6:
                approximate = True
                continue
            a, b, c, d, tx, ty = matrix
            dx += tx
            dy += ty
            if (a, b, c, d) != (1, 0, 0, 1):
                approximate = True
        elif op.name in ("scale", "rotate"):
            if not _is_identity(op.name, op.value):
                approximate = True
    return dx, dy, approximate

def _is_identity(name: str, value: Any) -> bool:
    if name == "rotate":
        return _number(value) == 0
    if _number(value) is not None:
        return value == 1
    pair = _pair(value)
    return pair == (1, 1)

def _number(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return value
    return None

def _numbers(value: Any) -> Optional[Tuple[float, ...]]:
    if not isinstance(value, (tuple, list)):
        return None
    out = tuple(_number(v) for v in value)
    if any(v is None for v in out):
        return None
    return out

def _pair(value: Any) -> Optional[Tuple[float, float]]:
    numbers = _numbers(value)
    if numbers is None or len(numbers) != 2:
        return None
    return numbers
