# runner/host.py
import asyncio
from typing import Any, Callable, List, Optional
from . import config, metrics
from .errors import HostTimeout, InputDispatchError, ScreenshotError
from .logger import log
from .retry import retry

REGISTRY_TABLE = "semantic_table"
TOPOLOGY_TABLE = "scene_script_table"
RENDER_TABLE = "script_table"

def _log_torn_copy(attempt: int, exc: BaseException) -> None:
    log("WARN", "host_torn_copy", "Table changed while copying, retrying", attempt=attempt, error=str(exc))

@retry(
    attempts=config.SNAPSHOT_COPY_ATTEMPTS,
    allowed_exceptions=(RuntimeError,),
    before_try=_log_torn_copy,
    base=0.005,
    cap=0.05,
)
def copy_rows(table: Any) -> List[Any]:
    """
    Copies a host table into a plain list of rows. Mappings become
    (key, value) pairs; callables are invoked and their result copied.
    A dict resized by the GUI thread mid-copy raises RuntimeError, which is
    retried.
    """
    if callable(table) and not hasattr(table, "items"):
        table = table()
    if hasattr(table, "items"):
        return list(table.items())
    return list(table)

class ViewportHost:
    """
    Read-only, time-bounded access to a live viewport owned by the GUI.

    The viewport may be an object or a mapping exposing `semantic_table`,
    `scene_script_table`, `script_table`, `send_input` and `screenshot`.
    Every call runs off the event loop and fails with HostTimeout instead of
    blocking the connection.
    """

    def __init__(self, viewport: Any, timeout_sec: float = None, input_timeout_sec: float = None):
        self.viewport = viewport
        self.timeout_sec = timeout_sec if timeout_sec is not None else config.HOST_TIMEOUT_SEC
        self.input_timeout_sec = input_timeout_sec if input_timeout_sec is not None else config.INPUT_TIMEOUT_SEC

    def _lookup(self, name: str) -> Any:
        if isinstance(self.viewport, dict):
            return self.viewport.get(name)
        return getattr(self.viewport, name, None)

    async def _bounded(self, fn: Callable, *args, operation: str, timeout: float) -> Any:
        try:
            return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=timeout)
        except asyncio.TimeoutError:
            metrics.HOST_TIMEOUTS.labels(operation=operation).inc()
            log("WARN", "host_timeout", f"Host did not answer {operation} in time", operation=operation, timeout_sec=timeout)
            raise HostTimeout(f"Host did not answer {operation} within {timeout}s")

    async def _read_table(self, name: str) -> Optional[List[Any]]:
        table = self._lookup(name)
        if table is None:
            return None
        return await self._bounded(copy_rows, table, operation=f"read_{name}", timeout=self.timeout_sec)

    # --------------------------
    # Snapshots
    # --------------------------
    async def read_registry(self) -> Optional[List[Any]]:
        return await self._read_table(REGISTRY_TABLE)

    async def read_topology(self) -> Optional[List[Any]]:
        return await self._read_table(TOPOLOGY_TABLE)

    async def read_render_keys(self) -> Optional[List[Any]]:
        rows = await self._read_table(RENDER_TABLE)
        if rows is None:
            return None
        return [row[0] if isinstance(row, (tuple, list)) and row else row for row in rows]

    # --------------------------
    # Delegated calls
    # --------------------------
    async def send_input(self, event: Any) -> None:
        sender = self._lookup("send_input")
        if sender is None:
            raise InputDispatchError("No input driver found on the viewport")
        try:
            await self._bounded(sender, event, operation="send_input", timeout=self.input_timeout_sec)
        except HostTimeout:
            raise
        except Exception as e:
            raise InputDispatchError(f"Failed to send input: {e}")

    async def screenshot(self, path: str) -> str:
        capture = self._lookup("screenshot")
        if capture is None:
            raise ScreenshotError("No screenshot capability found on the viewport")
        try:
            await self._bounded(capture, path, operation="screenshot", timeout=self.timeout_sec)
        except HostTimeout:
            raise
        except Exception as e:
            raise ScreenshotError(f"Screenshot failed: {e}")
        return path
