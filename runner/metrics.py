from prometheus_client import start_http_server, Counter, Gauge
import threading
from .logger import log

# Metrics
COMMAND_COUNTER = Counter("scene_introspect_commands_total", "Commands handled by the bridge", ["action", "outcome"])
SKIPPED_ENTRIES = Counter("scene_introspect_registry_skipped_total", "Registry entries skipped because their shape was not recognised")
DEPTH_LIMIT_HITS = Counter("scene_introspect_depth_limit_total", "Hierarchy walks stopped by the depth guard")
HOST_TIMEOUTS = Counter("scene_introspect_host_timeouts_total", "Host reads or input dispatches that timed out", ["operation"])
RESOLVED_ELEMENTS = Gauge("scene_introspect_resolved_elements", "Elements returned by the last clickable query")

_metrics_server_started = False
_metrics_lock = threading.Lock()

def start_metrics_server(port: int):
    global _metrics_server_started
    with _metrics_lock:
        if _metrics_server_started or port <= 0:
            return
        start_http_server(port)
        _metrics_server_started = True
        log("INFO", "metrics_started", f"Prometheus metrics server started on port {port}", port=port)
