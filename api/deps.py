from typing import Any, Optional
from fastapi import Request
from introspect.bridge.profile import BridgeProfile
from introspect.bridge.session import BridgeSession
from introspect.tools import Toolset
from runner import config, metrics
from runner.logger import log

def init_services(app, viewport: Any, profile: Optional[BridgeProfile] = None):
    session = BridgeSession(viewport, profile)
    app.state.session = session
    app.state.toolset = Toolset(session)

    try:
        metrics.start_metrics_server(config.PROMETHEUS_METRICS_PORT)
    except Exception as e:
        log("WARN", "metrics_start_failed", "Could not start Prometheus metrics server; continuing without metrics", error=str(e))

def get_toolset(request: Request) -> Toolset:
    return request.app.state.toolset
