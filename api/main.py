# api/main.py
from typing import Any, Optional
from fastapi import FastAPI
from introspect.bridge.profile import BridgeProfile
from .deps import init_services
from .routes import action_routes, element_routes

def create_app(viewport: Any, profile: Optional[BridgeProfile] = None) -> FastAPI:
    """
    Builds the HTTP surface for a live viewport. The GUI process owns the
    viewport and mounts or serves this app next to it.
    """
    app = FastAPI(title="Scene Introspect API")
    init_services(app, viewport, profile)

    app.include_router(element_routes.router, prefix="/api")
    app.include_router(action_routes.router, prefix="/api")
    return app
