# api/routes/action_routes.py
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends
from introspect.tools import Toolset
from ..deps import get_toolset

router = APIRouter()

@router.post("/actions")
async def execute_action(payload: Dict[str, Any] = Body(...), toolset: Toolset = Depends(get_toolset)):
    # same envelope as the line transport: errors are returned, not raised
    return await toolset.handle_action(payload)
