# api/routes/element_routes.py
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException
from introspect.tools import Toolset
from ..deps import get_toolset

router = APIRouter()

STATUS_BY_KIND = {
    "invalid_json": 400,
    "element_not_found": 404,
    "unknown_command": 404,
    "invalid_parameters": 422,
    "invalid_element_geometry": 422,
    "input_dispatch_failed": 502,
    "screenshot_failed": 502,
    "host_timeout": 504,
}

def raise_for_error(result: Dict[str, Any]) -> Dict[str, Any]:
    if "error" in result:
        raise HTTPException(status_code=STATUS_BY_KIND.get(result.get("kind"), 500), detail=result)
    return result

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/elements")
async def find_clickable(filter: Optional[str] = None, toolset: Toolset = Depends(get_toolset)):
    return raise_for_error(await toolset.handle_action({"action": "find_clickable", "filter": filter}))

@router.get("/viewport")
async def inspect_viewport(toolset: Toolset = Depends(get_toolset)):
    return raise_for_error(await toolset.handle_action({"action": "inspect_viewport"}))

@router.post("/elements/{element_id}/click")
async def click_element(element_id: str, toolset: Toolset = Depends(get_toolset)):
    return raise_for_error(await toolset.handle_action({"action": "click_element", "element_id": element_id}))

@router.post("/elements/{element_id}/hover")
async def hover_element(element_id: str, toolset: Toolset = Depends(get_toolset)):
    return raise_for_error(await toolset.handle_action({"action": "hover_element", "element_id": element_id}))
