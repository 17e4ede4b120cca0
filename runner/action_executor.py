# runner/action_executor.py
import time
import uuid
from typing import Any, Dict, Optional
from introspect.scene.serializer.service import ElementSerializer
from introspect.scene.service import SceneQueryService
from introspect.scene.views import ResolvedElement
from .errors import ElementNotFound, IntrospectionError, InvalidElementGeometry, InvalidParameters
from .input_dispatcher import InputDispatcher
from .logger import log

class ActionExecutor:
    """
    Element-level actions composed from a fresh clickable query and the
    input dispatcher. Keeps no state between calls, so every click aims at
    the geometry of the current frame.
    """

    def __init__(self, query_service: SceneQueryService, dispatcher: InputDispatcher, session_id: Optional[str] = None):
        self.query_service = query_service
        self.dispatcher = dispatcher
        self.session_id = session_id or "unknown"
        self._action_prefix = "action"

    # --------------------------
    # Helpers & logging
    # --------------------------
    def _new_action_id(self) -> str:
        return uuid.uuid4().hex

    def _log_start(self, aid: str, name: str, payload: Dict[str, Any]):
        log("INFO", f"{self._action_prefix}_start", f"Action {name} start", session_id=self.session_id, action_id=aid, **payload)

    def _log_success(self, aid: str, name: str, payload: Dict[str, Any], duration: float):
        log("INFO", f"{self._action_prefix}_success", f"Action {name} success", session_id=self.session_id, action_id=aid, duration_ms=int(duration*1000), **payload)

    def _log_failure(self, aid: str, name: str, payload: Dict[str, Any], error: IntrospectionError):
        log("ERROR", f"{self._action_prefix}_failed", f"Action {name} failed", session_id=self.session_id, action_id=aid, kind=error.kind, error=str(error), **payload)

    async def _locate(self, element_id: Any) -> ResolvedElement:
        if not isinstance(element_id, str) or not element_id:
            raise InvalidParameters("Invalid parameters: must provide 'element_id' parameter")
        result = await self.query_service.find_clickable(filter=element_id)
        target = result.first()
        if target is None:
            raise ElementNotFound(f"Element '{element_id}' not found or not clickable")
        if target.absolute_center is None:
            raise InvalidElementGeometry(f"Element '{element_id}' found but has no valid bounds to compute a center")
        return target

    # --------------------------
    # Element actions
    # --------------------------
    async def click_element(self, element_id: str) -> Dict[str, Any]:
        aid = self._new_action_id()
        payload = {"action": "click_element", "element_id": element_id}
        self._log_start(aid, "click_element", payload)
        start = time.time()
        try:
            target = await self._locate(element_id)
            x, y = target.absolute_center.x, target.absolute_center.y
            await self.dispatcher.click(x, y)
        except IntrospectionError as e:
            self._log_failure(aid, "click_element", payload, e)
            raise
        self._log_success(aid, "click_element", {**payload, "x": x, "y": y}, time.time() - start)
        return {
            "status": "ok",
            "message": f"Clicked element {element_id}",
            "element": ElementSerializer.element_to_dict(target),
            "clicked_at": {"x": x, "y": y},
        }

    async def hover_element(self, element_id: str) -> Dict[str, Any]:
        aid = self._new_action_id()
        payload = {"action": "hover_element", "element_id": element_id}
        self._log_start(aid, "hover_element", payload)
        start = time.time()
        try:
            target = await self._locate(element_id)
            x, y = target.absolute_center.x, target.absolute_center.y
            await self.dispatcher.move(x, y)
        except IntrospectionError as e:
            self._log_failure(aid, "hover_element", payload, e)
            raise
        self._log_success(aid, "hover_element", {**payload, "x": x, "y": y}, time.time() - start)
        return {
            "status": "ok",
            "message": f"Hovering over element {element_id}",
            "element": ElementSerializer.element_to_dict(target),
            "position": {"x": x, "y": y},
        }

    # --------------------------
    # Raw pointer actions
    # --------------------------
    async def click_xy(self, x: float, y: float, button: str = "left") -> Dict[str, Any]:
        aid = self._new_action_id()
        payload = {"action": "click_xy", "x": x, "y": y, "button": button}
        self._log_start(aid, "click_xy", payload)
        start = time.time()
        try:
            result = await self.dispatcher.click(x, y, button)
        except IntrospectionError as e:
            self._log_failure(aid, "click_xy", payload, e)
            raise
        self._log_success(aid, "click_xy", payload, time.time() - start)
        return result

    async def move_xy(self, x: float, y: float) -> Dict[str, Any]:
        aid = self._new_action_id()
        payload = {"action": "move_xy", "x": x, "y": y}
        self._log_start(aid, "move_xy", payload)
        start = time.time()
        try:
            result = await self.dispatcher.move(x, y)
        except IntrospectionError as e:
            self._log_failure(aid, "move_xy", payload, e)
            raise
        self._log_success(aid, "move_xy", payload, time.time() - start)
        return result
