import json
import logging
import traceback
from typing import Any, Awaitable, Callable, Dict
from pydantic import ValidationError
from runner import metrics
from runner.errors import DepthLimitExceeded, IntrospectionError, InvalidParameters, UnknownCommand
from introspect.bridge.session import BridgeSession
from introspect.schemas import Command
from introspect.scene.serializer.service import ElementSerializer

logger = logging.getLogger(__name__)

Handler = Callable[[Command], Awaitable[Dict[str, Any]]]

class Toolset:
    """
    Maps incoming commands to session operations and guarantees a
    well-formed, JSON-safe response for every one of them. Failures come
    back as {"error", "kind", "retryable"}; nothing escapes as an exception.
    """

    def __init__(self, session: BridgeSession):
        self.session = session
        self._handlers: Dict[str, Handler] = {
            "status": self._status,
            "inspect_viewport": self._inspect_viewport,
            "find_clickable": self._find_clickable,
            "click_element": self._click_element,
            "hover_element": self._hover_element,
            "send_mouse_move": self._send_mouse_move,
            "send_mouse_click": self._send_mouse_click,
            "take_screenshot": self._take_screenshot,
        }

    @property
    def actions(self):
        return list(self._handlers)

    async def handle_line(self, line: str) -> Dict[str, Any]:
        text = line.strip()
        if text == "hello":
            # connection probe used by clients before the first command
            return {"status": "ok", "message": "Hello from Scene Introspect bridge"}
        try:
            payload = json.loads(text)
        except (ValueError, RecursionError):
            # deeply nested input overflows the decoder
            logger.error(f"Received invalid JSON: {text[:200]!r}")
            return {"error": "Invalid JSON", "kind": "invalid_json", "retryable": False}
        return await self.handle_action(payload)

    async def handle_action(self, payload: Any) -> Dict[str, Any]:
        action = payload.get("action") if isinstance(payload, dict) else None
        if not isinstance(action, str):
            return self._failure("invalid", InvalidParameters("Invalid action format - must include 'action' key"))

        handler = self._handlers.get(action)
        if handler is None:
            return self._failure(action, UnknownCommand(f"Unknown command: {action}"))

        try:
            command = Command.model_validate(payload)
        except ValidationError as e:
            reasons = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
            return self._failure(action, InvalidParameters(f"Invalid parameters: {reasons}"))

        try:
            result = await handler(command)
        except IntrospectionError as e:
            return self._failure(action, e)
        except Exception as e:
            logger.error(f"Command {action} crashed: {e}\n{traceback.format_exc()}")
            metrics.COMMAND_COUNTER.labels(action=action, outcome="internal_error").inc()
            return {"error": f"Internal error while handling {action}: {e}", "kind": "internal_error", "retryable": False}

        metrics.COMMAND_COUNTER.labels(action=action, outcome="ok").inc()
        return result

    def _failure(self, action: str, error: IntrospectionError) -> Dict[str, Any]:
        logger.warning(f"Command {action} failed ({error.kind}): {error}")
        metrics.COMMAND_COUNTER.labels(action=action, outcome=error.kind).inc()
        return error.to_response()

    # --------------------------
    # Handlers
    # --------------------------
    async def _status(self, command: Command) -> Dict[str, Any]:
        return {
            "status": "ok",
            "message": "Scene Introspect bridge is running",
            "app_name": self.session.profile.app_name,
            "session_id": self.session.session_id,
            "actions": self.actions,
        }

    async def _inspect_viewport(self, command: Command) -> Dict[str, Any]:
        result, topology, script_keys = await self.session.query_service.inspect()
        return ElementSerializer.describe_viewport(result, script_keys, topology)

    async def _find_clickable(self, command: Command) -> Dict[str, Any]:
        result = await self.session.query_service.find_clickable(filter=command.filter)
        skipped = result.skipped_entries
        if skipped:
            metrics.SKIPPED_ENTRIES.inc(skipped)
        depth_hits = sum(1 for d in result.diagnostics if d.kind == DepthLimitExceeded.kind)
        if depth_hits:
            metrics.DEPTH_LIMIT_HITS.inc(depth_hits)
        metrics.RESOLVED_ELEMENTS.set(result.count)
        return ElementSerializer.query_to_dict(result)

    async def _click_element(self, command: Command) -> Dict[str, Any]:
        return await self.session.executor.click_element(command.element_id)

    async def _hover_element(self, command: Command) -> Dict[str, Any]:
        return await self.session.executor.hover_element(command.element_id)

    async def _send_mouse_move(self, command: Command) -> Dict[str, Any]:
        return await self.session.executor.move_xy(command.x, command.y)

    async def _send_mouse_click(self, command: Command) -> Dict[str, Any]:
        return await self.session.executor.click_xy(command.x, command.y, command.button)

    async def _take_screenshot(self, command: Command) -> Dict[str, Any]:
        return await self.session.screenshots.capture(filename=command.filename, format=command.format)
