# runner/input_dispatcher.py
import asyncio
from typing import Any, Dict
from . import config
from .errors import IntrospectionError
from .host import ViewportHost
from .logger import log

BUTTONS = {
    "left": "btn_left",
    "right": "btn_right",
    "middle": "btn_middle",
}

def parse_button(button: Any) -> str:
    if isinstance(button, str):
        return BUTTONS.get(button.lower(), "btn_left")
    return "btn_left"

class InputDispatcher:
    """
    Encodes pointer intents as driver input events:
      ("cursor_pos", (x, y))
      ("cursor_button", (button, 1 | 0, [], (x, y)))
    """

    def __init__(self, host: ViewportHost, hold_sec: float = None):
        self.host = host
        self.hold_sec = config.CLICK_HOLD_SEC if hold_sec is None else hold_sec

    async def move(self, x: float, y: float) -> Dict[str, Any]:
        await self.host.send_input(("cursor_pos", (x, y)))
        return {"status": "ok", "message": f"Mouse moved to ({x}, {y})"}

    async def click(self, x: float, y: float, button: str = "left") -> Dict[str, Any]:
        btn = parse_button(button)
        await self.host.send_input(("cursor_pos", (x, y)))
        pressed = True
        try:
            await self.host.send_input(("cursor_button", (btn, 1, [], (x, y))))
            if self.hold_sec > 0:
                await asyncio.sleep(self.hold_sec)
            pressed = False
            await self.host.send_input(("cursor_button", (btn, 0, [], (x, y))))
        finally:
            if pressed:
                await self._release(btn, x, y)
        return {"status": "ok", "message": f"Mouse clicked at ({x}, {y})"}

    async def _release(self, btn: str, x: float, y: float):
        # the press may have reached the driver even if its call failed
        try:
            await self.host.send_input(("cursor_button", (btn, 0, [], (x, y))))
        except IntrospectionError as e:
            log("WARN", "input_release_failed", "Could not release pointer button after a failed click", button=btn, error=str(e))
