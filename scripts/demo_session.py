import os
import sys
# Add project root to path
sys.path.append(os.getcwd())

import asyncio
import json
import threading
from introspect.bridge.session import BridgeSession
from introspect.tools import Toolset

class DemoViewport:
    """
    Stand-in for a live GUI viewport: a root scene with a toolbar and a
    translated modal holding a scrolled form.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self.events = []
        self.scene_script_table = {
            "_root_": {"children": ["toolbar", "modal"], "transforms": []},
            "toolbar": {"children": [], "transforms": [("translate", (0, 0))]},
            "modal": {"children": ["form"], "transforms": [("translate", (300, 100))]},
            "form": {"children": [], "transforms": [("translate", (20, 40))]},
        }
        self.script_table = {key: b"" for key in self.scene_script_table}
        self.semantic_table = {
            ("_root_", "menu_file"): {
                "id": "menu_file", "type": "menu_item", "clickable": True, "label": "File",
                "local_bounds": {"left": 0, "top": 0, "width": 60, "height": 24}, "z_index": 1,
            },
            "form": {
                "timestamp": 2,
                "elements": {
                    "save_button": {
                        "type": "button", "clickable": True, "label": "Save",
                        "local_bounds": {"left": 10, "top": 20, "width": 100, "height": 30},
                    },
                    "name_field": {
                        "type": "text_field", "clickable": True, "role": "textbox",
                        "local_bounds": {"left": 10, "top": 60, "width": 200, "height": 24},
                    },
                    "title": {"type": "text", "clickable": False, "local_bounds": {"left": 0, "top": 0, "width": 80, "height": 16}},
                },
            },
        }

    def send_input(self, event):
        with self.lock:
            self.events.append(event)

def build_demo_viewport() -> DemoViewport:
    return DemoViewport()

async def main():
    viewport = build_demo_viewport()
    toolset = Toolset(BridgeSession(viewport))

    for command in (
        {"action": "find_clickable"},
        {"action": "click_element", "element_id": ":save_button"},
        {"action": "hover_element", "element_id": "missing_id"},
    ):
        print(f"> {json.dumps(command)}")
        print(json.dumps(await toolset.handle_action(command), indent=2))

    print(f"Input events sent: {viewport.events}")

if __name__ == "__main__":
    asyncio.run(main())
