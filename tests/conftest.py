import os
import sys
import pytest

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from introspect.bridge.profile import BridgeProfile
from introspect.bridge.session import BridgeSession

class FakeViewport:
    """Viewport double: plain dict tables plus a recording input driver."""

    def __init__(self, semantic_table=None, scene_script_table=None, script_table=None):
        self.semantic_table = semantic_table
        self.scene_script_table = scene_script_table
        self.script_table = script_table
        self.events = []
        self.screenshots = []

    def send_input(self, event):
        self.events.append(event)

    def screenshot(self, path):
        from PIL import Image
        Image.new("RGBA", (64, 32), (255, 0, 0, 255)).save(path, format="PNG")
        self.screenshots.append(path)

def element(clickable=True, type="button", left=0, top=0, width=10, height=10, **extra):
    record = {
        "type": type,
        "clickable": clickable,
        "local_bounds": {"left": left, "top": top, "width": width, "height": height},
    }
    record.update(extra)
    return record

def nested(elements, timestamp=0):
    return {"elements": elements, "timestamp": timestamp}

def node(children=(), translate=None, **ops):
    transforms = []
    if translate is not None:
        transforms.append(("translate", translate))
    transforms.extend(ops.items())
    return {"children": list(children), "transforms": transforms}

def save_button_viewport():
    """save_button in g2, g2 under g1 translated by (300, 100), g1 under root."""
    return FakeViewport(
        semantic_table={
            "g2": nested({"save_button": element(left=10, top=20, width=100, height=30, label="Save")}, timestamp=1),
        },
        scene_script_table={
            "_root_": node(["g1"]),
            "g1": node(["g2"], translate=(300, 100)),
            "g2": node([], translate=(5, 5)),
        },
    )

@pytest.fixture
def make_session():
    def _make(viewport, **profile):
        profile.setdefault("click_hold_sec", 0)
        return BridgeSession(viewport, BridgeProfile(**profile), session_id="test")
    return _make
