from fastapi.testclient import TestClient

from api.main import create_app
from introspect.bridge.profile import BridgeProfile

from conftest import FakeViewport, save_button_viewport

def client_for(viewport):
    return TestClient(create_app(viewport, BridgeProfile(click_hold_sec=0)))

def test_health():
    response = client_for(FakeViewport()).get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

def test_list_and_filter_elements():
    client = client_for(save_button_viewport())
    response = client.get("/api/elements", params={"filter": ":save_button"})
    assert response.status_code == 200
    assert response.json()["elements"][0]["center"] == {"x": 360, "y": 135}

def test_click_element_route():
    viewport = save_button_viewport()
    client = client_for(viewport)
    response = client.post("/api/elements/save_button/click")
    assert response.status_code == 200
    assert response.json()["clicked_at"] == {"x": 360, "y": 135}
    assert viewport.events[0] == ("cursor_pos", (360, 135))

def test_missing_element_maps_to_404():
    client = client_for(save_button_viewport())
    response = client.post("/api/elements/missing_id/hover")
    assert response.status_code == 404
    assert response.json()["detail"]["kind"] == "element_not_found"

def test_viewport_route():
    response = client_for(save_button_viewport()).get("/api/viewport")
    assert response.status_code == 200
    assert response.json()["semantic_elements"]["clickable_count"] == 1

def test_actions_route_returns_envelope_as_is():
    client = client_for(FakeViewport())
    response = client.post("/api/actions", json={"action": "explode"})
    assert response.status_code == 200
    assert response.json()["kind"] == "unknown_command"
