import asyncio
import time

import pytest

from runner.errors import ElementNotFound, HostTimeout, InputDispatchError, InvalidElementGeometry, InvalidParameters

from conftest import FakeViewport, element, nested, save_button_viewport

def test_click_element_presses_and_releases_at_center(make_session):
    viewport = save_button_viewport()
    session = make_session(viewport)
    result = asyncio.run(session.executor.click_element(":save_button"))

    assert result["status"] == "ok"
    assert result["clicked_at"] == {"x": 360, "y": 135}
    assert result["element"]["id"] == "save_button"
    assert viewport.events == [
        ("cursor_pos", (360, 135)),
        ("cursor_button", ("btn_left", 1, [], (360, 135))),
        ("cursor_button", ("btn_left", 0, [], (360, 135))),
    ]

def test_hover_element_only_moves_the_cursor(make_session):
    viewport = save_button_viewport()
    session = make_session(viewport)
    result = asyncio.run(session.executor.hover_element("save_button"))
    assert result["position"] == {"x": 360, "y": 135}
    assert viewport.events == [("cursor_pos", (360, 135))]

def test_missing_element_sends_no_input(make_session):
    viewport = save_button_viewport()
    session = make_session(viewport)
    with pytest.raises(ElementNotFound):
        asyncio.run(session.executor.click_element("missing_id"))
    assert viewport.events == []

def test_element_without_geometry_is_not_clicked(make_session):
    viewport = FakeViewport(semantic_table={"g": nested({"broken": element(height=-1)})}, scene_script_table={})
    session = make_session(viewport)
    with pytest.raises(InvalidElementGeometry):
        asyncio.run(session.executor.click_element("broken"))
    assert viewport.events == []

def test_empty_element_id_is_rejected(make_session):
    session = make_session(save_button_viewport())
    with pytest.raises(InvalidParameters):
        asyncio.run(session.executor.click_element(""))

def test_raw_click_uses_requested_button(make_session):
    viewport = FakeViewport()
    session = make_session(viewport)
    asyncio.run(session.executor.click_xy(5, 6, "right"))
    assert viewport.events[1] == ("cursor_button", ("btn_right", 1, [], (5, 6)))

def test_move_without_input_driver_fails(make_session):
    session = make_session({"semantic_table": {}})
    with pytest.raises(InputDispatchError):
        asyncio.run(session.executor.move_xy(1, 2))

class StickyPressViewport(FakeViewport):
    """Records every event; the press call then hangs past the input timeout."""

    def send_input(self, event):
        super().send_input(event)
        if event[0] == "cursor_button" and event[1][1] == 1:
            time.sleep(0.3)

def test_button_is_released_when_press_times_out(make_session):
    viewport = StickyPressViewport()
    session = make_session(viewport, input_timeout_sec=0.05)
    with pytest.raises(HostTimeout):
        asyncio.run(session.executor.click_xy(7, 8))
    assert viewport.events[-1] == ("cursor_button", ("btn_left", 0, [], (7, 8)))
