import asyncio
import time

import pytest

from runner.errors import HostTimeout
from introspect.scene.views import Bounds, Point

from conftest import FakeViewport, element, nested, node, save_button_viewport

def test_nested_element_is_placed_in_viewport_coordinates(make_session):
    session = make_session(save_button_viewport())
    result = asyncio.run(session.query_service.find_clickable())

    assert result.count == 1
    item = result.first()
    assert str(item.id) == "save_button"
    assert item.absolute_bounds == Bounds(310, 120, 100, 30)
    assert item.absolute_center == Point(360, 135)
    assert item.position_approximate is False
    assert result.diagnostics == []

def test_colon_prefix_is_insignificant(make_session):
    session = make_session(save_button_viewport())
    plain = asyncio.run(session.query_service.find_clickable(filter="save_button"))
    prefixed = asyncio.run(session.query_service.find_clickable(filter=":save_button"))
    assert plain.first().absolute_center == prefixed.first().absolute_center

def test_filter_is_exact_not_substring(make_session):
    viewport = FakeViewport(semantic_table={"g": nested({"foobar": element(), "foo": element(left=50)})})
    session = make_session(viewport)
    result = asyncio.run(session.query_service.find_clickable(filter="foo"))
    assert [str(e.id) for e in result.elements] == ["foo"]
    assert asyncio.run(session.query_service.find_clickable(filter="fo")).count == 0

def test_non_clickable_elements_are_excluded(make_session):
    viewport = FakeViewport(semantic_table={"g": nested({"title": element(clickable=False), "ok": element()})})
    session = make_session(viewport)
    result = asyncio.run(session.query_service.find_clickable())
    assert [str(e.id) for e in result.elements] == ["ok"]
    everything, _, _ = asyncio.run(session.query_service.inspect())
    assert everything.count == 2

def test_empty_registry_is_an_empty_success(make_session):
    session = make_session(FakeViewport(semantic_table={}))
    result = asyncio.run(session.query_service.find_clickable())
    assert result.count == 0
    assert result.diagnostics == []
    assert result.registry_present is True

def test_missing_registry_is_reported(make_session):
    session = make_session(FakeViewport())
    result = asyncio.run(session.query_service.find_clickable())
    assert result.count == 0
    assert result.registry_present is False
    assert [d.kind for d in result.diagnostics] == ["no_registry"]

def test_missing_topology_returns_local_positions_flagged(make_session):
    viewport = FakeViewport(semantic_table={"g2": nested({"save": element(left=10, top=20)})})
    session = make_session(viewport)
    result = asyncio.run(session.query_service.find_clickable())
    item = result.first()
    assert item.absolute_bounds == Bounds(10, 20, 10, 10)
    assert item.position_approximate is True
    assert [d.kind for d in result.diagnostics] == ["no_topology"]

def test_root_version_wins_over_stale_subgraph(make_session):
    viewport = FakeViewport(
        semantic_table=[
            (("_root_", "ok"), {"id": "ok", "clickable": True, "local_bounds": [0, 0, 10, 10], "timestamp": 1}),
            ("g1", nested({"ok": element(left=500)}, timestamp=99)),
        ],
        scene_script_table={"_root_": node(["g1"]), "g1": node([], translate=(1, 1))},
    )
    session = make_session(viewport)
    result = asyncio.run(session.query_service.find_clickable(filter="ok"))
    assert result.count == 1
    assert result.first().absolute_center == Point(5, 5)

def test_invalid_geometry_is_kept_without_center(make_session):
    viewport = FakeViewport(semantic_table={"g": nested({"broken": element(width=float("nan"))})}, scene_script_table={})
    session = make_session(viewport)
    item = asyncio.run(session.query_service.find_clickable()).first()
    assert item.absolute_bounds is None
    assert item.absolute_center is None

def test_depth_limit_is_reported_per_element(make_session):
    scenes = {"_root_": node(["n0"])}
    for i in range(12):
        scenes[f"n{i}"] = node([f"n{i + 1}"], translate=(1, 0))
    viewport = FakeViewport(semantic_table={"n11": nested({"deep": element()})}, scene_script_table=scenes)
    session = make_session(viewport, max_depth=10)
    result = asyncio.run(session.query_service.find_clickable())
    item = result.first()
    assert item.position_approximate is True
    assert item.absolute_bounds.left == 10
    diagnostic = result.diagnostics[0]
    assert (diagnostic.kind, diagnostic.element_id) == ("depth_limit_exceeded", "deep")

def test_unresponsive_host_times_out(make_session):
    def slow_table():
        time.sleep(0.3)
        return {}

    session = make_session(FakeViewport(semantic_table=slow_table), host_timeout_sec=0.05)
    with pytest.raises(HostTimeout) as exc:
        asyncio.run(session.query_service.find_clickable())
    assert exc.value.retryable is True
