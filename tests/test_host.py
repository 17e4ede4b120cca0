import asyncio

import pytest

from runner.errors import InputDispatchError, ScreenshotError
from runner.host import ViewportHost, copy_rows

class TornTable:
    """Raises like a dict resized mid-iteration for the first `failures` copies."""

    def __init__(self, rows, failures):
        self.rows = rows
        self.failures = failures
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError("dictionary changed size during iteration")
        return dict(self.rows)

def test_torn_copy_is_retried():
    table = TornTable({"a": 1}, failures=2)
    assert copy_rows(table) == [("a", 1)]
    assert table.calls == 3

def test_persistently_torn_copy_gives_up():
    table = TornTable({"a": 1}, failures=10)
    with pytest.raises(RuntimeError):
        copy_rows(table)

def test_sequences_are_copied_as_rows():
    assert copy_rows([("a", 1)]) == [("a", 1)]

def test_mapping_viewport_and_missing_tables():
    host = ViewportHost({"semantic_table": {"g": {"elements": {}}}})
    assert asyncio.run(host.read_registry()) == [("g", {"elements": {}})]
    assert asyncio.run(host.read_topology()) is None
    assert asyncio.run(host.read_render_keys()) is None

def test_render_keys_are_first_column():
    host = ViewportHost({"script_table": [("main", "script"), ("button", "script")]})
    assert asyncio.run(host.read_render_keys()) == ["main", "button"]

def test_driver_failures_are_typed():
    def send_input(event):
        raise OSError("driver gone")

    host = ViewportHost({"send_input": send_input})
    with pytest.raises(InputDispatchError):
        asyncio.run(host.send_input(("cursor_pos", (0, 0))))
    with pytest.raises(ScreenshotError):
        asyncio.run(host.screenshot("/tmp/none.png"))
