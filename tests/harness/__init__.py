"""Textual in-process test harness for gitraffe.

Re-exports all public API for convenient imports:
    from tests.harness import run_app, press_and_settle, FakeSource, ...
"""

from tests.harness.app_runner import run_app
from tests.harness.interactions import (
    settle,
    press_and_settle,
    resize_and_settle,
)
from tests.harness.builders import (
    FakeSource,
    make_diff,
    make_graph_lines,
    make_hash,
    make_merge_lines,
    make_parsed,
    make_parsed_simple,
    make_record,
    make_simple_lines,
    scenario_lines,
)

__all__ = [
    "run_app",
    "settle",
    "press_and_settle",
    "resize_and_settle",
    "FakeSource",
    "make_diff",
    "make_graph_lines",
    "make_hash",
    "make_merge_lines",
    "make_parsed",
    "make_parsed_simple",
    "make_record",
    "make_simple_lines",
    "scenario_lines",
]
