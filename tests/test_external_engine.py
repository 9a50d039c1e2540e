"""Smoke tests against a real engine, enabled with -E/--external-engine PATH."""

import pytest

from enginebench.bench import run_suite
from enginebench.driver import EngineDriver
from enginebench.snapshot import default_positions

pytestmark = pytest.mark.external_engine


def test_real_engine_searches_start_position(external_engine: str) -> None:
    position = default_positions()[0]
    with EngineDriver([external_engine], read_timeout=60.0) as driver:
        result = driver.search(position, 4)
    assert result.nodes > 0
    assert result.best_move


def test_real_engine_runs_the_default_suite(external_engine: str) -> None:
    positions = default_positions()[:3]
    with EngineDriver([external_engine], read_timeout=60.0) as driver:
        run = run_suite(driver, positions, 4)
    assert not run.failures
    assert [result.position for result in run.results] == positions
