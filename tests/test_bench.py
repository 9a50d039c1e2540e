from enginebench.bench import run_diff, run_suite
from enginebench.driver import EngineDriver
from enginebench.errors import DepthMismatch, EngineTimeout, MissingFieldDefaulted, PositionMismatch
from enginebench.position import Position
from enginebench.result import SearchResult

START = Position.parse("startpos")
ENDGAME = Position.parse("8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1")


def baseline(position: Position, nodes: int = 500, time_ms: int = 100, best_move: str = "e2e4") -> SearchResult:
    return SearchResult.from_search(
        position=position, depth=5, nodes=nodes, time_ms=time_ms, score=12, best_move=best_move
    )


def test_run_suite_collects_results(fake_engine) -> None:
    seen = []
    with EngineDriver(fake_engine("normal")) as driver:
        run = run_suite(driver, [START, ENDGAME], 5, on_result=seen.append)

    assert [result.position for result in run.results] == [START, ENDGAME]
    assert seen == run.results
    assert run.failures == []
    assert not run.aborted
    summary = run.summary()
    assert summary.count == 2
    assert summary["nodes"].total == 500


def test_run_diff_compares_against_baseline(fake_engine) -> None:
    diffs = []
    with EngineDriver(fake_engine("normal")) as driver:
        run = run_diff(driver, [baseline(START), baseline(ENDGAME, best_move="b4b5")], 5, on_diff=diffs.append)

    assert len(run.diffs) == 2
    assert diffs == run.diffs
    report = run.report()
    assert report.count == 2
    assert report.improved("nodes") == (2, 2)
    assert report["nodes"].mean_relative == -0.5
    assert report.best_move_changes == 1


def test_per_position_failures_do_not_stop_the_run(fake_engine) -> None:
    failures = []
    with EngineDriver(fake_engine("partial")) as driver:
        run = run_suite(driver, [START, ENDGAME], 5, on_failure=failures.append)

    assert run.results == []
    assert len(run.failures) == 2
    assert failures == run.failures
    assert all(isinstance(failure.error, MissingFieldDefaulted) for failure in run.failures)
    assert not run.aborted


def test_timeout_aborts_the_run(fake_engine) -> None:
    with EngineDriver(fake_engine("hang-search"), read_timeout=0.5) as driver:
        run = run_suite(driver, [START, ENDGAME], 5)

    assert run.aborted
    assert len(run.failures) == 1
    assert isinstance(run.failures[0].error, EngineTimeout)
    assert run.failures[0].position == str(START)


def test_run_diff_records_mismatched_positions(fake_engine, monkeypatch) -> None:
    with EngineDriver(fake_engine("normal")) as driver:
        original_search = driver.search

        def search_wrong_position(position, depth, moves=()):
            return original_search(ENDGAME, depth, moves)

        monkeypatch.setattr(driver, "search", search_wrong_position)
        run = run_diff(driver, [baseline(START)], 5)

    assert run.diffs == []
    assert len(run.results) == 1
    assert isinstance(run.failures[0].error, PositionMismatch)
    assert run.report().failures == tuple(run.failures)


def test_run_diff_records_depth_mismatches(fake_engine) -> None:
    with EngineDriver(fake_engine("normal")) as driver:
        run = run_diff(driver, [baseline(START), baseline(ENDGAME)], 10)

    assert run.diffs == []
    assert [result.depth for result in run.results] == [10, 10]
    assert len(run.failures) == 2
    assert all(isinstance(failure.error, DepthMismatch) for failure in run.failures)
    assert not run.aborted
