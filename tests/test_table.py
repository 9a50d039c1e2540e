from enginebench.diff import diff
from enginebench.position import Position
from enginebench.report import aggregate, summarize
from enginebench.result import SearchResult
from enginebench.table import (
    FieldSelection,
    Table,
    build_diff_columns,
    build_result_columns,
)
from enginebench.utils import GREEN, RED, color_text, strip_ansi, visible_len

START = Position.parse("startpos")


def result(nodes: int, time_ms: int = 10, score: int = 5, best_move: str = "e2e4") -> SearchResult:
    return SearchResult.from_search(
        position=START, depth=4, nodes=nodes, time_ms=time_ms, score=score, best_move=best_move
    )


def test_no_flags_selects_every_field() -> None:
    selection = FieldSelection.from_flags(nodes=False, time=False)
    assert selection == FieldSelection()
    assert selection.field_names() == ["nodes", "time", "nps", "branching_factor", "score", "best_move"]


def test_flags_pick_columns_in_fixed_order() -> None:
    selection = FieldSelection.from_flags(best_move=True, nodes=True)
    columns = build_result_columns(selection)
    assert [column.field for column in columns] == ["position", "nodes", "best_move"]
    assert [column.label for column in columns] == ["Position", "Nodes", "Best move"]
    assert FieldSelection.from_flags(all_fields=True, nodes=True) == FieldSelection()


def test_borders_line_up() -> None:
    table = Table(build_result_columns(FieldSelection()), color=False)
    header_lines = table.header().splitlines()
    row = table.result_row(result(1000))
    widths = {len(line) for line in [*header_lines, row, table.separator(), table.footer()]}
    assert len(widths) == 1
    assert header_lines[0].startswith("┌") and header_lines[0].endswith("┐")
    assert table.footer().startswith("└")


def test_colored_cells_are_padded_by_visible_width() -> None:
    table = Table(build_diff_columns(FieldSelection()), color=True)
    row = table.diff_row(diff(result(1000), result(800)))
    assert visible_len(row) == len(table.separator())
    assert color_text("800 (-20.00%)", GREEN) in row


def test_diff_row_contents() -> None:
    table = Table(build_diff_columns(FieldSelection.from_flags(nodes=True, score=True, best_move=True)), color=False)
    row = table.diff_row(diff(result(1000, score=0), result(1200, score=7, best_move="d2d4")))
    assert "1,000 1,200 (+20.00%)" in row
    assert "0cp 7cp (n/a)" in row
    assert "e2e4 d2d4" in row


def test_best_move_change_is_red_even_when_other_metrics_improve() -> None:
    table = Table(build_diff_columns(FieldSelection.from_flags(best_move=True)), color=True)
    row = table.diff_row(diff(result(1000), result(500, best_move="g1f3")))
    assert color_text("g1f3", RED) in row


def test_report_rows() -> None:
    table = Table(build_diff_columns(FieldSelection.from_flags(nodes=True)), color=False)
    report = aggregate([diff(result(1000), result(800)), diff(result(1000), result(1200))])
    mean_row, improved_row = table.report_rows(report)
    assert "Mean over 2 positions" in mean_row
    assert "1,000 1,000 (+0.00%)" in mean_row
    assert "1/2" in improved_row


def test_summary_row() -> None:
    table = Table(build_result_columns(FieldSelection.from_flags(nodes=True, time=True)), color=False)
    row = strip_ansi(table.summary_row(summarize([result(100), result(300, time_ms=30)])))
    assert "Mean over 2 positions" in row
    assert "200" in row
    assert "20ms" in row
