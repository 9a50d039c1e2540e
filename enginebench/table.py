"""Box-drawn tables for results, diffs and their aggregates."""

from __future__ import annotations

from dataclasses import dataclass, fields as dataclass_fields
from typing import Callable, Dict, List, NamedTuple, Sequence, Tuple

from .diff import MetricDiff, ResultDiff
from .metrics import BranchingFactor, Change, classify, metric_by_name
from .report import MetricSummary, Report, ResultSummary
from .result import SearchResult
from .utils import BLUE, DIM, GREEN, RED, color_text, visible_len

SEP_WIDTH = 3

POSITION = "position"
BEST_MOVE = "best_move"

CHANGE_COLORS: Dict[Change, str] = {
    Change.IMPROVED: GREEN,
    Change.REGRESSED: RED,
}


class Column(NamedTuple):
    label: str
    width: int
    field: str


@dataclass(frozen=True)
class FieldSelection:
    nodes: bool = True
    time: bool = True
    nps: bool = True
    branching: bool = True
    score: bool = True
    best_move: bool = True

    @classmethod
    def from_flags(cls, all_fields: bool = False, **flags: bool) -> "FieldSelection":
        """Build a selection from CLI flags; no flags at all selects everything."""
        if all_fields or not any(flags.values()):
            return cls()
        return cls(**{name: bool(flags.get(name, False)) for name in _FLAG_NAMES})

    def field_names(self) -> List[str]:
        return [_FLAG_TO_FIELD[name] for name in _FLAG_NAMES if getattr(self, name)]


_FLAG_NAMES: Tuple[str, ...] = tuple(item.name for item in dataclass_fields(FieldSelection))

_FLAG_TO_FIELD: Dict[str, str] = {
    "nodes": "nodes",
    "time": "time",
    "nps": "nps",
    "branching": "branching_factor",
    "score": "score",
    "best_move": BEST_MOVE,
}

RESULT_WIDTHS: Dict[str, int] = {
    POSITION: 72,
    "nodes": 12,
    "time": 9,
    "nps": 10,
    "branching_factor": 9,
    "score": 8,
    BEST_MOVE: 9,
}

DIFF_WIDTHS: Dict[str, int] = {
    POSITION: 72,
    "nodes": 35,
    "time": 29,
    "nps": 31,
    "branching_factor": 25,
    "score": 27,
    BEST_MOVE: 15,
}


def _label(field: str) -> str:
    if field == POSITION:
        return "Position"
    if field == BEST_MOVE:
        return "Best move"
    return metric_by_name(field).label


def build_columns(selection: FieldSelection, widths: Dict[str, int]) -> Tuple[Column, ...]:
    names = [POSITION, *selection.field_names()]
    return tuple(Column(_label(name), widths[name], name) for name in names)


def build_result_columns(selection: FieldSelection) -> Tuple[Column, ...]:
    return build_columns(selection, RESULT_WIDTHS)


def build_diff_columns(selection: FieldSelection) -> Tuple[Column, ...]:
    return build_columns(selection, DIFF_WIDTHS)


def format_value(metric: type, value: float) -> str:
    if metric is BranchingFactor:
        text = f"{value:.2f}"
    else:
        text = f"{int(value):,}"
    return f"{text}{metric.unit}"


def format_relative(relative: float) -> str:
    return f"{relative * 100:+.2f}%"


class Table:
    """Render rows of text into fixed-width, box-drawn columns."""

    def __init__(self, columns: Sequence[Column], color: bool = True) -> None:
        if not columns:
            raise ValueError("A table needs at least one column")
        self.columns = tuple(columns)
        self.color = color

    def paint(self, text: str, code: str) -> str:
        return color_text(text, code) if self.color else text

    def _rule(self, left: str, middle: str, right: str) -> str:
        segments = ["─" * (column.width + SEP_WIDTH // 2 + 1) for column in self.columns]
        return left + middle.join(segments) + right

    def header(self) -> str:
        names = [column.label.center(column.width) for column in self.columns]
        return "\n".join(
            [
                self._rule("┌", "┬", "┐"),
                "│ " + " │ ".join(names) + " │",
                self.separator(),
            ]
        )

    def separator(self) -> str:
        return self._rule("├", "┼", "┤")

    def footer(self) -> str:
        return self._rule("└", "┴", "┘")

    def row(self, values: Sequence[str]) -> str:
        cells: List[str] = []
        for index, (value, column) in enumerate(zip(values, self.columns)):
            padding = max(column.width - visible_len(value), 0)
            cells.append(value + " " * padding if index == 0 else " " * padding + value)
        return "│ " + " │ ".join(cells) + " │"

    def render(self, source: object, formatter: Callable[["Table", object, str], str]) -> str:
        return self.row([formatter(self, source, column.field) for column in self.columns])

    def result_row(self, result: SearchResult) -> str:
        return self.render(result, _result_cell)

    def diff_row(self, item: ResultDiff) -> str:
        return self.render(item, _diff_cell)

    def summary_row(self, summary: ResultSummary) -> str:
        return self.render(summary, _summary_cell)

    def report_rows(self, report: Report) -> List[str]:
        return [self.render(report, _report_mean_cell), self.render(report, _report_improved_cell)]


def _result_cell(table: Table, result: SearchResult, field: str) -> str:
    if field == POSITION:
        return table.paint(str(result.position), BLUE)
    if field == BEST_MOVE:
        return result.best_move
    return format_value(metric_by_name(field), result.metric(field))


def _metric_diff_cell(table: Table, entry: MetricDiff) -> str:
    code = CHANGE_COLORS.get(entry.change)
    first = table.paint(format_value(entry.metric, entry.first), DIM)
    second = format_value(entry.metric, entry.second)
    relative = format_relative(entry.relative) if entry.has_relative else "n/a"
    text = f"{second} ({relative})"
    return f"{first} {table.paint(text, code) if code else text}"


def _diff_cell(table: Table, item: ResultDiff, field: str) -> str:
    if field == POSITION:
        return table.paint(str(item.position), BLUE)
    if field == BEST_MOVE:
        second = item.best_move.second
        if item.best_move.changed:
            second = table.paint(second, RED)
        return f"{table.paint(item.best_move.first, DIM)} {second}"
    return _metric_diff_cell(table, item[field])


def _summary_cell(table: Table, summary: ResultSummary, field: str) -> str:
    if field == POSITION:
        return f"Mean over {summary.count} positions"
    if field == BEST_MOVE:
        return ""
    totals = summary[field]
    return format_value(totals.metric, totals.mean)


def _report_mean_cell(table: Table, report: Report, field: str) -> str:
    if field == POSITION:
        return f"Mean over {report.count} positions"
    if field == BEST_MOVE:
        return f"{report.best_move_changes} changed"
    summary: MetricSummary = report[field]
    metric = summary.metric
    first, second = summary.first.mean, summary.second.mean
    code = CHANGE_COLORS.get(classify(metric, first, second))
    text = f"{format_value(metric, second)} ({format_relative(summary.mean_relative)})"
    return f"{table.paint(format_value(metric, first), DIM)} {table.paint(text, code) if code else text}"


def _report_improved_cell(table: Table, report: Report, field: str) -> str:
    if field == POSITION:
        return "Improved"
    if field == BEST_MOVE:
        return ""
    improvements, count = report.improved(field)
    return f"{improvements}/{count}"
