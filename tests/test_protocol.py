import pytest

from enginebench import protocol
from enginebench.position import Position
from enginebench.protocol import (
    MATE_SCORE,
    FinalMove,
    HandshakeAck,
    ProgressInfo,
    Unrecognized,
    parse_line,
)


def test_commands_are_single_lines() -> None:
    assert protocol.encode(protocol.uci()) == "uci\n"
    assert protocol.encode(protocol.ucinewgame()) == "ucinewgame\n"
    assert protocol.encode(protocol.go_depth(10)) == "go depth 10\n"
    assert protocol.encode("quit\n") == "quit\n"


def test_position_command_for_startpos_and_fen() -> None:
    start = Position.parse("startpos")
    assert protocol.position(start) == "position startpos"
    assert protocol.position(start, ["e2e4", "e7e5"]) == "position startpos moves e2e4 e7e5"

    fen = "8/8/5k2/4p3/3pP3/3K4/6R1/8 w - - 0 58"
    assert protocol.position(Position.parse(fen)) == f"position fen {fen}"


def test_go_depth_rejects_non_positive_depth() -> None:
    with pytest.raises(ValueError):
        protocol.go_depth(0)


def test_handshake_ack() -> None:
    assert parse_line("uciok") == HandshakeAck()
    assert parse_line("  uciok \r\n") == HandshakeAck()
    assert isinstance(parse_line("uciok please"), Unrecognized)


def test_full_info_line() -> None:
    message = parse_line(
        "info depth 12 seldepth 18 multipv 1 score cp 34 nodes 123456 nps 987000 time 125 pv e2e4 e7e5"
    )
    assert message == ProgressInfo(nodes=123456, time_ms=125, score=34)


def test_partial_info_lines_leave_fields_unset() -> None:
    message = parse_line("info depth 3 nodes 250")
    assert message == ProgressInfo(nodes=250)
    assert message.fields() == {"nodes": 250}
    assert parse_line("info depth 3").fields() == {}


def test_mate_scores_are_clamped() -> None:
    assert parse_line("info score mate 3 nodes 10").score == MATE_SCORE
    assert parse_line("info score mate -2 nodes 10").score == -MATE_SCORE


def test_score_bounds_do_not_confuse_parser() -> None:
    message = parse_line("info depth 5 score cp -15 upperbound nodes 77 time 4")
    assert message == ProgressInfo(nodes=77, time_ms=4, score=-15)


def test_malformed_tokens_are_skipped_not_fatal() -> None:
    message = parse_line("info nodes lots time 40 score cp ??")
    assert message == ProgressInfo(time_ms=40)
    assert parse_line("info nodes") == ProgressInfo()


def test_info_string_is_free_text() -> None:
    assert parse_line("info string nodes 999 time 1").fields() == {}


def test_pv_moves_are_not_read_as_fields() -> None:
    message = parse_line("info nodes 10 pv e2e4 nodes")
    assert message.fields() == {"nodes": 10}


def test_bestmove_with_and_without_ponder() -> None:
    assert parse_line("bestmove e2e4") == FinalMove("e2e4")
    assert parse_line("bestmove e2e4 ponder e7e5") == FinalMove("e2e4", ponder="e7e5")
    assert isinstance(parse_line("bestmove"), Unrecognized)


@pytest.mark.parametrize(
    "line",
    ["", "id name Fake", "readyok", "option name Hash type spin", "garbage \x00 bytes"],
)
def test_unknown_lines_are_unrecognized(line: str) -> None:
    assert isinstance(parse_line(line), Unrecognized)
