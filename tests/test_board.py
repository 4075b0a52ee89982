import pytest

from loraigate.board import Board, get_board_name


@pytest.mark.parametrize("board, name", [
    (Board.HELTEC_V1, "Heltec V1"),
    (Board.HELTEC_V2_0, "Heltec V2"),
    (Board.T_INTERNET_POE, "T-Internet PoE"),
    (Board.TBEAM_V12_AXP2101, "T-Beam V1.2 AXP2101"),
    (Board.TLORA_V2, "T-LoRa32 V2"),
])
def test_names_of_members(board, name):
    assert get_board_name(board) == name


def test_name_from_identifier():
    assert get_board_name("TBEAM_V10") == "T-Beam V1.0 and V1.1"
    assert get_board_name("TBEAM_S3_CORE") == "T-Beam S3 Core"


def test_every_board_has_distinct_name():
    names = [get_board_name(b) for b in Board]
    assert len(set(names)) == len(names)


def test_unknown_board_raises():
    with pytest.raises(ValueError):
        get_board_name("NOT_A_BOARD")