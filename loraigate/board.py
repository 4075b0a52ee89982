"""Supported boards and their display names."""

from __future__ import annotations

from enum import Enum
from typing import Union


class Board(Enum):
    HELTEC_V1 = "Heltec V1"
    HELTEC_V2_0 = "Heltec V2"
    HELTEC_V3 = "Heltec V3"
    T_INTERNET_POE = "T-Internet PoE"
    TBEAM_V10 = "T-Beam V1.0 and V1.1"
    TBEAM_V12_AXP2101 = "T-Beam V1.2 AXP2101"
    TBEAM_S3_CORE = "T-Beam S3 Core"
    TLORA_V1 = "T-LoRa32 V1"
    TLORA_V2 = "T-LoRa32 V2"


def get_board_name(board: Union[Board, str]) -> str:
    """Human readable name of a board given as a member or its identifier."""
    if isinstance(board, Board):
        return board.value
    try:
        return Board[board].value
    except KeyError:
        raise ValueError(f"Board not defined: {board!r}") from None