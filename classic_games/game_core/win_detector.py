# classic_games/game_core/win_detector.py

from typing import Optional

from . import constants as c
from .board_state import BoardState, get_home_board_range
from .types import Color, WinResult, WinType


def get_winner(board: BoardState) -> Optional[Color]:
    """Возвращает цвет, выбросивший все 15 фишек, или None."""
    borne_off = board.borne_off
    for color in (Color.WHITE, Color.BLACK):
        if borne_off[color] >= c.PIECES_PER_PLAYER:
            return color
    return None


def classify_win(board: BoardState, winner: Color) -> WinType:
    """
    Backgammon: проигравший ничего не выбросил и держит фишку на баре
    или в доме победителя. Gammon: проигравший ничего не выбросил.
    """
    loser = winner.opponent
    if board.borne_off[loser] > 0:
        return WinType.SINGLE

    in_winner_home = any(board.count_for(loser, pos) > 0 for pos in get_home_board_range(winner))
    if board.bar[loser] > 0 or in_winner_home:
        return WinType.BACKGAMMON
    return WinType.GAMMON


def evaluate(board: BoardState, double_value: int = 1) -> Optional[WinResult]:
    winner = get_winner(board)
    if winner is None:
        return None
    win_type = classify_win(board, winner)
    return WinResult(winner=winner, win_type=win_type, points=win_type.multiplier * double_value)
