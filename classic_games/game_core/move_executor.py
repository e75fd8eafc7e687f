# classic_games/game_core/move_executor.py

import datetime
from typing import Optional, Sequence, Tuple

from . import constants as c
from .board_state import BoardState, get_destination, pip_distance
from .errors import InvalidMoveError
from .move_generator import can_bear_off, get_legal_moves
from .turn_state import TurnState
from .types import Color, Move, MoveHistoryEntry, RejectReason


def execute_move(
    board: BoardState,
    turn: TurnState,
    move: Move,
    player: Optional[Color] = None,
    legal_moves: Optional[Sequence[Move]] = None
) -> Tuple[BoardState, TurnState, MoveHistoryEntry]:
    """
    Проверяет ход и применяет его к КОПИЯМ доски и состояния хода.

    legal_moves - закешированное множество легальных ходов; если не передано,
    пересчитывается через генератор. Возвращает (новая доска, новое
    состояние хода, запись истории). Нелегальный ход -> InvalidMoveError,
    исходные объекты не меняются.
    """
    current = turn.current_player
    if legal_moves is None:
        legal_moves = get_legal_moves(board, turn.remaining_dice(), current)

    if (player is not None and player != current) or move not in legal_moves:
        reason = diagnose_rejection(board, turn, move, player)
        raise InvalidMoveError(reason, context={
            'from': move.from_point, 'to': move.to_point, 'die': move.die, 'player': current.label
        })

    new_board = board.copy()
    captured = new_board.move_pieces(current, move.from_point, move.to_point)

    new_turn = turn.copy()
    new_turn.consume(move.die)

    entry = MoveHistoryEntry(
        move=move,
        player=current,
        resulting_capture=captured,
        turn_number=turn.turn_number,
        timestamp=datetime.datetime.now()
    )
    return new_board, new_turn, entry


def diagnose_rejection(board: BoardState, turn: TurnState, move: Move, player: Optional[Color] = None) -> RejectReason:
    """Объясняет, почему ход не входит в множество легальных ходов."""
    current = turn.current_player

    if player is not None and player != current:
        return RejectReason.WRONG_PLAYER

    if move.die not in turn.remaining_dice():
        return RejectReason.DIE_NOT_AVAILABLE

    if board.bar[current] > 0 and not move.is_bar_entry:
        return RejectReason.BAR_NOT_CLEARED

    if move.is_bar_entry:
        if board.bar[current] == 0:
            return RejectReason.EMPTY_SOURCE
    elif board.count_for(current, move.from_point) == 0:
        return RejectReason.EMPTY_SOURCE

    target = get_destination(current, move.from_point, move.die)
    target_on_board = c.POINT_1 <= target <= c.POINT_24

    if move.is_bear_off:
        if not can_bear_off(board, current):
            return RejectReason.BEAR_OFF_NOT_ALLOWED
        if target_on_board:
            return RejectReason.DISTANCE_MISMATCH
        distance = pip_distance(current, move.from_point)
        furthest = max(pip_distance(current, pos) for pos in board.occupied_points(current))
        if distance != move.die and distance != furthest:
            return RejectReason.DISTANCE_MISMATCH
    elif target != move.to_point:
        return RejectReason.DISTANCE_MISMATCH
    elif board.is_blocked_for(current, move.to_point):
        return RejectReason.BLOCKED_DESTINATION

    # Сам по себе шаг возможен, но не дает сыграть максимум кубиков
    return RejectReason.MUST_PLAY_MAXIMUM
