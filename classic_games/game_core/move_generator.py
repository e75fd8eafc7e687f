# classic_games/game_core/move_generator.py

from typing import Dict, List, Sequence, Tuple

from . import constants as c
from .board_state import BoardState, get_destination, pip_distance
from .types import Color, Move


def get_legal_moves(board: BoardState, dice: Sequence[int], player: Color) -> List[Move]:
    """
    Главная функция: все легальные одиночные шаги для оставшихся кубиков.

    Шаг легален, только если с него начинается последовательность
    максимальной длины (нужно сыграть как можно больше кубиков). Поэтому
    кубик, который играется лишь после другого, тоже учитывается.
    Пустой список означает вынужденный пропуск.
    """
    remaining = list(dice)
    if not remaining:
        return []

    cache: Dict[tuple, int] = {}
    candidates: List[Tuple[Move, int]] = []

    for die in sorted(set(remaining), reverse=True):
        rest = list(remaining)
        rest.remove(die)
        for move in get_single_moves(board, die, player):
            next_board = _apply(board, move, player)
            depth = 1 + _max_playable(next_board, rest, player, cache)
            candidates.append((move, depth))

    if not candidates:
        return []

    # 1. Правило "Сыграть максимум"
    max_len = max(depth for _, depth in candidates)
    best = {move for move, depth in candidates if depth == max_len}

    # 2. Правило "Большего кубика": не дубль и сыграть можно только один кубик
    if len(remaining) == 2 and remaining[0] != remaining[1] and max_len == 1:
        higher_die = max(remaining)
        higher_moves = {move for move in best if move.die == higher_die}
        if higher_moves:
            best = higher_moves

    return sorted(best)


def get_single_moves(board: BoardState, die: int, player: Color) -> List[Move]:
    """Вспомогательная функция для поиска одиночных ходов для одного кубика."""
    moves = []

    # 1. Фишки на баре: пока бар не пуст, другие ходы запрещены
    if board.bar[player] > 0:
        to_point = get_destination(player, c.BAR, die)
        if not board.is_blocked_for(player, to_point):
            moves.append(Move(c.BAR, to_point, die))
        return moves

    # 2. Выброс возможен, только когда все фишки дома
    is_all_home = board.all_pieces_home(player)
    starts = board.occupied_points(player)
    furthest = max(pip_distance(player, pos) for pos in starts) if starts else 0

    for fr in starts:
        to = get_destination(player, fr, die)

        # 2.1 Обычный ход
        if c.POINT_1 <= to <= c.POINT_24:
            if not board.is_blocked_for(player, to):
                moves.append(Move(fr, to, die))

        # 2.2 Ход на выброс (Bear off)
        elif is_all_home:
            distance = pip_distance(player, fr)
            # Точный выброс, либо перебор только для самой дальней фишки
            if distance == die or (distance < die and distance == furthest):
                moves.append(Move(fr, c.OFF, die))

    return moves


def can_bear_off(board: BoardState, player: Color) -> bool:
    return board.all_pieces_home(player)


def _apply(board: BoardState, move: Move, player: Color) -> BoardState:
    new_board = board.copy()
    new_board.move_pieces(player, move.from_point, move.to_point)
    return new_board


def _max_playable(board: BoardState, dice: List[int], player: Color, cache: Dict[tuple, int]) -> int:
    """Сколько кубиков из dice максимум можно сыграть с этой позиции."""
    if not dice:
        return 0

    key = (board.points, board.bar[player], board.borne_off[player], tuple(sorted(dice)))
    if key in cache:
        return cache[key]

    best = 0
    for die in set(dice):
        rest = list(dice)
        rest.remove(die)
        for move in get_single_moves(board, die, player):
            best = max(best, 1 + _max_playable(_apply(board, move, player), rest, player, cache))
            if best == len(dice):
                break
        if best == len(dice):
            break

    cache[key] = best
    return best
