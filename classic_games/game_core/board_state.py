# classic_games/game_core/board_state.py

from typing import Dict, List, Mapping, Optional, Sequence

from . import constants as c
from .errors import BoardInvariantError, InvalidMoveError
from .types import Color, RejectReason


class BoardState:
    """
    Позиция на доске: 24 пункта со знаковыми счетчиками, бар и выброшенные фишки.

    Положительное значение пункта - белые (цвет A), отрицательное - черные.
    Единственная мутация - move_pieces(); ее вызывает только исполнитель ходов.
    """

    def __init__(
        self,
        points: Optional[Sequence[int]] = None,
        bar: Optional[Mapping[Color, int]] = None,
        borne_off: Optional[Mapping[Color, int]] = None,
        validate: bool = True
    ):
        if points is None:
            points = [0] * c.BOARD_SIZE
        if len(points) != c.BOARD_SIZE:
            raise ValueError(f"Board must have {c.BOARD_SIZE} points, got {len(points)}")

        self._points: List[int] = [int(count) for count in points]
        self._bar: Dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 0}
        self._borne_off: Dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 0}
        if bar:
            self._bar.update({Color(color): count for color, count in bar.items()})
        if borne_off:
            self._borne_off.update({Color(color): count for color, count in borne_off.items()})

        if validate:
            self.validate()

    # --- Конструкторы ---

    @classmethod
    def initial(cls) -> 'BoardState':
        """Стандартная стартовая расстановка."""
        return cls.from_layout(c.STANDARD_WHITE_SETUP, c.STANDARD_BLACK_SETUP)

    @classmethod
    def from_layout(
        cls,
        white: Mapping[int, int],
        black: Mapping[int, int],
        bar: Optional[Mapping[Color, int]] = None,
        borne_off: Optional[Mapping[Color, int]] = None
    ) -> 'BoardState':
        """
        Строит позицию из словарей {пункт: количество} для каждого цвета.
        Счетчики передаются положительными, знак ставится по цвету.
        """
        points = [0] * c.BOARD_SIZE
        for pos, count in white.items():
            points[_index(pos)] += count * Color.WHITE
        for pos, count in black.items():
            if points[_index(pos)] != 0:
                raise ValueError(f"Point {pos} is occupied by both colors")
            points[_index(pos)] += count * Color.BLACK
        return cls(points, bar, borne_off)

    def copy(self) -> 'BoardState':
        return BoardState(self._points, self._bar, self._borne_off, validate=False)

    # --- Запросы (только чтение) ---

    @property
    def points(self) -> tuple:
        return tuple(self._points)

    @property
    def bar(self) -> Dict[Color, int]:
        return dict(self._bar)

    @property
    def borne_off(self) -> Dict[Color, int]:
        return dict(self._borne_off)

    def piece_count_at(self, point: int) -> int:
        return abs(self._points[_index(point)])

    def owner_at(self, point: int) -> Optional[Color]:
        value = self._points[_index(point)]
        if value == 0:
            return None
        return Color.WHITE if value > 0 else Color.BLACK

    def is_blot(self, point: int) -> bool:
        return self.piece_count_at(point) == 1

    def count_for(self, color: Color, point: int) -> int:
        """Количество фишек цвета color на пункте (0, если пункт чужой или пуст)."""
        return max(self._points[_index(point)] * color, 0)

    def is_blocked_for(self, color: Color, point: int) -> bool:
        return self.count_for(color.opponent, point) >= 2

    def occupied_points(self, color: Color) -> List[int]:
        return [pos for pos in range(c.POINT_1, c.POINT_24 + 1) if self.count_for(color, pos) > 0]

    def pieces_on_board(self, color: Color) -> int:
        return sum(max(value * color, 0) for value in self._points)

    def all_pieces_home(self, color: Color) -> bool:
        if self._bar[color] > 0:
            return False
        home = get_home_board_range(color)
        return all(pos in home for pos in self.occupied_points(color))

    def pip_count(self, color: Color) -> int:
        """Сумма пип-дистанций всех фишек цвета (фишки на баре считаются за 25)."""
        on_board = sum(
            self.count_for(color, pos) * pip_distance(color, pos)
            for pos in self.occupied_points(color)
        )
        return on_board + self._bar[color] * c.OFF

    # --- Мутация ---

    def move_pieces(self, color: Color, source: int, destination: int, count: int = 1) -> bool:
        """
        Переносит count фишек цвета color из source в destination.

        source: пункт 1..24 или BAR (0). destination: пункт 1..24 или OFF (25).
        Одиночная фишка соперника на destination уходит на его бар.
        Возвращает True, если было взятие. Если пункт закрыт (>= 2 фишек
        соперника), бросает InvalidMoveError и доску не трогает.
        """
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")
        if not c.BAR <= source <= c.POINT_24:
            raise ValueError(f"Invalid source location: {source}")
        if not c.POINT_1 <= destination <= c.OFF:
            raise ValueError(f"Invalid destination location: {destination}")

        available = self._bar[color] if source == c.BAR else self.count_for(color, source)
        if available < count:
            raise ValueError(f"Not enough {color.label} pieces at {source}: {available} < {count}")

        if destination != c.OFF and self.is_blocked_for(color, destination):
            raise InvalidMoveError(
                RejectReason.BLOCKED_DESTINATION,
                context={'point': destination, 'color': color.label}
            )

        if source == c.BAR:
            self._bar[color] -= count
        else:
            self._points[_index(source)] -= count * color

        captured = False
        if destination == c.OFF:
            self._borne_off[color] += count
        else:
            idx = _index(destination)
            if self.count_for(color.opponent, destination) == 1:
                self._points[idx] = 0
                self._bar[color.opponent] += 1
                captured = True
            self._points[idx] += count * color

        if __debug__:
            self.validate()
        return captured

    # --- Инварианты ---

    def validate(self):
        """Проверяет сохранение 15 фишек каждого цвета и неотрицательность счетчиков."""
        for color in (Color.WHITE, Color.BLACK):
            if self._bar[color] < 0 or self._borne_off[color] < 0:
                raise BoardInvariantError(f"Negative bar/borne-off counter for {color.label}")
            total = self.pieces_on_board(color) + self._bar[color] + self._borne_off[color]
            if total != c.PIECES_PER_PLAYER:
                raise BoardInvariantError(
                    f"Conservation violated for {color.label}: {total} != {c.PIECES_PER_PLAYER}"
                )

    def __eq__(self, other):
        if not isinstance(other, BoardState):
            return NotImplemented
        return (
            self._points == other._points
            and self._bar == other._bar
            and self._borne_off == other._borne_off
        )

    def __repr__(self):
        layout = {pos: self._points[_index(pos)] for pos in range(c.POINT_1, c.POINT_24 + 1) if self._points[_index(pos)]}
        return f"BoardState(points={layout}, bar={self._bar}, borne_off={self._borne_off})"


def _index(point: int) -> int:
    if not c.POINT_1 <= point <= c.POINT_24:
        raise ValueError(f"Point out of range: {point}")
    return point - 1


def get_home_board_range(color: Color) -> range:
    """Возвращает диапазон очков 'дома' для цвета."""
    return c.HOME_BOARD_WHITE if color == Color.WHITE else c.HOME_BOARD_BLACK


def get_destination(color: Color, source: int, die: int) -> int:
    """
    Куда придет фишка с source на die шагов (без учета выброса).
    С бара белые считают от 0, черные от 25. Результат может выйти за доску.
    """
    if color == Color.WHITE:
        return source + die
    start = c.OFF if source == c.BAR else source
    return start - die


def pip_distance(color: Color, point: int) -> int:
    """Сколько пунктов фишке осталось пройти до выброса."""
    return c.OFF - point if color == Color.WHITE else point
