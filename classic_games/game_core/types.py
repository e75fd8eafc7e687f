# classic_games/game_core/types.py

import datetime
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple

from . import constants as c


class Color(IntEnum):
    """Цвет игрока. Значение совпадает со знаком фишек на доске."""
    WHITE = c.PLAYER_WHITE
    BLACK = c.PLAYER_BLACK

    @property
    def opponent(self) -> 'Color':
        return Color(-self.value)

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> 'Color':
        try:
            return cls[label.upper()]
        except KeyError:
            raise ValueError(f"Unknown color: {label!r}") from None


class Phase(Enum):
    ROLLING = "rolling"
    MOVING = "moving"
    TURN_OVER = "turn_over"
    GAME_OVER = "game_over"


class WinType(Enum):
    SINGLE = "single"
    GAMMON = "gammon"
    BACKGAMMON = "backgammon"

    @property
    def multiplier(self) -> int:
        return {
            WinType.SINGLE: c.SINGLE_GAME_POINTS,
            WinType.GAMMON: c.GAMMON_POINTS,
            WinType.BACKGAMMON: c.BACKGAMMON_POINTS,
        }[self]


class RejectReason(Enum):
    WRONG_PLAYER = "wrong_player"
    DIE_NOT_AVAILABLE = "die_not_available"
    BAR_NOT_CLEARED = "bar_not_cleared"
    EMPTY_SOURCE = "empty_source"
    BEAR_OFF_NOT_ALLOWED = "bear_off_not_allowed"
    DISTANCE_MISMATCH = "distance_mismatch"
    BLOCKED_DESTINATION = "blocked_destination"
    MUST_PLAY_MAXIMUM = "must_play_maximum"


@dataclass(frozen=True, order=True)
class Move:
    """
    Один шаг фишки. from_point=0 - вход с бара, to_point=25 - выброс.
    Значения вне диапазона - ошибка вызывающего кода, а не игрока.
    """
    from_point: int
    to_point: int
    die: int

    def __post_init__(self):
        for name in ('from_point', 'to_point', 'die'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"Move.{name} must be int, got {value!r}")
        if not c.BAR <= self.from_point <= c.POINT_24:
            raise ValueError(f"Move.from_point out of range: {self.from_point}")
        if not c.POINT_1 <= self.to_point <= c.OFF:
            raise ValueError(f"Move.to_point out of range: {self.to_point}")
        if not c.DIE_MIN <= self.die <= c.DIE_MAX:
            raise ValueError(f"Move.die out of range: {self.die}")
        if self.from_point == self.to_point:
            raise ValueError("Move.from_point and Move.to_point must differ")

    @property
    def is_bar_entry(self) -> bool:
        return self.from_point == c.BAR

    @property
    def is_bear_off(self) -> bool:
        return self.to_point == c.OFF


@dataclass(frozen=True)
class MoveHistoryEntry:
    move: Move
    player: Color
    resulting_capture: bool
    turn_number: int
    timestamp: datetime.datetime = field(default_factory=datetime.datetime.now)


@dataclass(frozen=True)
class WinResult:
    winner: Color
    win_type: WinType
    points: int
    reason: str = "bear_off"


@dataclass(frozen=True)
class GameSnapshot:
    """Неизменяемый снимок партии для чтения (сериализуется слоем сессии)."""
    points: Tuple[int, ...]
    bar: Dict[Color, int]
    borne_off: Dict[Color, int]
    dice: Tuple[int, ...]
    dice_used: Tuple[bool, ...]
    remaining_dice: Tuple[int, ...]
    phase: Phase
    current_player: Color
    double_value: int
    turn_number: int
    result: Optional[WinResult] = None


@dataclass(frozen=True)
class MoveResult:
    """Результат make_move: либо принятый ход, либо отказ с ошибкой."""
    accepted: bool
    snapshot: GameSnapshot
    error: Optional[Exception] = None
    entry: Optional[MoveHistoryEntry] = None

    def __bool__(self):
        return self.accepted
