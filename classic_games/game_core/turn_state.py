# classic_games/game_core/turn_state.py

from dataclasses import dataclass, field, replace
from typing import List, Optional

from .types import Color, Phase


@dataclass
class TurnState:
    """
    Состояние текущего хода. dice - пул значений (4 на дубле),
    dice_used - параллельные флаги использования.
    """
    current_player: Color = Color.WHITE
    phase: Phase = Phase.ROLLING
    dice: List[int] = field(default_factory=list)
    dice_used: List[bool] = field(default_factory=list)
    double_value: int = 1
    turn_number: int = 0

    def __post_init__(self):
        if len(self.dice) != len(self.dice_used):
            if self.dice_used:
                raise ValueError("dice and dice_used must have the same length")
            self.dice_used = [False] * len(self.dice)
        if self.double_value < 1 or self.double_value & (self.double_value - 1):
            raise ValueError(f"double_value must be a power of two >= 1, got {self.double_value}")

    def remaining_dice(self) -> List[int]:
        return [die for die, used in zip(self.dice, self.dice_used) if not used]

    def set_dice(self, dice: List[int]):
        self.dice = list(dice)
        self.dice_used = [False] * len(self.dice)

    def clear_dice(self):
        self.dice = []
        self.dice_used = []

    def consume(self, die: int) -> Optional[int]:
        """Помечает первый неиспользованный кубик с этим значением. Возвращает его индекс."""
        for idx, (value, used) in enumerate(zip(self.dice, self.dice_used)):
            if value == die and not used:
                self.dice_used[idx] = True
                return idx
        return None

    def copy(self) -> 'TurnState':
        return replace(self, dice=list(self.dice), dice_used=list(self.dice_used))
