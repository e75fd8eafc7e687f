# classic_games/game_core/dice.py

import logging
import random
from typing import List, Optional, Tuple

from . import constants as c

logger = logging.getLogger(__name__)


class DiceRoller:
    """
    Бросает кубики через внедренный источник случайности.
    Источник - любой объект с методом randint(a, b), например random.Random.
    """

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else random.Random()

    @classmethod
    def seeded(cls, seed: Optional[int]) -> 'DiceRoller':
        return cls(random.Random(seed))

    def roll_one(self) -> int:
        value = self.rng.randint(c.DIE_MIN, c.DIE_MAX)
        if not isinstance(value, int) or not c.DIE_MIN <= value <= c.DIE_MAX:
            raise ValueError(f"Random source produced an invalid die value: {value!r}")
        return value

    def roll(self) -> Tuple[int, int]:
        """Бросает два кубика."""
        return self.roll_one(), self.roll_one()


def expand_roll(die1: int, die2: int) -> List[int]:
    """Дубль превращается в четыре одинаковых значения."""
    if die1 == die2:
        return [die1] * c.DICE_PER_DOUBLE
    return [die1, die2]
