# classic_games/game_core/errors.py
"""
Иерархия ошибок игрового ядра.

InvalidMoveError и GameStateError - обычные игровые ошибки: вызывающий код
может исправить ввод и попробовать снова. BoardInvariantError - нарушение
контракта (баг в коде), его не нужно показывать игроку.
"""

from typing import Any, Dict, Optional


class GameError(Exception):
    """Базовая ошибка игрового движка."""
    code: str = "GAME_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        data = {'code': self.code, 'message': self.message}
        if self.context:
            data['context'] = dict(self.context)
        return data


class InvalidMoveError(GameError):
    """Ход отсутствует в множестве легальных ходов."""
    code = "INVALID_MOVE"

    def __init__(self, reason, message: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        self.reason = reason
        super().__init__(message or f"Illegal move: {reason.value}", context=context)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['reason'] = self.reason.value
        return data


class GameStateError(GameError):
    """Операция вызвана в неподходящей фазе игры."""
    code = "INVALID_GAME_STATE"


class BoardInvariantError(RuntimeError):
    """Нарушен инвариант доски (сохранение 15 фишек или чистота знака)."""
