# classic_games/services/game_service.py

from typing import Optional, Dict, Any, List, Tuple
from .game_session import GameSession
from .game_registry import GameRegistry
from .game_factory import GameFactory
from classic_games.game_core import Color

Notification = Dict[str, Any]


class GameService:
    """
    Фасад, координирующий высокоуровневые игровые действия.
    Не владеет состоянием, а делегирует его специализированным сервисам.
    """

    def __init__(self, registry: GameRegistry, factory: GameFactory):
        """
        Инициализируется через Внедрение Зависимостей (Dependency Injection).
        """
        self.registry = registry
        self.factory = factory

    ### Публичный API (Прокси к Registry) ###

    def get_game(self, game_id: str) -> Optional[GameSession]:
        return self.registry.get_by_game_id(game_id)

    def get_game_by_sid(self, sid: str) -> Optional[GameSession]:
        """Находит игровую сессию, связанную с SID."""
        return self.registry.get_by_sid(sid)

    ### Создание и вход ###

    def create_game(self, seed: Optional[int] = None) -> GameSession:
        session = self.factory.create_game(seed)
        self.registry.add_game(session)
        return session

    def join_game(self, sid: str, game_id: str, color: Optional[Color] = None) -> Tuple[Optional[GameSession], List[Notification]]:
        """Сажает игрока за стол. Одновременно можно сидеть только в одной игре."""
        current = self.registry.get_by_sid(sid)
        if current and current.id != game_id:
            return None, [{
                'event': 'move_rejection',
                'payload': {'code': 'ALREADY_IN_GAME', 'message': 'You are already in another game.'},
                'room': sid
            }]

        game_session = self.registry.get_by_game_id(game_id)
        if not game_session:
            return None, [{
                'event': 'move_rejection',
                'payload': {'code': 'GAME_NOT_FOUND', 'message': f'Game not found: {game_id}'},
                'room': sid
            }]

        seat, notifications = game_session.join(sid, color)
        if seat is not None:
            self.registry.associate_sid_to_game(sid, game_id)
        return game_session, notifications

    ### Управление подключением ###

    def handle_disconnect(self, sid: str) -> List[Notification]:
        """Обрабатывает отключение игрока."""
        game = self.registry.get_by_sid(sid)
        if not game:
            return []
        self.registry.disassociate_sid(sid)
        return game.handle_disconnect(sid)
