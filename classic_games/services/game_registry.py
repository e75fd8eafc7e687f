# classic_games/services/game_registry.py

import threading
from typing import Callable, Dict, List, Optional

from .game_session import GameSession


class GameRegistry:
    """
    Хранилище активных партий: game_id -> GameSession и sid -> game_id.
    Правил игры не знает. Все операции под одним RLock.
    """

    def __init__(self, log_event_func: Callable):
        self._sessions: Dict[str, GameSession] = {}
        self._seat_index: Dict[str, str] = {}  # sid -> game_id
        self.lock = threading.RLock()
        self.log_event = log_event_func

    def add_game(self, game_session: GameSession):
        with self.lock:
            if game_session.id in self._sessions:
                self.log_event("REGISTRY_WARN", f"Game {game_session.id} already registered.", game_id=game_session.id)
                return

            self._sessions[game_session.id] = game_session
            for sid in game_session.get_all_sids():
                self._seat_index[sid] = game_session.id

            self.log_event("REGISTRY_ADD", f"Active games: {len(self._sessions)}", game_id=game_session.id)

    def remove_game_by_id(self, game_id: str):
        """
        Коллбэк финализации: GameSession зовет его, когда за столом
        никого не осталось. Повторный вызов безопасен.
        """
        with self.lock:
            if self._sessions.pop(game_id, None) is None:
                return

            self._seat_index = {sid: gid for sid, gid in self._seat_index.items() if gid != game_id}
            self.log_event("REGISTRY_REMOVE", f"Active games: {len(self._sessions)}", game_id=game_id)

    def get_by_game_id(self, game_id: str) -> Optional[GameSession]:
        with self.lock:
            return self._sessions.get(game_id)

    def get_by_sid(self, sid: str) -> Optional[GameSession]:
        with self.lock:
            game_id = self._seat_index.get(sid)
            return self._sessions.get(game_id) if game_id else None

    def list_sessions(self) -> List[GameSession]:
        """Снимок списка партий (для фоновых проверок таймаутов)."""
        with self.lock:
            return list(self._sessions.values())

    def associate_sid_to_game(self, sid: str, game_id: str):
        with self.lock:
            if game_id not in self._sessions:
                self.log_event("REGISTRY_WARN", "Cannot seat SID in unknown game.", sid=sid, game_id=game_id)
                return
            self._seat_index[sid] = game_id

    def disassociate_sid(self, sid: str) -> Optional[str]:
        with self.lock:
            return self._seat_index.pop(sid, None)
