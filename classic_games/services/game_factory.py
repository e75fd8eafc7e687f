# classic_games/services/game_factory.py

import uuid
from typing import Dict, Any, Callable, Optional
from .game_session import GameSession
from classic_games.game_core import new_game


class GameFactory:

    def __init__(
        self,
        config: Dict[str, Any],
        log_event: Callable,
        log_stats: Callable,
        finalize_game_callback: Callable[[str], None]
    ):
        self.config = config
        self.log_event = log_event
        self.log_stats = log_stats
        self.finalize_game_callback = finalize_game_callback

    def create_game(self, seed: Optional[int] = None) -> GameSession:
        """
        Создает новую партию со своим движком и источником случайности.
        seed из запроса важнее DICE_SEED из конфига.
        """
        game_id = str(uuid.uuid4())
        if seed is None:
            seed = self.config.get('DICE_SEED')

        session = GameSession(
            game_id=game_id,
            controller=new_game(rng_seed=seed),
            log_event=self.log_event,
            log_stats=self.log_stats,
            finalize_game_callback=self.finalize_game_callback
        )

        self.log_event("GAME_CREATED", f"Game {game_id} created (seed={seed}).", game_id=game_id)
        return session
