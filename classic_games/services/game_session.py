# classic_games/services/game_session.py

import threading
import time
import logging
from typing import Callable, Dict, Any, List, Optional, Tuple

from classic_games.game_core import (
    Color,
    GameError,
    Move,
    Phase,
    TurnController,
    WinResult,
)
from classic_games.api.schemas import (
    snapshot_schema,
    moves_schema,
    move_schema,
    history_schema,
    win_result_schema,
)

logger = logging.getLogger(__name__)

Notification = Dict[str, Any]


class GameSession:
    """
    Представляет ОДНУ активную партию.

    Единственный владелец TurnController: все запросы клиентов проходят
    через self.lock по одному, а правила проверяет только движок.
    Методы возвращают список уведомлений {'event', 'payload', 'room'}.
    """

    def __init__(
        self,
        game_id: str,
        controller: TurnController,
        log_event: Callable,
        log_stats: Callable,
        finalize_game_callback: Callable[[str], None]
    ):
        self.id = game_id
        self.controller = controller
        self.log_event = log_event
        self.log_stats = log_stats
        self.finalize_game_callback = finalize_game_callback

        self.lock = threading.RLock()
        self.seats: Dict[Color, Optional[str]] = {Color.WHITE: None, Color.BLACK: None}
        self.last_activity = time.time()
        # Когда соперник ушел, а второй игрок остался за столом
        self.abandoned_at: Optional[float] = None
        self._stats_logged = False

        self.log_event("SESSION_INIT", f"Session {self.id} created.", game_id=self.id)

    # --- Хелперы ---

    def get_all_sids(self) -> List[str]:
        return [sid for sid in self.seats.values() if sid]

    def get_color(self, sid: str) -> Optional[Color]:
        for color, seat_sid in self.seats.items():
            if seat_sid == sid:
                return color
        return None

    def _notify_all(self, event: str, payload: Dict[str, Any]) -> List[Notification]:
        return [{'event': event, 'payload': payload, 'room': sid} for sid in self.get_all_sids()]

    def _rejection(self, sid: str, error: GameError) -> List[Notification]:
        return [{'event': 'move_rejection', 'payload': error.to_dict(), 'room': sid}]

    def _touch(self):
        self.last_activity = time.time()

    # --- Данные для клиента ---

    def get_state_payload(self) -> Dict[str, Any]:
        with self.lock:
            snapshot = self.controller.get_game_state()
            payload = {'game_id': self.id, 'state': snapshot_schema.dump(snapshot)}
            if snapshot.phase in (Phase.MOVING, Phase.TURN_OVER):
                payload['available_moves'] = moves_schema.dump(self.controller.get_available_moves())
            else:
                payload['available_moves'] = []
            return payload

    def get_history_payload(self) -> List[Dict[str, Any]]:
        with self.lock:
            return history_schema.dump(self.controller.get_move_history())

    # --- Жизненный цикл ---

    def join(self, sid: str, color: Optional[Color] = None) -> Tuple[Optional[Color], List[Notification]]:
        """Сажает sid на свободное место (или на запрошенный цвет)."""
        with self.lock:
            existing = self.get_color(sid)
            if existing is not None:
                return existing, [{'event': 'game_state', 'payload': self.get_state_payload(), 'room': sid}]

            free = [seat for seat, seat_sid in self.seats.items() if seat_sid is None]
            if color is not None:
                free = [seat for seat in free if seat == color]

            if not free:
                message = 'Requested color is taken.' if color is not None else 'Game is full.'
                return None, [{'event': 'move_rejection', 'payload': {'code': 'SEAT_UNAVAILABLE', 'message': message}, 'room': sid}]

            seat = free[0]
            self.seats[seat] = sid
            self._touch()
            self.abandoned_at = None
            self.log_event("PLAYER_JOIN", f"Player joined as {seat.label}.", sid=sid, game_id=self.id)

            notifications = [{
                'event': 'game_joined',
                'payload': {'game_id': self.id, 'color': seat.label},
                'room': sid
            }]
            notifications.extend(self._notify_all('game_state', self.get_state_payload()))
            return seat, notifications

    def handle_disconnect(self, sid: str) -> List[Notification]:
        with self.lock:
            color = self.get_color(sid)
            if color is None:
                return []

            self.seats[color] = None
            self.log_event("PLAYER_DISCONNECT", f"{color.label} left the game.", sid=sid, game_id=self.id)

            if not self.get_all_sids():
                self.finalize_game_callback(self.id)
                return []

            if self.controller.phase != Phase.GAME_OVER:
                self.abandoned_at = time.time()

            return self._notify_all('opponent_disconnected', {'color': color.label})

    # --- Ход игры ---

    def _player_guard(self, sid: str) -> Tuple[Optional[Color], List[Notification]]:
        color = self.get_color(sid)
        if color is None:
            self.log_event("AUTH_ERROR", f"Player not found for sid {sid}", sid=sid, game_id=self.id)
            return None, [{'event': 'move_rejection', 'payload': {'code': 'NOT_SEATED', 'message': 'You are not seated in this game.'}, 'room': sid}]
        if color != self.controller.current_player:
            return None, [{'event': 'move_rejection', 'payload': {'code': 'NOT_YOUR_TURN', 'message': 'It is not your turn.'}, 'room': sid}]
        return color, []

    def roll_dice(self, sid: str) -> List[Notification]:
        with self.lock:
            color, rejection = self._player_guard(sid)
            if color is None:
                return rejection

            try:
                dice = self.controller.roll_dice()
            except GameError as e:
                return self._rejection(sid, e)

            self._touch()
            return self._after_roll(sid, color, list(dice))

    def roll_opening(self, sid: str) -> List[Notification]:
        """Стартовый бросок может запросить любой сидящий игрок."""
        with self.lock:
            if self.get_color(sid) is None:
                _, rejection = self._player_guard(sid)
                return rejection

            try:
                white_die, black_die = self.controller.roll_opening()
            except GameError as e:
                return self._rejection(sid, e)

            self._touch()
            notifications = self._notify_all('opening_roll_result', {
                'white': white_die,
                'black': black_die,
                'first_player': self.controller.current_player.label
            })
            notifications.extend(self._after_roll(sid, self.controller.current_player, [white_die, black_die]))
            return notifications

    def _after_roll(self, sid: str, color: Color, dice: List[int]) -> List[Notification]:
        state = self.get_state_payload()
        notifications = self._notify_all('dice_roll_result', {'player': color.label, 'dice': dice, **state})

        snapshot = self.controller.get_game_state()
        if snapshot.phase == Phase.TURN_OVER:
            self.log_event(
                "FORCED_PASS",
                f"{color.label} has no legal moves with {list(snapshot.dice)}.",
                sid=sid,
                game_id=self.id
            )
            notifications.extend(self._notify_all('no_moves_available', {'player': color.label}))
        return notifications

    def apply_move(self, sid: str, move: Move) -> List[Notification]:
        with self.lock:
            color, rejection = self._player_guard(sid)
            if color is None:
                return rejection

            result = self.controller.make_move(move, player=color)
            if not result:
                self.log_event("MOVE_REJECTED", f"{move} rejected: {result.error.message}", sid=sid, game_id=self.id)
                return self._rejection(sid, result.error)

            self._touch()
            state = self.get_state_payload()
            payload = {
                'applied_move': move_schema.dump(move),
                'was_blot': result.entry.resulting_capture,
                **state
            }

            notifications = [{'event': 'step_accepted', 'payload': payload, 'room': sid}]
            opponent_sid = self.seats[color.opponent]
            if opponent_sid:
                notifications.append({'event': 'opponent_step_executed', 'payload': payload, 'room': opponent_sid})

            if result.snapshot.result is not None:
                notifications.extend(self._handle_game_over(result.snapshot.result))
            return notifications

    def end_turn(self, sid: str) -> List[Notification]:
        with self.lock:
            color, rejection = self._player_guard(sid)
            if color is None:
                return rejection

            try:
                self.controller.end_turn()
            except GameError as e:
                return self._rejection(sid, e)

            self._touch()
            return self._notify_all('turn_finished', {'next_player': self.controller.current_player.label, **self.get_state_payload()})

    def force_pass(self) -> List[Notification]:
        """Пропуск хода по таймауту. Решение о таймауте принимает вызывающая сторона."""
        with self.lock:
            color = self.controller.current_player
            try:
                self.controller.end_turn(force=True)
            except GameError as e:
                logger.warning(f"[GameSession {self.id}] force_pass failed: {e}")
                return []

            self.log_event("TIMEOUT_PASS", f"{color.label} turn passed by timeout.", game_id=self.id)
            notifications = self._notify_all('turn_finished', {'next_player': self.controller.current_player.label, **self.get_state_payload()})
            if self.controller.result is not None:
                notifications.extend(self._handle_game_over(self.controller.result))
            return notifications

    def check_turn_timeout(self, timeout: float, now: Optional[float] = None) -> List[Notification]:
        """
        Проверка таймаутов, ее раз в несколько секунд зовет фоновый воркер:
        - за столом никого нет дольше timeout: партия удаляется из реестра;
        - соперник отключился и не вернулся за timeout: оставшийся игрок
          побеждает, партия удаляется;
        - текущий игрок бездействует дольше timeout: ход переходит сопернику
          (только когда за столом оба игрока).
        """
        with self.lock:
            now = time.time() if now is None else now
            sids = self.get_all_sids()

            if not sids:
                if now - self.last_activity >= timeout:
                    self.log_event("GAME_EXPIRED", "Nobody is seated, game removed.", game_id=self.id)
                    self.finalize_game_callback(self.id)
                return []

            if self.controller.phase == Phase.GAME_OVER:
                return []

            if self.abandoned_at is not None:
                if now - self.abandoned_at < timeout:
                    return []
                return self._opponent_timeout_victory()

            if len(sids) < 2 or now - self.last_activity < timeout:
                return []

            notifications = self.force_pass()
            self._touch()
            return notifications

    def _opponent_timeout_victory(self) -> List[Notification]:
        absent = next(color for color, sid in self.seats.items() if sid is None)
        result = self.controller.forfeit(absent)
        self.log_event("GAME_END_TIMEOUT", f"{absent.label} did not come back.", game_id=self.id)

        notifications = self._notify_all('opponent_timeout_victory', {'absent': absent.label})
        notifications.extend(self._handle_game_over(result))
        self.finalize_game_callback(self.id)
        return notifications

    def give_up(self, sid: str) -> List[Notification]:
        with self.lock:
            color = self.get_color(sid)
            if color is None:
                _, rejection = self._player_guard(sid)
                return rejection

            try:
                result = self.controller.forfeit(color)
            except GameError as e:
                return self._rejection(sid, e)

            self.log_event("GAME_END_GIVE_UP", f"{color.label} gave up.", sid=sid, game_id=self.id)
            return self._handle_game_over(result)

    def _handle_game_over(self, result: WinResult) -> List[Notification]:
        if not self._stats_logged:
            self._stats_logged = True
            self.log_event(
                "GAME_END_WIN",
                f"Winner: {result.winner.label} ({result.win_type.value}, {result.points} pts)",
                game_id=self.id
            )
            self.log_stats({
                "game_id": self.id,
                "winner": result.winner.label,
                "win_type": result.win_type.value,
                "points": result.points,
                "reason": result.reason,
                "moves": len(self.controller.get_move_history())
            })
        return self._notify_all('game_over', win_result_schema.dump(result))
