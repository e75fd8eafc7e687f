# classic_games/game_core/turn_controller.py

import logging
from typing import List, Optional, Tuple

from . import win_detector
from .board_state import BoardState
from .dice import DiceRoller, expand_roll
from .errors import GameStateError, InvalidMoveError
from .move_executor import execute_move
from .move_generator import get_legal_moves
from .turn_state import TurnState
from .types import Color, GameSnapshot, Move, MoveHistoryEntry, MoveResult, Phase, WinResult, WinType

logger = logging.getLogger(__name__)


class TurnController:
    """
    Управляет партией: бросок -> шаги -> конец хода -> смена игрока.

    Владеет доской, состоянием хода и историей. Наружу отдает только копии
    и снимки. Ничего не блокирует и не делает I/O: сериализация запросов -
    забота сессии, которая владеет контроллером.
    """

    def __init__(
        self,
        board: Optional[BoardState] = None,
        turn: Optional[TurnState] = None,
        dice_roller: Optional[DiceRoller] = None
    ):
        self._board = board.copy() if board is not None else BoardState.initial()
        self._turn = turn.copy() if turn is not None else TurnState()
        self._dice_roller = dice_roller or DiceRoller()
        self._history: List[MoveHistoryEntry] = []
        self._result: Optional[WinResult] = None
        self._legal_moves: Tuple[Move, ...] = ()

        if self._turn.phase == Phase.MOVING:
            self._refresh_legal_moves()

    # --- Чтение ---

    @property
    def board(self) -> BoardState:
        return self._board.copy()

    @property
    def turn(self) -> TurnState:
        return self._turn.copy()

    @property
    def phase(self) -> Phase:
        return self._turn.phase

    @property
    def current_player(self) -> Color:
        return self._turn.current_player

    @property
    def result(self) -> Optional[WinResult]:
        return self._result

    def remaining_dice(self) -> List[int]:
        return self._turn.remaining_dice()

    def get_game_state(self) -> GameSnapshot:
        return GameSnapshot(
            points=self._board.points,
            bar=self._board.bar,
            borne_off=self._board.borne_off,
            dice=tuple(self._turn.dice),
            dice_used=tuple(self._turn.dice_used),
            remaining_dice=tuple(self._turn.remaining_dice()),
            phase=self._turn.phase,
            current_player=self._turn.current_player,
            double_value=self._turn.double_value,
            turn_number=self._turn.turn_number,
            result=self._result
        )

    def get_move_history(self) -> List[MoveHistoryEntry]:
        return list(self._history)

    def get_available_moves(self) -> List[Move]:
        if self._turn.phase not in (Phase.MOVING, Phase.TURN_OVER):
            raise GameStateError(
                f"No moves available in phase '{self._turn.phase.value}'. Roll the dice first.",
                context={'phase': self._turn.phase.value}
            )
        return list(self._legal_moves)

    # --- Бросок ---

    def roll_dice(self) -> Tuple[int, int]:
        self._require_phase(Phase.ROLLING, "roll dice")

        die1, die2 = self._dice_roller.roll()
        self._start_moving(expand_roll(die1, die2))
        logger.debug(f"{self.current_player.label} rolled {die1}-{die2}, moves: {len(self._legal_moves)}")
        return die1, die2

    def roll_opening(self) -> Tuple[int, int]:
        """
        Стартовый бросок: каждый бросает по кубику, ничья перебрасывается.
        Начинает тот, у кого больше, и играет обоими значениями.
        Возвращает (кубик белых, кубик черных).
        """
        self._require_phase(Phase.ROLLING, "roll for the opening turn")
        if self._turn.turn_number != 0 or self._history:
            raise GameStateError("Opening roll is only allowed before the first turn.")

        while True:
            white_die = self._dice_roller.roll_one()
            black_die = self._dice_roller.roll_one()
            if white_die != black_die:
                break
            logger.debug(f"Opening roll tie ({white_die}), rerolling.")

        self._turn.current_player = Color.WHITE if white_die > black_die else Color.BLACK
        self._start_moving([white_die, black_die])
        return white_die, black_die

    def _start_moving(self, dice: List[int]):
        self._turn.set_dice(dice)
        self._turn.phase = Phase.MOVING
        self._refresh_legal_moves()
        if not self._legal_moves:
            logger.debug(f"{self.current_player.label} has no legal moves with {dice}. Forced pass.")
            self._enter_turn_over()

    # --- Ход ---

    def make_move(self, move: Move, player: Optional[Color] = None) -> MoveResult:
        """
        Применяет один шаг. Обычные ошибки игрока не бросаются, а возвращаются
        в MoveResult.error; состояние при отказе не меняется.
        """
        if self._turn.phase != Phase.MOVING:
            error = GameStateError(
                f"Cannot move in phase '{self._turn.phase.value}'.",
                context={'phase': self._turn.phase.value}
            )
            return MoveResult(accepted=False, snapshot=self.get_game_state(), error=error)

        try:
            new_board, new_turn, entry = execute_move(
                self._board, self._turn, move, player=player, legal_moves=self._legal_moves
            )
        except InvalidMoveError as e:
            logger.debug(f"Rejected {move} for {self.current_player.label}: {e.reason.value}")
            return MoveResult(accepted=False, snapshot=self.get_game_state(), error=e)

        self._board = new_board
        self._turn = new_turn
        self._history.append(entry)
        self._refresh_legal_moves()

        if not self._legal_moves:
            self._enter_turn_over()

        return MoveResult(accepted=True, snapshot=self.get_game_state(), entry=entry)

    def _refresh_legal_moves(self):
        self._legal_moves = tuple(get_legal_moves(self._board, self._turn.remaining_dice(), self.current_player))

    # --- Конец хода ---

    def _enter_turn_over(self):
        self._turn.phase = Phase.TURN_OVER
        self._legal_moves = ()

        result = win_detector.evaluate(self._board, self._turn.double_value)
        if result is not None:
            self._finish(result)

    def end_turn(self, force: bool = False) -> GameSnapshot:
        """
        Передает ход сопернику. Без force разрешено, только когда ходов нет.
        force=True - пропуск по таймауту, его решает сессия.
        """
        phase = self._turn.phase
        if phase == Phase.GAME_OVER:
            raise GameStateError("Game is over.")
        if not force:
            if phase == Phase.ROLLING:
                raise GameStateError("Cannot end turn before rolling the dice.", code="NOT_ROLLED")
            if self._legal_moves:
                raise GameStateError(
                    "Legal moves remain; all playable dice must be used.",
                    code="MOVES_REMAIN",
                    context={'moves': len(self._legal_moves)}
                )

        if phase != Phase.TURN_OVER:
            self._enter_turn_over()
            if self._turn.phase == Phase.GAME_OVER:
                return self.get_game_state()

        self._turn.current_player = self._turn.current_player.opponent
        self._turn.phase = Phase.ROLLING
        self._turn.turn_number += 1
        self._turn.clear_dice()
        return self.get_game_state()

    def forfeit(self, player: Color) -> WinResult:
        """Сдача (или неявка по таймауту): соперник выигрывает одиночную партию."""
        if self._turn.phase == Phase.GAME_OVER:
            raise GameStateError("Game is over.")
        winner = Color(player).opponent
        result = WinResult(
            winner=winner,
            win_type=WinType.SINGLE,
            points=WinType.SINGLE.multiplier * self._turn.double_value,
            reason="forfeit"
        )
        self._finish(result)
        return result

    def _finish(self, result: WinResult):
        self._result = result
        self._turn.phase = Phase.GAME_OVER
        self._legal_moves = ()
        logger.debug(f"Game over: {result.winner.label} wins ({result.win_type.value}, {result.points} pts).")

    def _require_phase(self, expected: Phase, action: str):
        if self._turn.phase != expected:
            raise GameStateError(
                f"Cannot {action} in phase '{self._turn.phase.value}'.",
                context={'phase': self._turn.phase.value, 'expected': expected.value}
            )


def new_game(rng_seed: Optional[int] = None, rng=None) -> TurnController:
    """Новая партия со стандартной расстановкой. Ходят белые."""
    roller = DiceRoller(rng) if rng is not None else DiceRoller.seeded(rng_seed)
    return TurnController(dice_roller=roller)
