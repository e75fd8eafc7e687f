# classic_games/game_core/__init__.py

# "Публичный API" игрового ядра
from .constants import (
    BAR, OFF, PIECES_PER_PLAYER
)

from .types import (
    Color,
    Phase,
    WinType,
    RejectReason,
    Move,
    MoveHistoryEntry,
    WinResult,
    GameSnapshot,
    MoveResult
)

from .errors import (
    GameError,
    InvalidMoveError,
    GameStateError,
    BoardInvariantError
)

from .board_state import BoardState
from .turn_state import TurnState
from .dice import DiceRoller, expand_roll

from .move_generator import (
    get_legal_moves,
    get_single_moves
)

from .move_executor import (
    execute_move,
    diagnose_rejection
)

from .win_detector import (
    get_winner,
    classify_win
)

from .turn_controller import TurnController, new_game
