# tests/test_turn_controller.py

import random

import pytest

from classic_games.game_core import (
    BAR,
    OFF,
    BoardState,
    Color,
    GameStateError,
    InvalidMoveError,
    Move,
    Phase,
    RejectReason,
    WinType,
    new_game,
)


def test_new_game_starts_with_standard_layout():
    game = new_game(rng_seed=1)
    state = game.get_game_state()

    assert game.board == BoardState.initial()
    assert state.phase == Phase.ROLLING
    assert state.current_player == Color.WHITE
    assert state.bar == {Color.WHITE: 0, Color.BLACK: 0}
    assert state.borne_off == {Color.WHITE: 0, Color.BLACK: 0}
    assert state.dice == ()
    assert state.double_value == 1
    assert state.result is None


def test_seeded_games_roll_the_same_dice():
    first, second = new_game(rng_seed=99), new_game(rng_seed=99)
    assert first.roll_dice() == second.roll_dice()


class TestMoves:

    def test_legal_step_is_applied(self, scripted):
        game = new_game(rng=scripted([3, 5]))
        assert game.roll_dice() == (3, 5)
        assert Move(1, 4, 3) in game.get_available_moves()

        result = game.make_move(Move(1, 4, 3))

        assert result
        assert result.error is None
        assert result.entry.resulting_capture is False
        board = game.board
        assert board.count_for(Color.WHITE, 1) == 1
        assert board.count_for(Color.WHITE, 4) == 1
        assert result.snapshot.remaining_dice == (5,)
        assert game.phase == Phase.MOVING

    def test_illegal_step_leaves_state_unchanged(self, scripted):
        game = new_game(rng=scripted([3, 5]))
        game.roll_dice()
        before = game.get_game_state()

        result = game.make_move(Move(10, 13, 3))

        assert not result
        assert isinstance(result.error, InvalidMoveError)
        assert result.error.reason == RejectReason.EMPTY_SOURCE
        assert game.get_game_state() == before
        assert game.get_move_history() == []

    def test_rejection_is_repeatable(self, scripted):
        game = new_game(rng=scripted([3, 5]))
        game.roll_dice()

        first = game.make_move(Move(1, 6, 5))
        second = game.make_move(Move(1, 6, 5))

        assert first.error.reason == second.error.reason == RejectReason.BLOCKED_DESTINATION
        assert first.snapshot == second.snapshot

    def test_wrong_player(self, scripted):
        game = new_game(rng=scripted([3, 5]))
        game.roll_dice()

        result = game.make_move(Move(24, 21, 3), player=Color.BLACK)
        assert result.error.reason == RejectReason.WRONG_PLAYER

    def test_move_before_roll_is_rejected(self):
        game = new_game(rng_seed=3)
        result = game.make_move(Move(1, 4, 3))

        assert not result
        assert isinstance(result.error, GameStateError)
        assert result.snapshot.phase == Phase.ROLLING

    def test_capture_goes_to_history(self, make_controller):
        game = make_controller(
            white={1: 2, 12: 5, 17: 3, 19: 5},
            black={4: 1, 24: 1, 13: 5, 8: 3, 6: 5},
            dice=[3, 5]
        )
        result = game.make_move(Move(1, 4, 3))

        assert result.entry.resulting_capture is True
        assert result.snapshot.bar[Color.BLACK] == 1
        history = game.get_move_history()
        assert len(history) == 1
        assert history[0].player == Color.WHITE
        assert history[0].turn_number == 0

    def test_bear_off_last_point(self, make_controller):
        game = make_controller(
            white={19: 4, 20: 4, 21: 3, 22: 2, 23: 1, 24: 1},
            black={1: 5, 2: 5, 3: 5},
            rolls=[1, 2]
        )
        game.roll_dice()
        assert Move(24, OFF, 1) in game.get_available_moves()

        result = game.make_move(Move(24, OFF, 1))

        assert result
        assert result.snapshot.borne_off[Color.WHITE] == 1
        assert game.board.owner_at(24) is None

    def test_available_moves_require_a_roll(self):
        with pytest.raises(GameStateError):
            new_game(rng_seed=5).get_available_moves()


class TestTurnFlow:

    def test_full_turn_and_alternation(self, scripted):
        game = new_game(rng=scripted([3, 5, 6, 2]))
        game.roll_dice()

        # Ходы остались - передать ход нельзя
        with pytest.raises(GameStateError) as exc_info:
            game.end_turn()
        assert exc_info.value.code == 'MOVES_REMAIN'

        assert game.make_move(Move(1, 4, 3))
        assert game.make_move(Move(12, 17, 5))
        assert game.phase == Phase.TURN_OVER
        assert game.get_available_moves() == []

        state = game.end_turn()
        assert state.current_player == Color.BLACK
        assert state.phase == Phase.ROLLING
        assert state.turn_number == 1
        assert state.dice == ()

        assert game.roll_dice() == (6, 2)
        assert all(move.to_point < move.from_point for move in game.get_available_moves())

    def test_cannot_roll_twice(self, scripted):
        game = new_game(rng=scripted([3, 5]))
        game.roll_dice()
        with pytest.raises(GameStateError):
            game.roll_dice()

    def test_cannot_end_turn_before_rolling(self):
        with pytest.raises(GameStateError) as exc_info:
            new_game(rng_seed=1).end_turn()
        assert exc_info.value.code == 'NOT_ROLLED'

    def test_forced_end_turn(self, scripted):
        game = new_game(rng=scripted([3, 5]))
        game.roll_dice()

        game.end_turn(force=True)

        assert game.current_player == Color.BLACK
        assert game.phase == Phase.ROLLING

    def test_double_gives_four_steps(self, scripted):
        game = new_game(rng=scripted([6, 6]))
        game.roll_dice()

        for _ in range(4):
            assert game.phase == Phase.MOVING
            assert game.make_move(game.get_available_moves()[0])

        assert game.phase == Phase.TURN_OVER
        history = game.get_move_history()
        assert len(history) == 4
        assert {entry.move.die for entry in history} == {6}

    def test_blocked_bar_is_a_forced_pass(self, make_controller):
        game = make_controller(
            white={1: 1, 12: 5, 17: 3, 19: 5},
            black={3: 2, 5: 2, 13: 5, 8: 3, 6: 3},
            bar={Color.WHITE: 1},
            rolls=[3, 5]
        )
        assert game.roll_dice() == (3, 5)
        assert game.phase == Phase.TURN_OVER
        assert game.get_available_moves() == []

        game.end_turn()
        assert game.current_player == Color.BLACK

    def test_bar_entry_comes_first(self, make_controller):
        game = make_controller(
            white={1: 1, 12: 5, 17: 3, 19: 5},
            black={24: 2, 13: 5, 8: 3, 6: 5},
            bar={Color.WHITE: 1},
            dice=[3, 5]
        )
        result = game.make_move(Move(12, 15, 3))
        assert result.error.reason == RejectReason.BAR_NOT_CLEARED

        assert game.make_move(Move(BAR, 3, 3))
        assert game.board.bar[Color.WHITE] == 0


class TestOpeningRoll:

    def test_higher_die_starts_and_plays_both(self, scripted):
        game = new_game(rng=scripted([4, 4, 2, 5]))

        assert game.roll_opening() == (2, 5)
        assert game.current_player == Color.BLACK
        assert game.phase == Phase.MOVING
        assert game.remaining_dice() == [2, 5]

    def test_white_starts_on_higher_die(self, scripted):
        game = new_game(rng=scripted([6, 1]))
        game.roll_opening()
        assert game.current_player == Color.WHITE
        assert Move(12, 18, 6) in game.get_available_moves()

    def test_only_before_first_turn(self, scripted):
        game = new_game(rng=scripted([6, 1, 3, 2]))
        game.roll_opening()
        with pytest.raises(GameStateError):
            game.roll_opening()

        game.end_turn(force=True)
        with pytest.raises(GameStateError):
            game.roll_opening()


class TestGameOver:

    def test_last_bear_off_wins_backgammon(self, make_controller):
        game = make_controller(
            white={24: 1},
            black={6: 14},
            bar={Color.BLACK: 1},
            borne_off={Color.WHITE: 14},
            rolls=[1, 2]
        )
        game.roll_dice()
        # Правило большего кубика: выбрасываем двойкой
        assert game.get_available_moves() == [Move(24, OFF, 2)]

        result = game.make_move(Move(24, OFF, 2))

        assert result
        assert game.phase == Phase.GAME_OVER
        win = result.snapshot.result
        assert win.winner == Color.WHITE
        assert win.win_type == WinType.BACKGAMMON
        assert win.points == 3
        assert game.result == win

    def test_nothing_is_allowed_after_game_over(self, make_controller):
        game = make_controller(
            white={24: 1},
            black={6: 15},
            borne_off={Color.WHITE: 14},
            dice=[3, 1]
        )
        game.make_move(game.get_available_moves()[0])
        assert game.result.win_type == WinType.GAMMON

        with pytest.raises(GameStateError):
            game.roll_dice()
        with pytest.raises(GameStateError):
            game.end_turn()
        assert not game.make_move(Move(1, 2, 1))

    def test_forfeit(self):
        game = new_game(rng_seed=8)
        result = game.forfeit(Color.WHITE)

        assert result.winner == Color.BLACK
        assert result.win_type == WinType.SINGLE
        assert result.points == 1
        assert result.reason == 'forfeit'
        assert game.phase == Phase.GAME_OVER

        with pytest.raises(GameStateError):
            game.forfeit(Color.BLACK)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_random_playout_keeps_rules(seed):
    game = new_game(rng_seed=seed)
    chooser = random.Random(seed)

    for _ in range(20000):
        if game.phase == Phase.GAME_OVER:
            break
        if game.phase == Phase.ROLLING:
            game.roll_dice()
        elif game.phase == Phase.TURN_OVER:
            game.end_turn()
        else:
            board = game.board
            player = game.current_player
            moves = game.get_available_moves()
            assert moves

            if board.bar[player] > 0:
                assert all(move.from_point == BAR for move in moves)
            for move in moves:
                if move.is_bear_off:
                    assert board.all_pieces_home(player)

            assert game.make_move(chooser.choice(moves))

        board = game.board
        for color in (Color.WHITE, Color.BLACK):
            assert board.pieces_on_board(color) + board.bar[color] + board.borne_off[color] == 15

    assert game.phase == Phase.GAME_OVER
    assert game.result.winner in (Color.WHITE, Color.BLACK)
    assert game.board.borne_off[game.result.winner] == 15
