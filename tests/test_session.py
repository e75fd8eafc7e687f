# tests/test_session.py

import pytest

from classic_games.game_core import Color, Phase
from classic_games.workers import sweep_turn_timeouts


@pytest.fixture
def seated(app):
    """Партия с двумя игроками: 'w' за белых, 'b' за черных."""
    with app.app_context():
        service = app.game_service
        game_session = service.create_game(seed=3)
        service.join_game('w', game_session.id)
        service.join_game('b', game_session.id)
        yield game_session


def _names(notifications):
    return [msg['event'] for msg in notifications]


def test_seats_follow_join_order(seated):
    assert seated.get_color('w') == Color.WHITE
    assert seated.get_color('b') == Color.BLACK
    assert sorted(seated.get_all_sids()) == ['b', 'w']


def test_rejoin_returns_current_state(seated):
    color, notifications = seated.join('w')
    assert color == Color.WHITE
    assert _names(notifications) == ['game_state']


def test_requested_color(app):
    with app.app_context():
        game_session = app.game_service.create_game()
        color, _ = game_session.join('x', Color.BLACK)
        assert color == Color.BLACK

        color, notifications = game_session.join('y', Color.BLACK)
        assert color is None
        assert notifications[0]['payload']['code'] == 'SEAT_UNAVAILABLE'


def test_one_game_per_sid(app, seated):
    other = app.game_service.create_game()
    game_session, notifications = app.game_service.join_game('w', other.id)
    assert game_session is None
    assert notifications[0]['payload']['code'] == 'ALREADY_IN_GAME'


def test_unseated_sid_is_rejected(seated):
    notifications = seated.roll_dice('stranger')
    assert notifications[0]['payload']['code'] == 'NOT_SEATED'


def test_opening_roll_notifies_both(seated):
    notifications = seated.roll_opening('b')

    opening = [msg for msg in notifications if msg['event'] == 'opening_roll_result']
    assert {msg['room'] for msg in opening} == {'w', 'b'}
    payload = opening[0]['payload']
    assert payload['white'] != payload['black']
    expected = 'white' if payload['white'] > payload['black'] else 'black'
    assert payload['first_player'] == expected
    assert seated.controller.phase == Phase.MOVING

    # Второй стартовый бросок запрещен
    again = seated.roll_opening('w')
    assert again[0]['event'] == 'move_rejection'
    assert again[0]['payload']['code'] == 'INVALID_GAME_STATE'


def test_state_payload(seated):
    payload = seated.get_state_payload()
    assert payload['game_id'] == seated.id
    assert payload['state']['phase'] == 'rolling'
    assert payload['available_moves'] == []


class TestTurnTimeout:

    def test_no_pass_before_timeout(self, seated):
        seated.last_activity = 1000
        assert seated.check_turn_timeout(60, now=1030) == []
        assert seated.controller.current_player == Color.WHITE

    def test_idle_player_loses_the_turn(self, seated):
        seated.last_activity = 1000
        notifications = seated.check_turn_timeout(60, now=1100)

        assert _names(notifications) == ['turn_finished', 'turn_finished']
        assert notifications[0]['payload']['next_player'] == 'black'
        assert seated.controller.current_player == Color.BLACK
        assert seated.controller.phase == Phase.ROLLING

    def test_pass_in_the_middle_of_a_turn(self, seated):
        seated.roll_dice('w')
        assert seated.controller.phase == Phase.MOVING

        seated.last_activity = 0
        seated.check_turn_timeout(60, now=100)

        assert seated.controller.current_player == Color.BLACK
        assert seated.controller.remaining_dice() == []

    def test_timer_waits_for_opponent(self, app):
        with app.app_context():
            game_session = app.game_service.create_game()
            game_session.join('w')
            game_session.last_activity = 0
            assert game_session.check_turn_timeout(60, now=1000) == []

    def test_sweep_over_registry(self, app, seated):
        seated.last_activity = 0
        notifications = sweep_turn_timeouts(app.game_service, 60, now=1000)

        assert {msg['room'] for msg in notifications} == {'w', 'b'}
        assert seated.controller.current_player == Color.BLACK


def test_give_up_logs_stats_once(app, seated):
    first = seated.give_up('w')
    assert _names(first) == ['game_over', 'game_over']
    assert first[0]['payload']['winner'] == 'black'

    second = seated.give_up('b')
    assert second[0]['event'] == 'move_rejection'

    with open(app.config['STATS_LOG_FILE'], encoding='utf-8') as f:
        assert len(f.readlines()) == 1


def test_last_disconnect_removes_game(app, seated):
    assert _names(app.game_service.handle_disconnect('b')) == ['opponent_disconnected']
    assert app.game_service.handle_disconnect('w') == []
    assert app.game_service.get_game(seated.id) is None


class TestAbandonedGames:

    def test_unjoined_game_expires(self, app):
        with app.app_context():
            service = app.game_service
            game_session = service.create_game()
            game_session.last_activity = 1000

            assert sweep_turn_timeouts(service, 60, now=1030) == []
            assert service.get_game(game_session.id) is game_session

            assert sweep_turn_timeouts(service, 60, now=1100) == []
            assert service.get_game(game_session.id) is None

    def test_remaining_player_wins_after_timeout(self, app, seated):
        service = app.game_service
        service.handle_disconnect('b')
        assert seated.abandoned_at is not None

        seated.abandoned_at = 1000
        assert seated.check_turn_timeout(60, now=1030) == []
        assert seated.controller.result is None

        notifications = sweep_turn_timeouts(service, 60, now=1100)

        assert _names(notifications) == ['opponent_timeout_victory', 'game_over']
        assert {msg['room'] for msg in notifications} == {'w'}
        assert notifications[1]['payload']['winner'] == 'white'
        assert notifications[1]['payload']['reason'] == 'forfeit'
        assert seated.controller.phase == Phase.GAME_OVER
        assert service.get_game(seated.id) is None
        assert service.get_game_by_sid('w') is None

    def test_return_before_timeout_cancels_victory(self, app, seated):
        service = app.game_service
        service.handle_disconnect('b')
        service.join_game('b2', seated.id)

        assert seated.get_color('b2') == Color.BLACK
        assert seated.abandoned_at is None

        seated.last_activity = 1000
        notifications = seated.check_turn_timeout(60, now=1030)
        assert notifications == []
        assert seated.controller.result is None
