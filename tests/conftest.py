# tests/conftest.py

import pytest

from classic_games import create_app
from classic_games.game_core import (
    BoardState,
    Color,
    DiceRoller,
    Phase,
    TurnController,
    TurnState,
)


class ScriptedRandom:
    """Источник случайности, который отдает заранее заданные значения кубиков."""

    def __init__(self, values):
        self.values = list(values)

    def randint(self, a, b):
        if not self.values:
            raise AssertionError("ScriptedRandom ran out of values")
        return self.values.pop(0)


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def make_board():
    def _make(white, black, bar=None, borne_off=None):
        return BoardState.from_layout(white, black, bar=bar, borne_off=borne_off)
    return _make


@pytest.fixture
def make_controller(make_board):
    """
    Собирает контроллер с произвольной позицией.
    rolls - значения, которые вернет DiceRoller; dice - уже брошенный пул (фаза MOVING).
    """
    def _make(white, black, bar=None, borne_off=None, player=Color.WHITE, rolls=(), dice=None):
        board = make_board(white, black, bar=bar, borne_off=borne_off)
        turn = TurnState(current_player=player)
        if dice:
            turn.set_dice(dice)
            turn.phase = Phase.MOVING
        return TurnController(board=board, turn=turn, dice_roller=DiceRoller(ScriptedRandom(rolls)))
    return _make


@pytest.fixture
def app_factory(tmp_path):
    """Создает приложение с тестовой конфигурацией; overrides перекрывают значения."""
    apps = []

    def _create(**overrides):
        config = {
            'TESTING': True,
            'LOG_FILE': str(tmp_path / 'application.log'),
            'STATS_LOG_FILE': str(tmp_path / 'match_stats.log'),
            'RATELIMIT_ENABLED': False,
            'SOCKETIO_ASYNC_MODE': 'threading',
        }
        config.update(overrides)
        app, _ = create_app(config)
        apps.append(app)
        return app

    yield _create

    for app in apps:
        for handler in list(app.logger.handlers):
            handler.close()
            app.logger.removeHandler(handler)


@pytest.fixture
def app(app_factory):
    return app_factory()


@pytest.fixture
def http_client(app):
    return app.test_client()


@pytest.fixture
def socket_client_factory(app):
    from classic_games.extensions import socketio

    clients = []

    def _connect():
        client = socketio.test_client(app)
        clients.append(client)
        return client

    yield _connect

    for client in clients:
        if client.is_connected():
            client.disconnect()
