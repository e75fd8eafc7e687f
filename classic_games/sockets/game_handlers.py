# classic_games/sockets/game_handlers.py

from flask import request, current_app
from flask_socketio import emit
from marshmallow import ValidationError

from ..extensions import socketio
from ..globals import log_event
from ..api.schemas import create_and_join_schema, join_game_schema, move_schema
from classic_games.game_core import Color


def _emit_all(notifications):
    for msg in notifications:
        emit(msg['event'], msg['payload'], room=msg['room'])


def _reject_bad_request(err: ValidationError):
    emit('move_rejection', {'code': 'BAD_REQUEST', 'message': 'Invalid payload.', 'errors': err.messages})


def _current_game():
    """Игра текущего SID или None (с отправкой отказа)."""
    game_session = current_app.game_service.get_game_by_sid(request.sid)
    if not game_session:
        emit('move_rejection', {'code': 'GAME_NOT_FOUND', 'message': 'You are not in a game.'})
    return game_session


@socketio.on('create_game')
def handle_create_game(data=None):
    """
    Создает партию и сразу сажает создателя (по умолчанию за белых).
    data: {"seed": int?, "color": "white" | "black"?}
    """
    game_service = current_app.game_service
    sid = request.sid
    data = data or {}

    if game_service.get_game_by_sid(sid):
        emit('move_rejection', {'code': 'ALREADY_IN_GAME', 'message': 'You are already in a game.'})
        return

    try:
        options = create_and_join_schema.load(data)
    except ValidationError as err:
        _reject_bad_request(err)
        return

    game_session = game_service.create_game(seed=options['seed'])
    log_event("GAME_CREATE", "User created a new game.", sid=sid, game_id=game_session.id)

    emit('game_created', {'game_id': game_session.id})
    color = Color.from_label(options['color']) if options['color'] else None
    _, notifications = game_service.join_game(sid, game_session.id, color)
    _emit_all(notifications)


@socketio.on('join_game')
def handle_join_game(data=None):
    try:
        request_data = join_game_schema.load(data or {})
    except ValidationError as err:
        _reject_bad_request(err)
        return

    color = Color.from_label(request_data['color']) if request_data['color'] else None
    _, notifications = current_app.game_service.join_game(request.sid, request_data['game_id'], color)
    _emit_all(notifications)


@socketio.on('roll_opening')
def handle_roll_opening(data=None):
    game_session = _current_game()
    if game_session:
        _emit_all(game_session.roll_opening(request.sid))


@socketio.on('roll_dice')
def handle_roll_dice(data=None):
    game_session = _current_game()
    if game_session:
        _emit_all(game_session.roll_dice(request.sid))


@socketio.on('make_move')
def handle_make_move(data=None):
    """data: {"from": 0..24, "to": 1..25 | "off", "die": 1..6}"""
    game_session = _current_game()
    if not game_session:
        return

    try:
        move = move_schema.load(data or {})
    except ValidationError as err:
        _reject_bad_request(err)
        return

    _emit_all(game_session.apply_move(request.sid, move))


@socketio.on('end_turn')
def handle_end_turn(data=None):
    game_session = _current_game()
    if game_session:
        _emit_all(game_session.end_turn(request.sid))


@socketio.on('give_up')
def handle_give_up(data=None):
    game_session = _current_game()
    if game_session:
        _emit_all(game_session.give_up(request.sid))


@socketio.on('get_state')
def handle_get_state(data=None):
    game_session = _current_game()
    if game_session:
        emit('game_state', game_session.get_state_payload())
