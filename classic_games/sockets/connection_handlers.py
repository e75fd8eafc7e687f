# classic_games/sockets/connection_handlers.py

from flask import request, current_app
from flask_socketio import emit
from ..extensions import socketio
from ..globals import log_event


@socketio.on('connect')
def handle_connect(auth=None):
    sid = request.sid
    log_event("SESSION_START", "Client connected.", sid=sid)
    emit('connected', {'sid': sid})


@socketio.on('disconnect')
def handle_disconnect(*args):
    sid = request.sid
    game_service = current_app.game_service

    notifications = game_service.handle_disconnect(sid)
    for msg in notifications:
        emit(msg['event'], msg['payload'], room=msg['room'])

    log_event("SESSION_END", "Client disconnected.", sid=sid)
