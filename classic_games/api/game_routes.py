# classic_games/api/game_routes.py

from flask import Blueprint, current_app, jsonify, request
from marshmallow import ValidationError

from ..extensions import limiter
from .schemas import create_game_schema

bp = Blueprint('games', __name__, url_prefix='/api/games')


def _create_game_limit():
    return current_app.config['GAME_CREATE_RATE_LIMIT']


def _get_session_or_404(game_id):
    game_session = current_app.game_service.get_game(game_id)
    if game_session is None:
        return None, (jsonify({"error": f"Game not found: {game_id}"}), 404)
    return game_session, None


@bp.route('', methods=['POST'])
@limiter.limit(_create_game_limit)
def create_game():
    """
    Создает новую партию. Тело (необязательно): {"seed": int}.
    """
    try:
        data = create_game_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"errors": err.messages}), 400

    game_session = current_app.game_service.create_game(seed=data['seed'])
    current_app.logger.info(f"Game {game_session.id} created via REST.")
    return jsonify(game_session.get_state_payload()), 201


@bp.route('/<game_id>', methods=['GET'])
def get_game_state(game_id):
    game_session, error = _get_session_or_404(game_id)
    if error:
        return error
    return jsonify(game_session.get_state_payload()), 200


@bp.route('/<game_id>/moves', methods=['GET'])
def get_available_moves(game_id):
    game_session, error = _get_session_or_404(game_id)
    if error:
        return error
    payload = game_session.get_state_payload()
    return jsonify({"game_id": game_id, "available_moves": payload['available_moves']}), 200


@bp.route('/<game_id>/history', methods=['GET'])
def get_move_history(game_id):
    game_session, error = _get_session_or_404(game_id)
    if error:
        return error
    return jsonify({"game_id": game_id, "history": game_session.get_history_payload()}), 200
