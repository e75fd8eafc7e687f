# classic_games/api/schemas.py

from marshmallow import Schema, fields, pre_load, post_load, validates_schema, ValidationError
from marshmallow.validate import Range, OneOf

from classic_games.game_core import Move, BAR, OFF
from classic_games.game_core.constants import POINT_1, POINT_24, DIE_MIN, DIE_MAX

COLOR_LABELS = ['white', 'black']


def _by_color(counts):
    return {color.label: count for color, count in counts.items()}


# --- Входящие данные ---

class MoveSchema(Schema):
    """
    Ход в формате клиента: {"from": 0..24, "to": 1..25 | "off", "die": 1..6}.
    При загрузке возвращает game_core.Move.
    """
    from_point = fields.Int(
        required=True, data_key='from', strict=True,
        validate=Range(min=BAR, max=POINT_24, error="'from' must be between 0 (bar) and 24."),
        error_messages={"required": "Move source 'from' is required."}
    )
    to_point = fields.Int(
        required=True, data_key='to', strict=True,
        validate=Range(min=POINT_1, max=OFF, error="'to' must be between 1 and 25 (off)."),
        error_messages={"required": "Move destination 'to' is required."}
    )
    die = fields.Int(
        required=True, strict=True,
        validate=Range(min=DIE_MIN, max=DIE_MAX, error="'die' must be between 1 and 6."),
        error_messages={"required": "Die value 'die' is required."}
    )

    @pre_load
    def normalize_off(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('to'), str) and data['to'].strip().lower() == 'off':
            data = dict(data)
            data['to'] = OFF
        return data

    @validates_schema
    def validate_distinct_points(self, data, **kwargs):
        if data.get('from_point') == data.get('to_point'):
            raise ValidationError("'from' and 'to' must differ.", field_name='to')

    @post_load
    def make_move(self, data, **kwargs):
        return Move(**data)


class ColorChoiceSchema(Schema):
    """
    Базовая схема: необязательный цвет, который автоматически
    "очищается" (strip, lower) перед валидацией.
    """
    color = fields.Str(load_default=None, allow_none=True, validate=OneOf(COLOR_LABELS))

    @pre_load
    def normalize_color(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('color'), str):
            data = dict(data)
            data['color'] = data['color'].strip().lower()
        return data


class CreateGameSchema(Schema):
    """REST: партия создается без игроков, поэтому только seed."""
    seed = fields.Int(load_default=None, allow_none=True, strict=True)


class CreateAndJoinSchema(CreateGameSchema, ColorChoiceSchema):
    """Сокет: создатель сразу садится за стол, можно выбрать цвет."""


class JoinGameSchema(ColorChoiceSchema):
    game_id = fields.Str(required=True, error_messages={"required": "game_id is required."})


# --- Исходящие данные ---

class WinResultSchema(Schema):
    winner = fields.Function(lambda result: result.winner.label)
    win_type = fields.Function(lambda result: result.win_type.value)
    points = fields.Int()
    reason = fields.Str()


class GameSnapshotSchema(Schema):
    points = fields.List(fields.Int())
    bar = fields.Function(lambda snapshot: _by_color(snapshot.bar))
    borne_off = fields.Function(lambda snapshot: _by_color(snapshot.borne_off))
    dice = fields.List(fields.Int())
    dice_used = fields.List(fields.Bool())
    remaining_dice = fields.List(fields.Int())
    phase = fields.Function(lambda snapshot: snapshot.phase.value)
    current_player = fields.Function(lambda snapshot: snapshot.current_player.label)
    double_value = fields.Int()
    turn_number = fields.Int()
    result = fields.Nested(WinResultSchema, allow_none=True)


class MoveHistoryEntrySchema(Schema):
    move = fields.Nested(MoveSchema)
    player = fields.Function(lambda entry: entry.player.label)
    resulting_capture = fields.Bool()
    turn_number = fields.Int()
    timestamp = fields.DateTime()


move_schema = MoveSchema()
moves_schema = MoveSchema(many=True)
create_game_schema = CreateGameSchema()
create_and_join_schema = CreateAndJoinSchema()
join_game_schema = JoinGameSchema()
snapshot_schema = GameSnapshotSchema()
history_schema = MoveHistoryEntrySchema(many=True)
win_result_schema = WinResultSchema()
