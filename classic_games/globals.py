# classic_games/globals.py

import datetime
import logging
from classic_games.services.logging_service import log_event_to_file

logger = logging.getLogger(__name__)


def log_event(event_type, message, sid=None, game_id=None, extra_data=None):
    """
    Журнал событий сервера. Одна строка на событие:
    [время] [TYPE: ...] [SID: ...] [GameID: ...] [Data: ...] | сообщение
    Этот callable внедряется в сервисы (реестр, фабрика, сессии).
    """
    parts = [
        f"[{datetime.datetime.now():%Y-%m-%d %H:%M:%S}]",
        f"[TYPE: {event_type}]",
    ]
    for label, value in (("SID", sid), ("GameID", game_id), ("Data", extra_data)):
        if value:
            parts.append(f"[{label}: {value}]")

    line = f"{' '.join(parts)} | {message}"
    logger.debug(line)
    log_event_to_file(line + "\n")
