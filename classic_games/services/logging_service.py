# classic_games/services/logging_service.py

import json
import datetime
import logging
import threading
from flask import current_app

logger = logging.getLogger(__name__)

# Один замок на оба файла: сокеты и REST пишут из разных потоков
file_lock = threading.RLock()


def _append_line(config_key, line):
    path = current_app.config[config_key]
    with file_lock:
        try:
            with open(path, 'a', encoding='utf-8') as f:
                f.write(line)
        except OSError as e:
            logger.error(f"Failed to append to {config_key} ({path}): {e}")


def log_match_stats(stats_data):
    """
    Дописывает итог партии одной JSON-строкой в STATS_LOG_FILE.
    stats_data: game_id, winner, win_type, points, reason, moves.
    """
    record = dict(stats_data)
    record.setdefault('finished_at', datetime.datetime.now().isoformat(timespec='seconds'))
    _append_line('STATS_LOG_FILE', json.dumps(record, ensure_ascii=False) + '\n')


def log_event_to_file(log_entry):
    """Готовая строка события -> LOG_FILE."""
    _append_line('LOG_FILE', log_entry)
