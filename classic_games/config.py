# classic_games/config.py

import os

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
LOG_DIR = os.path.join(BASE_DIR, 'logs')

class Config:
    """
    Базовая конфигурация. Перекрывается instance/config.py
    и словарем test_config в create_app().
    """

    SECRET_KEY = 'dev-secret-key-SHOULD-BE-CHANGED'

    LOG_FILE = os.path.join(LOG_DIR, 'application.log')
    STATS_LOG_FILE = os.path.join(LOG_DIR, 'match_stats.log')

    # --- Ограничение частоты запросов ---
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = 'memory://'
    GAME_CREATE_RATE_LIMIT = '30 per minute'

    # None = автовыбор (eventlet, если установлен)
    SOCKETIO_ASYNC_MODE = None

    # Фиксированный seed кубиков для воспроизводимых серверов (None = случайно)
    DICE_SEED = None

    # --- Таймаут хода ---
    # Сколько секунд игрок может бездействовать, прежде чем ход передадут сопернику.
    # None выключает фоновую проверку.
    TURN_TIMEOUT_SECONDS = 120
    TIMEOUT_SWEEP_INTERVAL = 5
