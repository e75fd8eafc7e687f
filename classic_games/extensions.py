# classic_games/extensions.py
"""
Экземпляры расширений Flask.

Создаются без приложения и подключаются в create_app() через init_app(),
поэтому их можно импортировать из blueprint'ов и обработчиков сокетов.
"""

from flask_socketio import SocketIO
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# async_mode выбирается в create_app (eventlet на сервере, threading в тестах).
# CORS открыт для всех источников, в production список нужно сузить.
socketio = SocketIO(cors_allowed_origins="*")

# Лимиты считаются по IP клиента; хранилище задает RATELIMIT_STORAGE_URI
limiter = Limiter(key_func=get_remote_address)
