# classic_games/__init__.py

import os
import logging
from flask import Flask
from .extensions import socketio, limiter
from .globals import log_event
from .services.logging_service import log_match_stats
from .workers import start_turn_timeout_worker

# Получаем логгер
logger = logging.getLogger(__name__)

def _configure_logging(app):
    """Настраивает файловый логгер (каталог логов создается при необходимости)."""
    for key in ('LOG_FILE', 'STATS_LOG_FILE'):
        log_dir = os.path.dirname(app.config[key])
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

    file_handler = logging.FileHandler(app.config['LOG_FILE'], encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    app.logger.addHandler(file_handler)
    app.logger.setLevel(logging.INFO)
    logger.info("File logger configured.")

def _init_extensions(app):
    """Инициализирует расширения Flask."""
    socketio.init_app(app, async_mode=app.config.get('SOCKETIO_ASYNC_MODE'))
    limiter.init_app(app)
    logger.info("Flask extensions (SocketIO, Limiter) initialized.")

def _init_services(app):
    """Инициализирует и внедряет сервисы приложения."""

    # Импорты сервисов здесь, чтобы избежать циклических зависимостей.
    from .services.game_service import GameService
    from .services.game_factory import GameFactory
    from .services.game_registry import GameRegistry

    registry = GameRegistry(log_event_func=log_event)

    game_factory = GameFactory(
        config=app.config,
        log_event=log_event,
        log_stats=log_match_stats,
        finalize_game_callback=registry.remove_game_by_id
    )

    # Прикрепляем главный сервис к экземпляру приложения
    app.game_service = GameService(registry=registry, factory=game_factory)
    logger.info("Game services (GameService, Factory, Registry) initialized.")

def _register_blueprints(app):
    """Регистрирует все маршруты API (Blueprints)."""
    from .api.game_routes import bp as games_bp
    app.register_blueprint(games_bp)

    logger.info("Blueprints registered.")

def _register_socketio_handlers():
    """
    Импортирует обработчики SocketIO для их регистрации.
    """
    # Этот импорт регистрирует обработчики в экземпляре socketio
    from .sockets import connection_handlers
    from .sockets import game_handlers
    logger.info("SocketIO handlers (connection, game) registered.")

def _start_background_workers(app):
    """Фоновая проверка таймаутов хода (в тестах выключена)."""
    if app.testing or not app.config.get('TURN_TIMEOUT_SECONDS'):
        logger.info("Turn timeout worker disabled.")
        return
    start_turn_timeout_worker(app, socketio)

def create_app(test_config=None):
    """
    Фабрика приложений (Паттерн Application Factory).
    test_config - словарь, перекрывающий конфигурацию (для тестов).
    """

    app = Flask(__name__, instance_relative_config=True)

    # 1. Загрузка конфигурации
    app.config.from_object('classic_games.config.Config')
    app.config.from_pyfile('config.py', silent=True)
    if test_config:
        app.config.from_mapping(test_config)

    # 2. Настройка логирования
    _configure_logging(app)

    # 3. Регистрация обработчиков SocketIO.
    # До init_app: тогда они попадают в socketio.handlers и подключаются
    # к серверу каждого нового приложения, а не только первого.
    _register_socketio_handlers()

    # 4. Инициализация расширений
    _init_extensions(app)

    # 5. Инициализация сервисов
    _init_services(app)

    # 6. Регистрация Blueprints (маршрутов API)
    _register_blueprints(app)

    # 7. Фоновые воркеры
    _start_background_workers(app)

    app.logger.info("Application 'classic-games' created.")
    app.logger.info(f"Log path: {app.config['LOG_FILE']}")

    return app, socketio
