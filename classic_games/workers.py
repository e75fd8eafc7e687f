# classic_games/workers.py

import logging
import time
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def sweep_turn_timeouts(game_service, timeout: float, now: Optional[float] = None) -> List[Dict[str, Any]]:
    """Один проход по всем партиям. Возвращает уведомления о пропущенных ходах."""
    now = time.time() if now is None else now
    notifications = []
    for game_session in game_service.registry.list_sessions():
        notifications.extend(game_session.check_turn_timeout(timeout, now=now))
    return notifications


def _turn_timeout_worker(app, socketio_instance):
    """
    Фоновый воркер: раз в TIMEOUT_SWEEP_INTERVAL секунд проверяет все партии
    (пропуск хода молчащего игрока, победа при уходе соперника, удаление
    пустых партий). Порог - TURN_TIMEOUT_SECONDS.
    """
    timeout = app.config['TURN_TIMEOUT_SECONDS']
    interval = app.config['TIMEOUT_SWEEP_INTERVAL']
    logger.info(f"[TimeoutWorker] Started (timeout={timeout}s, interval={interval}s).")

    while True:
        socketio_instance.sleep(interval)
        try:
            with app.app_context():
                for msg in sweep_turn_timeouts(app.game_service, timeout):
                    socketio_instance.emit(msg['event'], msg['payload'], to=msg['room'])
        except Exception as e:
            # Ошибка одной партии не останавливает проверку остальных
            logger.error(f"[TimeoutWorker] Sweep failed: {e}", exc_info=True)


def start_turn_timeout_worker(app, socketio_instance):
    """Запускается из create_app, если таймаут включен."""
    socketio_instance.start_background_task(
        target=_turn_timeout_worker,
        app=app,
        socketio_instance=socketio_instance
    )
