# run.py

# 1. eventlet патчит stdlib до любых других импортов
import eventlet
eventlet.monkey_patch()

import argparse
import logging
from classic_games import create_app

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MODES = {
    # env: (host, port по умолчанию, debug)
    'local': ('127.0.0.1', 4999, True),
    'prod': ('0.0.0.0', 5000, False),
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Сервер партий в нарды (Flask-SocketIO).')
    parser.add_argument(
        '-e', '--env',
        default='local',
        choices=sorted(MODES),
        help='local - разработка (debug), prod - боевой сервер. По умолчанию: local.'
    )
    parser.add_argument('--port', type=int, default=None, help='Порт (по умолчанию 4999 для local, 5000 для prod).')
    parser.add_argument('--seed', type=int, default=None, help='Фиксированный seed кубиков для всех новых партий.')
    parser.add_argument('--turn-timeout', type=int, default=None, help='Таймаут хода в секундах (0 - выключить).')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    overrides = {}
    if args.seed is not None:
        overrides['DICE_SEED'] = args.seed
    if args.turn_timeout is not None:
        overrides['TURN_TIMEOUT_SECONDS'] = args.turn_timeout or None

    app, socketio = create_app(overrides)

    host, default_port, debug = MODES[args.env]
    port = args.port or default_port
    logger.info(f"[run.py] Starting '{args.env}' server on {host}:{port} (debug={debug})...")

    # allow_unsafe_werkzeug нужен только для debug-режима
    socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=debug)


if __name__ == '__main__':
    main()
