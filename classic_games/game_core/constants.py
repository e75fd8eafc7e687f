# classic_games/game_core/constants.py

# === Настройка доски ===
# Белые (цвет A) идут 1 -> 24, черные (цвет B) зеркально 24 -> 1.
STANDARD_WHITE_SETUP = {1: 2, 12: 5, 17: 3, 19: 5}
STANDARD_BLACK_SETUP = {24: 2, 13: 5, 8: 3, 6: 5}
PIECES_PER_PLAYER = 15

# === Индексы доски ===

# Знаки игроков (1 = Белые, -1 = Черные)
PLAYER_WHITE = 1
PLAYER_BLACK = -1

# Позиции на доске
POINT_1 = 1
POINT_24 = 24
BOARD_SIZE = 24

# Псевдо-позиции для Move: 0 = бар (откуда входим), 25 = выброс (bear off)
BAR = 0
OFF = 25

# Диапазоны "Дома" на доске
HOME_BOARD_WHITE = range(19, 25)
HOME_BOARD_BLACK = range(1, 7)

# === Кубики ===
DIE_MIN = 1
DIE_MAX = 6
DICE_PER_DOUBLE = 4

# === Очки за победу (умножаются на double_value) ===
SINGLE_GAME_POINTS = 1
GAMMON_POINTS = 2
BACKGAMMON_POINTS = 3
