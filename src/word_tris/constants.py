"""Game-wide constants."""

BOARD_SIZE = 10
MIN_WORD_LEN = 3
TRAY_CAPACITY = 5
INITIAL_TRAY_SIZE = 4
MAX_LEVEL = 10

WILDCARD = "?"
BOMB_SYMBOL = "\U0001f4a3"
