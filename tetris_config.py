
CONFIG = {
    "CELL_SIZE": 28,
    "PIECE_SEED": None,
    "FIRST_PIECE_AVOID_SZO": False,
    "REPEAT_REROLL": False,
    "SCORING_PRESET": "classic",
    "LOG_LEVEL": "INFO",
}
