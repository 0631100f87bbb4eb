# engine_py/src/crew_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
MALFORMED_MOVE = "MALFORMED_MOVE"
NOT_STARTED = "NOT_STARTED"
WRONG_PHASE = "WRONG_PHASE"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
OWNERSHIP_MISMATCH = "OWNERSHIP_MISMATCH"
UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
UNKNOWN_MISSION = "UNKNOWN_MISSION"
NO_PASSES_LEFT = "NO_PASSES_LEFT"
INVALID_HINT = "INVALID_HINT"
SUPPRESSED_BY_UNDO = "SUPPRESSED_BY_UNDO"
UNDO_ALREADY_USED = "UNDO_ALREADY_USED"
GAME_OVER = "GAME_OVER"
INVALID_CONFIG = "INVALID_CONFIG"
