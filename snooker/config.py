import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MATCHES_DIR = Path(os.environ.get("SNOOKER_MATCHES_DIR", PROJECT_ROOT / "matches"))
ACTIVE_STATE_FILE = MATCHES_DIR / "active_match.json"
HISTORY_FILE = MATCHES_DIR / "match_history.json"

SCHEMA_VERSION = 1
DEFAULT_BEST_OF = 5

INITIAL_REDS = 15
FOUL_MIN_POINTS = 4
FOUL_MAX_POINTS = 7

# 1 for the red plus a flat 7 for the colour that follows it
POINTS_PER_RED = 8
CENTURY_BREAK = 100
