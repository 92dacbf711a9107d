import json
import logging
from pathlib import Path
from typing import Optional

from snooker.config import INITIAL_REDS, SCHEMA_VERSION
from snooker.engine import new_match
from snooker.exceptions import SnapshotError
from snooker.models import COLORS_IN_SEQUENCE, MatchSetup, MatchState, Phase

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    "schema_version",
    "best_of",
    "player_names",
    "scores",
    "frames_won",
    "current_turn",
    "remaining_reds",
    "phase",
}


def save_state(path: Path, state: MatchState):
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {"schema_version": SCHEMA_VERSION, **state.to_dict()}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=4)


def read_state(path: Path) -> MatchState:
    """Load a snapshot, raising SnapshotError when it cannot be trusted."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")

    missing = REQUIRED_FIELDS - set(data.keys())
    if missing:
        raise SnapshotError(f"Missing field(s): {sorted(missing)}")

    if data["schema_version"] != SCHEMA_VERSION:
        raise SnapshotError(f"Unsupported schema_version: {data['schema_version']}")

    try:
        state = MatchState.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Malformed snapshot: {e}") from e

    _check_table(state)
    return state


def _check_table(state: MatchState):
    if not 0 <= state.remaining_reds <= INITIAL_REDS:
        raise SnapshotError(f"remaining_reds out of range: {state.remaining_reds}")

    if not 0 <= state.next_color_index <= len(COLORS_IN_SEQUENCE):
        raise SnapshotError(f"next_color_index out of range: {state.next_color_index}")

    # a live colours phase always has a colour left to pot
    if state.phase == Phase.COLORS_SEQUENCE and (
        state.remaining_reds or state.next_color_index == len(COLORS_IN_SEQUENCE)
    ):
        raise SnapshotError("Colour sequence snapshot does not match the table")


def load_state(path: Path) -> Optional[MatchState]:
    if not path.exists():
        return None

    try:
        return read_state(path)
    except (OSError, SnapshotError) as e:
        logger.warning(f"Discarding active match snapshot {path}: {e}")
        return None


def load_or_new(path: Path, setup: MatchSetup) -> MatchState:
    """
    Resume the match saved at ``path`` or start a fresh one.

    A corrupt snapshot is deleted rather than repaired.
    """
    state = load_state(path)
    if state is not None:
        logger.info(f"Resumed match from {path}")
        return state

    if path.exists():
        path.unlink()

    return new_match(setup)
