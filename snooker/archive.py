import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from snooker.exceptions import MatchNotFinishedError
from snooker.models import CompletedMatch, MatchState, Player

logger = logging.getLogger(__name__)


def build_completed_match(
    state: MatchState,
    player_ids: Dict[Player, str],
    *,
    match_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> CompletedMatch:
    """
    Turn a finished match into the durable history record.

    Names and images are copied as they were at match time so later
    profile edits do not rewrite history.
    """
    if state.match_winner is None:
        raise MatchNotFinishedError("Match has no winner yet")

    when = now or datetime.now(timezone.utc)

    return CompletedMatch(
        id=match_id or uuid.uuid4().hex,
        player_ids=dict(player_ids),
        player_names=dict(state.player_names),
        player_images=dict(state.player_images),
        frames_won=dict(state.frames_won),
        best_of=state.best_of,
        date=when.isoformat(),
        frame_history=list(state.frame_history),
        match_winner=state.match_winner,
    )


# =============================================================================
# IO
# =============================================================================

def save_history(path: Path, matches: List[CompletedMatch]):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([m.to_dict() for m in matches], f, ensure_ascii=False, indent=2)


def load_history(path: Path) -> List[CompletedMatch]:
    """Newest match first."""
    if not path.exists():
        return []

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError("Match history JSON must be a list")

    matches = [CompletedMatch.from_dict(d) for d in data]
    matches.sort(key=lambda m: m.date, reverse=True)
    return matches


def append_to_history(path: Path, match: CompletedMatch) -> List[CompletedMatch]:
    matches = load_history(path)
    matches.insert(0, match)
    matches.sort(key=lambda m: m.date, reverse=True)
    save_history(path, matches)

    logger.info(f"Archived match {match.id} ({len(matches)} in history)")
    return matches
