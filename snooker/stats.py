from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from snooker.config import CENTURY_BREAK
from snooker.models import PLAYERS, CompletedMatch


@dataclass
class PlayerStats:
    player_id: str
    name: str
    matches_played: int = 0
    matches_won: int = 0
    win_rate: int = 0
    frames_won: int = 0
    highest_break: int = 0
    century_breaks: int = 0


@dataclass
class HistorySummary:
    total_matches: int
    total_frames: int
    highest_break: int
    highest_break_by: str
    total_centuries: int


def build_leaderboard(
    matches: Iterable[CompletedMatch],
    players: Optional[Dict[str, str]] = None,
) -> List[PlayerStats]:
    """
    Aggregate per-player totals over completed matches.

    ``players`` maps player id to display name; listed players appear even
    without matches. Otherwise the latest name snapshot from history is used.
    """
    stats: Dict[str, PlayerStats] = {}
    for player_id, name in (players or {}).items():
        stats[player_id] = PlayerStats(player_id=player_id, name=name)

    for match in matches:
        for seat in PLAYERS:
            player_id = match.player_ids[seat]
            if player_id not in stats:
                if players is not None:
                    continue
                stats[player_id] = PlayerStats(player_id=player_id, name=match.player_names[seat])

            s = stats[player_id]
            s.matches_played += 1
            if match.match_winner == seat:
                s.matches_won += 1

            for frame in match.frame_history:
                if frame.winner == seat:
                    s.frames_won += 1
                best = frame.highest_breaks[seat]
                s.highest_break = max(s.highest_break, best)
                if best >= CENTURY_BREAK:
                    s.century_breaks += 1

    for s in stats.values():
        if s.matches_played:
            s.win_rate = round(s.matches_won / s.matches_played * 100)

    return sorted(
        stats.values(),
        key=lambda s: (s.matches_won, s.win_rate, s.highest_break),
        reverse=True,
    )


def summarize(matches: List[CompletedMatch]) -> HistorySummary:
    total_frames = 0
    best, best_by = 0, ""
    centuries = 0

    for match in matches:
        total_frames += len(match.frame_history)
        for frame in match.frame_history:
            for seat in PLAYERS:
                value = frame.highest_breaks[seat]
                if value >= CENTURY_BREAK:
                    centuries += 1
                if value > best:
                    best, best_by = value, match.player_names[seat]

    return HistorySummary(
        total_matches=len(matches),
        total_frames=total_frames,
        highest_break=best,
        highest_break_by=best_by,
        total_centuries=centuries,
    )
