from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from snooker.config import INITIAL_REDS


# --- BALLS ---

@dataclass(frozen=True)
class Ball:
    name: str
    value: int
    hex: str

    @property
    def is_red(self) -> bool:
        return self.value == 1


RED = Ball("Red", 1, "#DC2626")
YELLOW = Ball("Yellow", 2, "#FBBF24")
GREEN = Ball("Green", 3, "#16A34A")
BROWN = Ball("Brown", 4, "#B45309")
BLUE = Ball("Blue", 5, "#2563EB")
PINK = Ball("Pink", 6, "#EC4899")
BLACK = Ball("Black", 7, "#1F2937")

COLORS_IN_SEQUENCE = (YELLOW, GREEN, BROWN, BLUE, PINK, BLACK)
ALL_BALLS = (RED,) + COLORS_IN_SEQUENCE
ALL_COLORS_VALUE_SUM = sum(b.value for b in COLORS_IN_SEQUENCE)

_BALLS_BY_NAME = {b.name.lower(): b for b in ALL_BALLS}


def ball_by_name(name: str) -> Ball:
    try:
        return _BALLS_BY_NAME[name.strip().lower()]
    except (KeyError, AttributeError):
        raise ValueError(f"Unknown ball: {name!r}") from None


# --- PLAYERS & PHASES ---

class Player(Enum):
    PLAYER_1 = "player_1"
    PLAYER_2 = "player_2"


PLAYERS = (Player.PLAYER_1, Player.PLAYER_2)


def opponent(player: Player) -> Player:
    return Player.PLAYER_2 if player == Player.PLAYER_1 else Player.PLAYER_1


class Phase(Enum):
    REDS_AVAILABLE = "reds_available"
    COLORS_SEQUENCE = "colors_sequence"
    FRAME_OVER = "frame_over"
    MATCH_OVER = "match_over"


LIVE_PHASES = (Phase.REDS_AVAILABLE, Phase.COLORS_SEQUENCE)


def per_player(value=0) -> Dict[Player, Any]:
    return {p: value for p in PLAYERS}


def _dump_per_player(values: Dict[Player, Any]) -> Dict[str, Any]:
    return {p.value: values[p] for p in PLAYERS}


def _load_per_player(raw: Dict[str, Any]) -> Dict[Player, Any]:
    return {p: raw[p.value] for p in PLAYERS}


def _load_player(raw: Optional[str]) -> Optional[Player]:
    return Player(raw) if raw is not None else None


_EMPTY_IMAGES = {p.value: None for p in PLAYERS}
_ZERO_BREAKS = {p.value: 0 for p in PLAYERS}


# --- FRAMES ---

@dataclass
class FrameRecord:
    """Summary of one finished frame. ``winner`` is None for a drawn frame."""
    frame_number: int
    scores: Dict[Player, int]
    highest_breaks: Dict[Player, int]
    winner: Optional[Player] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frame_number": self.frame_number,
            "scores": _dump_per_player(self.scores),
            "highest_breaks": _dump_per_player(self.highest_breaks),
            "winner": self.winner.value if self.winner else None,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "FrameRecord":
        return FrameRecord(
            frame_number=int(d["frame_number"]),
            scores=_load_per_player(d["scores"]),
            highest_breaks=_load_per_player(d["highest_breaks"]),
            winner=_load_player(d.get("winner")),
        )


# --- MATCH ---

@dataclass(frozen=True)
class MatchSetup:
    player1_name: str
    player2_name: str
    best_of: int
    first_to_break: Player = Player.PLAYER_1
    player1_image: Optional[str] = None
    player2_image: Optional[str] = None


@dataclass
class MatchState:
    """
    Complete state of one in-progress match.

    Only ``snooker.engine.apply_event`` is supposed to change it; every
    other consumer treats it as a read-only snapshot.
    """
    best_of: int
    player_names: Dict[Player, str] = field(
        default_factory=lambda: {Player.PLAYER_1: "Player 1", Player.PLAYER_2: "Player 2"}
    )
    player_images: Dict[Player, Optional[str]] = field(default_factory=lambda: per_player(None))

    scores: Dict[Player, int] = field(default_factory=per_player)
    frames_won: Dict[Player, int] = field(default_factory=per_player)
    highest_break: Dict[Player, int] = field(default_factory=per_player)

    current_turn: Player = Player.PLAYER_1
    current_break: int = 0

    remaining_reds: int = INITIAL_REDS
    phase: Phase = Phase.REDS_AVAILABLE
    waiting_for_color: bool = False
    next_color_index: int = 0

    free_ball_available: bool = False
    free_ball_active: bool = False

    frame_winner: Optional[Player] = None
    match_winner: Optional[Player] = None

    breaker: Player = Player.PLAYER_1
    player_to_break_next: Player = Player.PLAYER_2

    frame_history: List[FrameRecord] = field(default_factory=list)
    points_remaining: int = 0

    @property
    def frame_number(self) -> int:
        return len(self.frame_history) + (0 if self.is_frame_finished else 1)

    @property
    def is_frame_live(self) -> bool:
        return self.phase in LIVE_PHASES

    @property
    def is_frame_finished(self) -> bool:
        return self.phase in (Phase.FRAME_OVER, Phase.MATCH_OVER)

    @property
    def frames_to_win(self) -> int:
        return (self.best_of + 1) // 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "best_of": self.best_of,
            "player_names": _dump_per_player(self.player_names),
            "player_images": _dump_per_player(self.player_images),
            "scores": _dump_per_player(self.scores),
            "frames_won": _dump_per_player(self.frames_won),
            "highest_break": _dump_per_player(self.highest_break),
            "current_turn": self.current_turn.value,
            "current_break": self.current_break,
            "remaining_reds": self.remaining_reds,
            "phase": self.phase.value,
            "waiting_for_color": self.waiting_for_color,
            "next_color_index": self.next_color_index,
            "free_ball_available": self.free_ball_available,
            "free_ball_active": self.free_ball_active,
            "frame_winner": self.frame_winner.value if self.frame_winner else None,
            "match_winner": self.match_winner.value if self.match_winner else None,
            "breaker": self.breaker.value,
            "player_to_break_next": self.player_to_break_next.value,
            "frame_history": [f.to_dict() for f in self.frame_history],
            "points_remaining": self.points_remaining,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "MatchState":
        return MatchState(
            best_of=int(d["best_of"]),
            player_names=_load_per_player(d["player_names"]),
            player_images=_load_per_player(d.get("player_images") or _EMPTY_IMAGES),
            scores=_load_per_player(d["scores"]),
            frames_won=_load_per_player(d["frames_won"]),
            highest_break=_load_per_player(d.get("highest_break") or _ZERO_BREAKS),
            current_turn=Player(d["current_turn"]),
            current_break=int(d.get("current_break", 0)),
            remaining_reds=int(d["remaining_reds"]),
            phase=Phase(d["phase"]),
            waiting_for_color=bool(d.get("waiting_for_color", False)),
            next_color_index=int(d.get("next_color_index", 0)),
            # older snapshots predate free balls
            free_ball_available=bool(d.get("free_ball_available", False)),
            free_ball_active=bool(d.get("free_ball_active", False)),
            frame_winner=_load_player(d.get("frame_winner")),
            match_winner=_load_player(d.get("match_winner")),
            breaker=Player(d.get("breaker", Player.PLAYER_1.value)),
            player_to_break_next=Player(d.get("player_to_break_next", Player.PLAYER_2.value)),
            frame_history=[FrameRecord.from_dict(f) for f in d.get("frame_history", [])],
            points_remaining=int(d.get("points_remaining", 0)),
        )


@dataclass
class CompletedMatch:
    id: str
    player_ids: Dict[Player, str]
    player_names: Dict[Player, str]
    player_images: Dict[Player, Optional[str]]
    frames_won: Dict[Player, int]
    best_of: int
    date: str
    frame_history: List[FrameRecord] = field(default_factory=list)
    match_winner: Optional[Player] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "player_ids": _dump_per_player(self.player_ids),
            "player_names": _dump_per_player(self.player_names),
            "player_images": _dump_per_player(self.player_images),
            "frames_won": _dump_per_player(self.frames_won),
            "best_of": self.best_of,
            "date": self.date,
            "frame_history": [f.to_dict() for f in self.frame_history],
            "match_winner": self.match_winner.value if self.match_winner else None,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CompletedMatch":
        return CompletedMatch(
            id=str(d["id"]),
            player_ids=_load_per_player(d["player_ids"]),
            player_names=_load_per_player(d["player_names"]),
            player_images=_load_per_player(d.get("player_images") or _EMPTY_IMAGES),
            frames_won=_load_per_player(d["frames_won"]),
            best_of=int(d["best_of"]),
            date=str(d["date"]),
            frame_history=[FrameRecord.from_dict(f) for f in d.get("frame_history", [])],
            match_winner=_load_player(d.get("match_winner")),
        )


# --- SNAPSHOTS ---

@dataclass(frozen=True)
class MatchSnapshot:
    timestamp: float
    frame_number: int
    score_1: int
    score_2: int
    frames_1: int
    frames_2: int
    current_turn: Player
    current_break: int
    remaining_reds: int
    phase: Phase
    points_remaining: int
    frame_winner: Optional[Player]
    winner: Optional[Player]
    applied: bool = True

    @property
    def is_finished(self) -> bool:
        return self.phase == Phase.MATCH_OVER
