"""
Events accepted by the match state machine, plus their JSON codec.

The set is closed: ``snooker.engine`` keeps one handler per class below.
Dialog bookkeeping and press-and-hold handling live in the UI layer; the
engine only ever receives fully resolved events.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from snooker.exceptions import InvalidEventError
from snooker.models import Ball, Player, ball_by_name


@dataclass(frozen=True)
class PotBall:
    ball: Ball


@dataclass(frozen=True)
class PotReds:
    """Several reds potted in a single stroke."""
    count: int


@dataclass(frozen=True)
class EndTurn:
    pass


@dataclass(frozen=True)
class Foul:
    points: int


@dataclass(frozen=True)
class FoulOnPot:
    """Foul committed by potting ``ball``; worth its value, minimum 4."""
    ball: Ball


@dataclass(frozen=True)
class StartFreeBall:
    pass


@dataclass(frozen=True)
class ConcedeFrame:
    pass


@dataclass(frozen=True)
class StartNextFrame:
    first_to_break: Optional[Player] = None


@dataclass(frozen=True)
class ResetMatch:
    pass


Event = Union[
    PotBall, PotReds, EndTurn, Foul, FoulOnPot,
    StartFreeBall, ConcedeFrame, StartNextFrame, ResetMatch,
]


@dataclass(frozen=True)
class TimedEvent:
    timestamp: float
    event: Event


# =============================================================================
# Codec
# =============================================================================

_SIMPLE = {
    "end_turn": EndTurn,
    "free_ball": StartFreeBall,
    "concede": ConcedeFrame,
    "reset_match": ResetMatch,
}
_SIMPLE_NAMES = {cls: name for name, cls in _SIMPLE.items()}


def event_to_dict(event: Event) -> Dict[str, Any]:
    if isinstance(event, PotBall):
        return {"type": "pot", "ball": event.ball.name.lower()}
    if isinstance(event, PotReds):
        return {"type": "pot_reds", "count": event.count}
    if isinstance(event, Foul):
        return {"type": "foul", "points": event.points}
    if isinstance(event, FoulOnPot):
        return {"type": "foul_on_pot", "ball": event.ball.name.lower()}
    if isinstance(event, StartNextFrame):
        d: Dict[str, Any] = {"type": "next_frame"}
        if event.first_to_break is not None:
            d["first_to_break"] = event.first_to_break.value
        return d
    if type(event) in _SIMPLE_NAMES:
        return {"type": _SIMPLE_NAMES[type(event)]}
    raise InvalidEventError(f"Not an event: {event!r}")


def event_from_dict(d: Dict[str, Any]) -> Event:
    """
    Decode one event dict.

    Only the shape is checked here. Whether the event is applicable to a
    given state is decided by the engine.
    """
    if not isinstance(d, dict) or "type" not in d:
        raise InvalidEventError(f"invalid event format: {d!r}")

    kind = d["type"]
    try:
        if kind == "pot":
            return PotBall(ball_by_name(d["ball"]))
        if kind == "pot_reds":
            return PotReds(int(d["count"]))
        if kind == "foul":
            return Foul(int(d["points"]))
        if kind == "foul_on_pot":
            return FoulOnPot(ball_by_name(d["ball"]))
        if kind == "next_frame":
            first = d.get("first_to_break")
            return StartNextFrame(Player(first) if first is not None else None)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidEventError(f"invalid {kind} event {d!r}: {e}") from e

    if kind in _SIMPLE:
        return _SIMPLE[kind]()

    raise InvalidEventError(f"Unknown event type: {kind!r}")
