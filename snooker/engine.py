from copy import deepcopy
from typing import Callable, Dict, Optional

from snooker.config import FOUL_MAX_POINTS, FOUL_MIN_POINTS, INITIAL_REDS, POINTS_PER_RED
from snooker.events import (
    ConcedeFrame,
    EndTurn,
    Event,
    Foul,
    FoulOnPot,
    PotBall,
    PotReds,
    ResetMatch,
    StartFreeBall,
    StartNextFrame,
    TimedEvent,
)
from snooker.models import (
    ALL_COLORS_VALUE_SUM,
    COLORS_IN_SEQUENCE,
    PLAYERS,
    FrameRecord,
    MatchSetup,
    MatchSnapshot,
    MatchState,
    Phase,
    Player,
    opponent,
    per_player,
)


# =========================================================
# SETUP
# =========================================================

def validate_best_of(best_of: int):
    if best_of <= 0:
        raise ValueError("best_of must be positive")

    if best_of % 2 == 0:
        raise ValueError("best_of must be odd")


def new_match(setup: MatchSetup) -> MatchState:
    """
    Build the initial state of a match: frames zeroed, empty history,
    first frame open with ``setup.first_to_break`` at the table.
    """
    validate_best_of(setup.best_of)

    names = {Player.PLAYER_1: setup.player1_name, Player.PLAYER_2: setup.player2_name}
    for player, name in names.items():
        if not name or not name.strip():
            raise ValueError(f"{player.value} name is required")

    state = MatchState(
        best_of=setup.best_of,
        player_names=names,
        player_images={
            Player.PLAYER_1: setup.player1_image,
            Player.PLAYER_2: setup.player2_image,
        },
    )
    _open_frame(state, setup.first_to_break)
    state.points_remaining = points_remaining(state)
    return state


# =========================================================
# PUBLIC API
# =========================================================

def apply_event(state: MatchState, event: Event) -> MatchState:
    """
    Return the state that follows ``event``.

    The input is never mutated. An event that does not apply to the
    current state is absorbed: the very same ``state`` object comes back,
    so callers can detect a rejection with ``result is state``.
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        return state

    next_state = deepcopy(state)
    if not handler(next_state, event):
        return state

    _finish_event(next_state)
    return next_state


def points_remaining(state: MatchState) -> int:
    """Maximum points still on the table, using a flat value per red."""
    if state.is_frame_finished:
        return 0

    if state.remaining_reds > 0:
        return state.remaining_reds * POINTS_PER_RED + ALL_COLORS_VALUE_SUM

    if state.phase == Phase.COLORS_SEQUENCE:
        return sum(b.value for b in COLORS_IN_SEQUENCE[state.next_color_index:])

    # last red is down, its colour is still owed
    return ALL_COLORS_VALUE_SUM


# =========================================================
# POTS
# =========================================================

def _pot_ball(state: MatchState, event: PotBall) -> bool:
    if not state.is_frame_live:
        return False

    ball = event.ball

    if state.free_ball_active:
        if ball.is_red:
            return False
        # nominated colour counts as a red
        _score(state, 1)
        state.free_ball_active = False
        state.waiting_for_color = True
        return True

    if ball.is_red:
        if (
            state.phase != Phase.REDS_AVAILABLE
            or state.waiting_for_color
            or state.remaining_reds == 0
        ):
            return False
        state.remaining_reds -= 1
        state.waiting_for_color = True

    elif state.phase == Phase.REDS_AVAILABLE:
        if not state.waiting_for_color:
            return False
        state.waiting_for_color = False
        if state.remaining_reds == 0:
            state.phase = Phase.COLORS_SEQUENCE
            state.next_color_index = 0

    else:
        if ball != COLORS_IN_SEQUENCE[state.next_color_index]:
            return False
        state.next_color_index += 1

    _score(state, ball.value)
    state.free_ball_available = False
    return True


def _pot_reds(state: MatchState, event: PotReds) -> bool:
    if (
        state.phase != Phase.REDS_AVAILABLE
        or state.waiting_for_color
        or state.free_ball_active
        or not _is_count(event.count)
        or not 1 <= event.count <= state.remaining_reds
    ):
        return False

    state.remaining_reds -= event.count
    state.waiting_for_color = True
    state.free_ball_available = False
    _score(state, event.count)
    return True


def _is_count(value) -> bool:
    # bool is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


def _score(state: MatchState, points: int):
    player = state.current_turn
    state.scores[player] += points
    state.current_break += points

    if state.current_break > state.highest_break[player]:
        state.highest_break[player] = state.current_break


# =========================================================
# TURN CHANGES
# =========================================================

def _end_turn(state: MatchState, event: EndTurn) -> bool:
    if not state.is_frame_live:
        return False

    _hand_over(state)
    state.free_ball_available = False
    return True


def _foul(state: MatchState, event: Foul) -> bool:
    if not state.is_frame_live:
        return False

    if not _is_count(event.points) or not FOUL_MIN_POINTS <= event.points <= FOUL_MAX_POINTS:
        return False

    state.scores[opponent(state.current_turn)] += event.points
    _hand_over(state)
    state.free_ball_available = True
    return True


def _foul_on_pot(state: MatchState, event: FoulOnPot) -> bool:
    return _foul(state, Foul(max(event.ball.value, FOUL_MIN_POINTS)))


def _hand_over(state: MatchState):
    state.current_turn = opponent(state.current_turn)
    state.current_break = 0

    # colour after the final red is forfeited with the visit
    if (
        state.phase == Phase.REDS_AVAILABLE
        and state.waiting_for_color
        and state.remaining_reds == 0
    ):
        state.phase = Phase.COLORS_SEQUENCE
        state.next_color_index = 0

    state.waiting_for_color = False
    state.free_ball_active = False


def _start_free_ball(state: MatchState, event: StartFreeBall) -> bool:
    if not state.is_frame_live or not state.free_ball_available:
        return False

    state.free_ball_active = True
    state.free_ball_available = False
    return True


# =========================================================
# FRAME LOGIC
# =========================================================

def _concede_frame(state: MatchState, event: ConcedeFrame) -> bool:
    if not state.is_frame_live:
        return False

    _close_frame(state, opponent(state.current_turn))
    return True


def _start_next_frame(state: MatchState, event: StartNextFrame) -> bool:
    if state.phase != Phase.FRAME_OVER or state.match_winner is not None:
        return False

    _open_frame(state, event.first_to_break or state.player_to_break_next)
    return True


def _reset_match(state: MatchState, event: ResetMatch) -> bool:
    state.frames_won = per_player(0)
    state.frame_history = []
    state.match_winner = None
    _open_frame(state, state.player_to_break_next)
    return True


def _open_frame(state: MatchState, breaker: Player):
    state.scores = per_player(0)
    state.highest_break = per_player(0)
    state.current_turn = breaker
    state.current_break = 0
    state.remaining_reds = INITIAL_REDS
    state.phase = Phase.REDS_AVAILABLE
    state.waiting_for_color = False
    state.next_color_index = 0
    state.free_ball_available = False
    state.free_ball_active = False
    state.frame_winner = None
    state.breaker = breaker
    state.player_to_break_next = opponent(breaker)


def _close_frame(state: MatchState, winner: Optional[Player]):
    state.frame_history.append(
        FrameRecord(
            frame_number=len(state.frame_history) + 1,
            scores=dict(state.scores),
            highest_breaks=dict(state.highest_break),
            winner=winner,
        )
    )

    state.frame_winner = winner
    if winner is not None:
        state.frames_won[winner] += 1

    state.phase = Phase.FRAME_OVER
    state.current_break = 0
    state.waiting_for_color = False
    state.free_ball_available = False
    state.free_ball_active = False


def _table_cleared(state: MatchState) -> bool:
    return (
        state.phase == Phase.COLORS_SEQUENCE
        and state.next_color_index >= len(COLORS_IN_SEQUENCE)
        and state.frame_winner is None
    )


# =========================================================
# MATCH LOGIC
# =========================================================

def _finish_event(state: MatchState):
    if _table_cleared(state):
        a = state.scores[Player.PLAYER_1]
        b = state.scores[Player.PLAYER_2]

        # level scores stay drawn, re-spotted black is not played
        winner = None
        if a > b:
            winner = Player.PLAYER_1
        elif b > a:
            winner = Player.PLAYER_2

        _close_frame(state, winner)

    if state.frame_winner is not None and state.match_winner is None:
        for player in PLAYERS:
            if state.frames_won[player] == state.frames_to_win:
                state.match_winner = player
                state.phase = Phase.MATCH_OVER
                break

    state.points_remaining = points_remaining(state)


_HANDLERS: Dict[type, Callable[[MatchState, Event], bool]] = {
    PotBall: _pot_ball,
    PotReds: _pot_reds,
    EndTurn: _end_turn,
    Foul: _foul,
    FoulOnPot: _foul_on_pot,
    StartFreeBall: _start_free_ball,
    ConcedeFrame: _concede_frame,
    StartNextFrame: _start_next_frame,
    ResetMatch: _reset_match,
}


# =========================================================
# SNAPSHOT
# =========================================================

def build_snapshot(state: MatchState, timestamp: float, applied: bool = True) -> MatchSnapshot:
    return MatchSnapshot(
        timestamp=timestamp,
        frame_number=state.frame_number,
        score_1=state.scores[Player.PLAYER_1],
        score_2=state.scores[Player.PLAYER_2],
        frames_1=state.frames_won[Player.PLAYER_1],
        frames_2=state.frames_won[Player.PLAYER_2],
        current_turn=state.current_turn,
        current_break=state.current_break,
        remaining_reds=state.remaining_reds,
        phase=state.phase,
        points_remaining=state.points_remaining,
        frame_winner=state.frame_winner,
        winner=state.match_winner,
        applied=applied,
    )


class ScoreEngine:
    """
    Stateful driver around ``apply_event``.

    Responsibilities:
    - Hold the current MatchState
    - Enforce non-decreasing event timestamps
    - Produce a MatchSnapshot per processed event
    """

    def __init__(self, state: MatchState):
        validate_best_of(state.best_of)
        self.state = state
        self._last_timestamp = None

    def process_event(self, timed: TimedEvent) -> MatchSnapshot:
        if self._last_timestamp is not None:
            if timed.timestamp < self._last_timestamp:
                raise ValueError("Event timestamp must be non-decreasing")

        self._last_timestamp = timed.timestamp

        previous = self.state
        self.state = apply_event(previous, timed.event)

        return build_snapshot(self.state, timed.timestamp, applied=self.state is not previous)
