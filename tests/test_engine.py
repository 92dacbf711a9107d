import pytest

from snooker.engine import apply_event, new_match, points_remaining
from snooker.events import (
    ConcedeFrame,
    EndTurn,
    Foul,
    FoulOnPot,
    PotBall,
    PotReds,
    ResetMatch,
    StartFreeBall,
    StartNextFrame,
)
from snooker.models import (
    BLACK,
    BLUE,
    BROWN,
    COLORS_IN_SEQUENCE,
    GREEN,
    PINK,
    RED,
    YELLOW,
    MatchSetup,
    Phase,
    Player,
)

P1 = Player.PLAYER_1
P2 = Player.PLAYER_2


def create_state(best_of=5, breaker=P1):
    return new_match(
        MatchSetup(
            player1_name="Alice",
            player2_name="Bob",
            best_of=best_of,
            first_to_break=breaker,
        )
    )


def play(state, *events):
    for event in events:
        state = apply_event(state, event)
    return state


def clear_table():
    """15 reds each followed by the black, then the colours: a 147."""
    events = []
    for _ in range(15):
        events += [PotBall(RED), PotBall(BLACK)]
    events += [PotBall(ball) for ball in COLORS_IN_SEQUENCE]
    return events


# ---------- SETUP ----------

def test_new_match_initial_state():
    state = create_state()

    assert state.phase == Phase.REDS_AVAILABLE
    assert state.remaining_reds == 15
    assert state.current_turn == P1
    assert state.player_to_break_next == P2
    assert state.scores == {P1: 0, P2: 0}
    assert state.frames_won == {P1: 0, P2: 0}
    assert state.frame_history == []
    assert state.points_remaining == 147
    assert state.player_names == {P1: "Alice", P2: "Bob"}


@pytest.mark.parametrize("best_of", [0, -3, 4])
def test_setup_rejects_bad_best_of(best_of):
    with pytest.raises(ValueError):
        create_state(best_of=best_of)


def test_setup_requires_names():
    with pytest.raises(ValueError):
        new_match(MatchSetup(player1_name=" ", player2_name="Bob", best_of=3))


def test_second_player_can_break():
    state = create_state(breaker=P2)

    assert state.current_turn == P2
    assert state.player_to_break_next == P1


# ---------- POTTING ----------

def test_red_then_colour_then_miss_then_foul():
    state = create_state()

    state = apply_event(state, PotBall(RED))
    assert state.scores[P1] == 1
    assert state.remaining_reds == 14
    assert state.waiting_for_color is True

    state = apply_event(state, PotBall(YELLOW))
    assert state.scores[P1] == 3
    assert state.waiting_for_color is False

    state = apply_event(state, EndTurn())
    assert state.current_turn == P2
    assert state.current_break == 0

    # Bob fouls, Alice gets the points and the table
    state = apply_event(state, Foul(4))
    assert state.scores[P1] == 7
    assert state.scores[P2] == 0
    assert state.current_turn == P1
    assert state.free_ball_available is True


def test_red_with_no_reds_left_is_noop():
    state = play(create_state(), PotReds(15))

    assert state.phase == Phase.REDS_AVAILABLE
    assert state.remaining_reds == 0

    assert apply_event(state, PotBall(RED)) is state


def test_red_while_colour_owed_is_noop():
    state = play(create_state(), PotBall(RED))

    assert apply_event(state, PotBall(RED)) is state


def test_colour_without_red_is_noop():
    state = create_state()

    assert apply_event(state, PotBall(PINK)) is state


def test_colour_out_of_sequence_is_noop():
    state = play(create_state(), PotReds(15), PotBall(BLACK))
    assert state.phase == Phase.COLORS_SEQUENCE

    assert apply_event(state, PotBall(GREEN)) is state

    state = apply_event(state, PotBall(YELLOW))
    assert state.next_color_index == 1
    assert apply_event(state, PotBall(YELLOW)) is state


def test_pot_multiple_reds():
    state = apply_event(create_state(), PotReds(3))

    assert state.remaining_reds == 12
    assert state.scores[P1] == 3
    assert state.current_break == 3
    assert state.waiting_for_color is True


@pytest.mark.parametrize("count", [0, -1, 16, 2.5, True])
def test_pot_multiple_reds_out_of_range(count):
    state = create_state()

    assert apply_event(state, PotReds(count)) is state


def test_pot_multiple_reds_needs_colour_first():
    state = play(create_state(), PotReds(2))

    assert apply_event(state, PotReds(2)) is state


def test_break_and_highest_break():
    state = play(
        create_state(),
        PotBall(RED), PotBall(BLACK),
        EndTurn(),
        PotBall(RED),
        EndTurn(),
        PotBall(RED),
    )

    assert state.current_break == 1
    assert state.highest_break == {P1: 8, P2: 1}


def test_input_state_is_not_mutated():
    state = create_state()
    before = state.to_dict()

    after = apply_event(state, PotBall(RED))

    assert after is not state
    assert state.to_dict() == before


# ---------- COLOURS & FRAME END ----------

def test_last_red_colour_enters_colour_sequence():
    state = play(create_state(), PotReds(14), PotBall(BLUE), PotBall(RED))
    assert state.phase == Phase.REDS_AVAILABLE

    state = apply_event(state, PotBall(PINK))
    assert state.phase == Phase.COLORS_SEQUENCE
    assert state.next_color_index == 0


def test_full_clearance_ends_frame():
    events = clear_table()
    state = play(create_state(), *events[:30])

    assert state.phase == Phase.COLORS_SEQUENCE

    for index, ball in enumerate(COLORS_IN_SEQUENCE[:-1], start=1):
        state = apply_event(state, PotBall(ball))
        assert state.next_color_index == index

    state = apply_event(state, PotBall(BLACK))

    assert state.phase == Phase.FRAME_OVER
    assert state.frame_winner == P1
    assert state.frames_won == {P1: 1, P2: 0}
    assert state.points_remaining == 0
    assert len(state.frame_history) == 1

    record = state.frame_history[0]
    assert record.frame_number == 1
    assert record.scores == {P1: 147, P2: 0}
    assert record.highest_breaks == {P1: 147, P2: 0}
    assert record.winner == P1


@pytest.mark.parametrize("event", [EndTurn(), Foul(4)])
def test_losing_the_table_after_last_red_skips_its_colour(event):
    state = play(create_state(), PotReds(15), event)

    assert state.phase == Phase.COLORS_SEQUENCE
    assert state.next_color_index == 0
    assert state.waiting_for_color is False
    assert state.current_turn == P2


def test_level_frame_ends_drawn():
    state = create_state()
    # Alice gives away 49 in fouls, then makes 49 herself
    for _ in range(7):
        state = play(state, Foul(7), EndTurn())

    assert state.scores == {P1: 0, P2: 49}

    state = play(state, PotReds(15), PotBall(BLACK), *[PotBall(b) for b in COLORS_IN_SEQUENCE])

    assert state.phase == Phase.FRAME_OVER
    assert state.scores == {P1: 49, P2: 49}
    assert state.frame_winner is None
    assert state.frames_won == {P1: 0, P2: 0}
    assert state.frame_history[0].winner is None

    state = apply_event(state, StartNextFrame())
    assert state.phase == Phase.REDS_AVAILABLE
    assert len(state.frame_history) == 1


# ---------- FOULS & FREE BALL ----------

@pytest.mark.parametrize("points", [3, 8, 0, 4.5, 5.0])
def test_foul_value_out_of_range_is_noop(points):
    state = create_state()

    assert apply_event(state, Foul(points)) is state


@pytest.mark.parametrize("ball, expected", [
    (RED, 4),
    (YELLOW, 4),
    (BROWN, 4),
    (BLUE, 5),
    (PINK, 6),
    (BLACK, 7),
])
def test_foul_on_pot_value(ball, expected):
    state = apply_event(create_state(), FoulOnPot(ball))

    assert state.scores[P2] == expected
    assert state.current_turn == P2
    assert state.free_ball_available is True


def test_foul_resets_break():
    state = play(create_state(), PotBall(RED), PotBall(BLACK), Foul(7))

    assert state.current_break == 0
    assert state.scores == {P1: 8, P2: 7}
    assert state.highest_break[P1] == 8


def test_free_ball_scores_one_and_owes_a_colour():
    state = play(create_state(), Foul(4), StartFreeBall())
    assert state.free_ball_active is True
    assert state.free_ball_available is False

    # a red cannot be nominated
    assert apply_event(state, PotBall(RED)) is state

    state = apply_event(state, PotBall(BLUE))
    assert state.scores[P2] == 5
    assert state.free_ball_active is False
    assert state.waiting_for_color is True
    assert state.remaining_reds == 15

    state = apply_event(state, PotBall(PINK))
    assert state.scores[P2] == 11
    assert state.current_break == 7


def test_free_ball_requires_foul():
    state = create_state()

    assert apply_event(state, StartFreeBall()) is state


def test_pot_forfeits_free_ball_option():
    state = play(create_state(), Foul(4), PotBall(RED))

    assert state.free_ball_available is False
    assert apply_event(state, StartFreeBall()) is state


def test_end_turn_clears_free_ball():
    state = play(create_state(), Foul(4), StartFreeBall(), EndTurn())

    assert state.free_ball_active is False
    assert state.free_ball_available is False
    assert state.current_turn == P1


# ---------- CONCESSION & NEXT FRAME ----------

def test_concede_frame():
    state = play(create_state(), PotBall(RED), PotBall(BLACK), EndTurn(), PotBall(RED))

    state = apply_event(state, ConcedeFrame())

    assert state.phase == Phase.FRAME_OVER
    assert state.frame_winner == P1
    assert state.frames_won == {P1: 1, P2: 0}
    assert state.frame_history[0].scores == {P1: 8, P2: 1}
    assert state.frame_history[0].highest_breaks == {P1: 8, P2: 1}

    assert apply_event(state, ConcedeFrame()) is state


def test_start_next_frame_alternates_breaker():
    state = play(create_state(), ConcedeFrame(), StartNextFrame())

    assert state.phase == Phase.REDS_AVAILABLE
    assert state.current_turn == P2
    assert state.breaker == P2
    assert state.player_to_break_next == P1
    assert state.scores == {P1: 0, P2: 0}
    assert state.remaining_reds == 15
    assert state.frame_winner is None
    assert state.frames_won == {P1: 0, P2: 1}
    assert len(state.frame_history) == 1


def test_start_next_frame_with_chosen_breaker():
    state = play(create_state(), ConcedeFrame(), StartNextFrame(first_to_break=P1))

    assert state.current_turn == P1


def test_start_next_frame_during_frame_is_noop():
    state = create_state()

    assert apply_event(state, StartNextFrame()) is state


# ---------- MATCH LOGIC ----------

def test_match_over_best_of_three():
    state = play(
        create_state(best_of=3),
        EndTurn(), ConcedeFrame(),      # Bob concedes frame 1
        StartNextFrame(), ConcedeFrame(),  # Bob breaks and concedes frame 2
    )

    assert state.phase == Phase.MATCH_OVER
    assert state.match_winner == P1
    assert state.frames_won == {P1: 2, P2: 0}
    assert [f.frame_number for f in state.frame_history] == [1, 2]


@pytest.mark.parametrize("event", [
    StartNextFrame(),
    PotBall(RED),
    PotReds(2),
    EndTurn(),
    Foul(4),
    ConcedeFrame(),
    StartFreeBall(),
])
def test_nothing_moves_after_match_over(event):
    state = play(create_state(best_of=1), ConcedeFrame())
    assert state.phase == Phase.MATCH_OVER

    assert apply_event(state, event) is state


def test_reset_match():
    state = play(create_state(best_of=1), ConcedeFrame())

    state = apply_event(state, ResetMatch())

    assert state.phase == Phase.REDS_AVAILABLE
    assert state.match_winner is None
    assert state.frames_won == {P1: 0, P2: 0}
    assert state.frame_history == []
    assert state.player_names == {P1: "Alice", P2: "Bob"}


# ---------- POINTS REMAINING ----------

def test_points_remaining_progression():
    state = create_state()
    assert points_remaining(state) == 15 * 8 + 27

    state = apply_event(state, PotReds(15))
    assert points_remaining(state) == 27

    state = apply_event(state, PotBall(BLACK))
    assert state.phase == Phase.COLORS_SEQUENCE
    assert points_remaining(state) == 27

    state = apply_event(state, PotBall(YELLOW))
    assert points_remaining(state) == 25
    assert state.points_remaining == 25


def test_points_remaining_zero_after_frame():
    state = apply_event(create_state(), ConcedeFrame())

    assert points_remaining(state) == 0
