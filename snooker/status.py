from snooker.models import COLORS_IN_SEQUENCE, MatchState, Phase, Player


def _next_ball_hint(state: MatchState) -> str:
    if state.free_ball_active:
        return "Free ball: pot any colour."
    if state.phase == Phase.REDS_AVAILABLE:
        if state.waiting_for_color:
            return "Pot a colour."
        hint = "Pot a Red."
    else:
        hint = f"Pot {COLORS_IN_SEQUENCE[state.next_color_index].name}."
    if state.free_ball_available:
        hint += " Free ball available."
    return hint


def status_message(state: MatchState) -> str:
    """One line for the operator: whose turn and what is on, or the result."""
    names = state.player_names

    if state.phase == Phase.MATCH_OVER:
        winner = names[state.match_winner]
        return (
            f"MATCH OVER! {winner} wins the match "
            f"{state.frames_won[Player.PLAYER_1]} - {state.frames_won[Player.PLAYER_2]} "
            f"(Best of {state.best_of})."
        )

    if state.phase == Phase.FRAME_OVER:
        last = state.frame_history[-1]
        score = f"{last.scores[Player.PLAYER_1]} - {last.scores[Player.PLAYER_2]}"
        if state.frame_winner is None:
            return f"Frame {last.frame_number} drawn {score}. Re-spotted black is not played."
        return f"{names[state.frame_winner]} wins frame {last.frame_number} ({score})."

    message = f"{names[state.current_turn]} at the table. {_next_ball_hint(state)}"
    if state.current_break:
        message += f" Break: {state.current_break}"
    return message
