import argparse
import json
import logging
from pathlib import Path

from snooker.archive import append_to_history, build_completed_match
from snooker.config import ACTIVE_STATE_FILE, DEFAULT_BEST_OF, HISTORY_FILE
from snooker.exceptions import ScoreboardError
from snooker.match_session import MatchSession
from snooker.models import MatchSetup, Player
from snooker.status import status_message
from snooker.storage import save_state


def parse_args():
    ap = argparse.ArgumentParser(description="Replay a snooker event log and print the result.")
    ap.add_argument("--events", type=str, required=True, help="JSON list of timed event dicts")
    ap.add_argument("--player1", type=str, default="Player 1")
    ap.add_argument("--player2", type=str, default="Player 2")
    ap.add_argument("--best-of", type=int, default=DEFAULT_BEST_OF)
    ap.add_argument("--breaker", choices=[p.value for p in Player], default=Player.PLAYER_1.value)
    ap.add_argument("--save", type=str, default="", help=f"Write final state (e.g. {ACTIVE_STATE_FILE})")
    ap.add_argument("--archive", action="store_true", help=f"Append a finished match to {HISTORY_FILE}")
    return ap.parse_args()


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args()

    setup = MatchSetup(
        player1_name=args.player1,
        player2_name=args.player2,
        best_of=args.best_of,
        first_to_break=Player(args.breaker),
    )

    with open(args.events, "r", encoding="utf-8") as f:
        events = json.load(f)

    session = MatchSession(setup)
    try:
        session.load_events(events)
    except (ScoreboardError, ValueError) as e:
        print("❌ INVALID EVENT LOG:", e)
        raise SystemExit(1)

    state = session.state
    names = state.player_names

    print("\n==========================")
    print(f"{names[Player.PLAYER_1]} vs {names[Player.PLAYER_2]} (Best of {state.best_of})")
    print("==========================")

    for frame in state.frame_history:
        winner = names[frame.winner] if frame.winner else "drawn"
        print(
            f"Frame {frame.frame_number}: "
            f"{frame.scores[Player.PLAYER_1]} - {frame.scores[Player.PLAYER_2]} "
            f"(Winner: {winner}, high breaks "
            f"{frame.highest_breaks[Player.PLAYER_1]}/{frame.highest_breaks[Player.PLAYER_2]})"
        )

    print(status_message(state))
    print("==========================\n")

    if args.save:
        save_state(Path(args.save), state)
        print(f"Saved state: {args.save}")

    if args.archive:
        if state.match_winner is None:
            print("❌ Match not finished, nothing archived")
            raise SystemExit(1)
        record = build_completed_match(
            state,
            {Player.PLAYER_1: args.player1, Player.PLAYER_2: args.player2},
        )
        append_to_history(HISTORY_FILE, record)
        print(f"Archived match {record.id}")


if __name__ == "__main__":
    main()
