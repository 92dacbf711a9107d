from snooker.events import EndTurn, Foul, PotBall, TimedEvent
from snooker.models import BLACK, RED, MatchSetup, Player
from snooker.timeline import build_match_timeline
from render.renderer import ScoreboardRenderer


def main():

    setup = MatchSetup(player1_name="Higgins", player2_name="O'Sullivan", best_of=5)

    events = [
        TimedEvent(3.0, PotBall(RED)),
        TimedEvent(7.0, PotBall(BLACK)),
        TimedEvent(11.0, EndTurn()),
        TimedEvent(15.0, Foul(4)),
    ]

    timeline = build_match_timeline(setup, events)

    renderer = ScoreboardRenderer(
        input_path="input.mp4",
        output_path="output.mp4",
        timeline=timeline,
        names={Player.PLAYER_1: setup.player1_name, Player.PLAYER_2: setup.player2_name},
    )

    renderer.render()


if __name__ == "__main__":
    main()
