from typing import Iterable, List

from snooker.engine import ScoreEngine, new_match
from snooker.events import TimedEvent
from snooker.models import MatchSetup, MatchSnapshot


def build_match_timeline(setup: MatchSetup, events: Iterable[TimedEvent]) -> List[MatchSnapshot]:
    """
    Replays a match from scratch using timed events.
    Returns one snapshot per event, stopping once the match is over.
    Does NOT mutate external state.
    """
    engine = ScoreEngine(new_match(setup))

    timeline: List[MatchSnapshot] = []

    for timed in events:
        snapshot = engine.process_event(timed)
        timeline.append(snapshot)

        if snapshot.is_finished:
            break

    return timeline
