import logging
from typing import Dict, List

from snooker.engine import ScoreEngine, build_snapshot, new_match
from snooker.events import TimedEvent, event_from_dict, event_to_dict
from snooker.exceptions import InvalidEventError
from snooker.models import MatchSetup, MatchSnapshot, MatchState

logger = logging.getLogger(__name__)


def _decode(e: Dict) -> TimedEvent:
    if not isinstance(e, dict) or "timestamp" not in e:
        raise InvalidEventError("invalid event format")

    try:
        timestamp = float(e["timestamp"])
    except (TypeError, ValueError) as err:
        raise InvalidEventError(f"invalid timestamp: {e['timestamp']!r}") from err

    return TimedEvent(timestamp=timestamp, event=event_from_dict(e))


class MatchSession:
    """
    Single local match session.

    Responsibilities:
    - Manage one ScoreEngine instance
    - Bulk replay scoring events (atomic)
    - Apply live events one at a time
    - Store timeline snapshots
    - Export original events
    """

    def __init__(self, setup: MatchSetup):
        self._setup = setup
        self.reset()

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    @property
    def state(self) -> MatchState:
        return self._engine.state

    def load_events(self, events: List[Dict]) -> List[MatchSnapshot]:
        """
        Bulk load events from list of dicts.
        Atomic: if any event fails to decode -> no state mutation.
        """
        if not isinstance(events, list):
            raise InvalidEventError("events must be a list")

        timed_events = [_decode(e) for e in events]

        # stable sort keeps same-timestamp events in operator order
        timed_events.sort(key=lambda x: x.timestamp)

        temp_engine = ScoreEngine(new_match(self._setup))
        temp_timeline = [temp_engine.process_event(t) for t in timed_events]

        self._engine = temp_engine
        self._timeline = temp_timeline
        self._events = timed_events

        rejected = sum(1 for s in temp_timeline if not s.applied)
        logger.info(f"Loaded {len(timed_events)} events ({rejected} not applicable)")

        return list(self._timeline)

    def apply(self, event: Dict) -> MatchSnapshot:
        timed = _decode(event)
        snapshot = self._engine.process_event(timed)

        self._events.append(timed)
        self._timeline.append(snapshot)
        return snapshot

    def get_snapshot(self) -> MatchSnapshot:
        """Latest snapshot, or the opening scoreboard before any event."""
        if self._timeline:
            return self._timeline[-1]
        return build_snapshot(self.state, timestamp=0.0)

    def get_timeline(self) -> List[MatchSnapshot]:
        # snapshots are frozen, a shallow copy is enough
        return list(self._timeline)

    def export_events(self) -> List[Dict]:
        return [
            {"timestamp": t.timestamp, **event_to_dict(t.event)}
            for t in self._events
        ]

    def reset(self):
        self._engine = ScoreEngine(new_match(self._setup))
        self._timeline: List[MatchSnapshot] = []
        self._events: List[TimedEvent] = []
