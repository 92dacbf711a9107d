class ScoreboardError(Exception):
    pass


class InvalidEventError(ScoreboardError, ValueError):
    pass


class SnapshotError(ScoreboardError, ValueError):
    pass


class MatchNotFinishedError(ScoreboardError):
    pass
