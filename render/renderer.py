from bisect import bisect_right
from typing import Dict, List

import cv2
import numpy as np

from snooker.models import MatchSnapshot, Player


class ScoreboardRenderer:

    def __init__(
        self,
        input_path: str,
        output_path: str,
        timeline: List[MatchSnapshot],
        names: Dict[Player, str],
    ):
        self.input_path = input_path
        self.output_path = output_path
        self.timeline = timeline
        self.names = names

        if not self.timeline:
            raise ValueError("Timeline cannot be empty")

        self._times = [s.timestamp for s in timeline]

    def snapshot_at(self, seconds: float) -> MatchSnapshot:
        """Snapshot on screen at ``seconds``; the first one shows until its event happens."""
        index = bisect_right(self._times, seconds) - 1
        return self.timeline[max(index, 0)]

    def render(self) -> int:
        """Write the overlaid video and return the number of frames written."""
        cap = cv2.VideoCapture(self.input_path)

        if not cap.isOpened():
            raise RuntimeError("Cannot open input video")

        fps = cap.get(cv2.CAP_PROP_FPS)
        size = (
            int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        out = cv2.VideoWriter(self.output_path, cv2.VideoWriter_fourcc(*"mp4v"), fps, size)

        written = 0
        try:
            ok, frame = cap.read()
            while ok:
                out.write(draw_scoreboard(frame, self.snapshot_at(written / fps), self.names))
                written += 1
                ok, frame = cap.read()
        finally:
            cap.release()
            out.release()

        return written


# ----------------------------------------------------
# DRAWING
# ----------------------------------------------------

WHITE = (255, 255, 255)
YELLOW = (0, 215, 255)
GREEN = (0, 255, 0)


def draw_scoreboard(frame: np.ndarray, state: MatchSnapshot, names: Dict[Player, str]) -> np.ndarray:
    """Draw the scoreboard box in the bottom-right corner, in place."""
    height, width = frame.shape[:2]

    scoreboard_width = 360
    scoreboard_height = 130
    margin = 20

    x1 = width - scoreboard_width - margin
    y1 = height - scoreboard_height - margin
    x2 = width - margin
    y2 = height - margin

    overlay = frame.copy()
    cv2.rectangle(overlay, (x1, y1), (x2, y2), (0, 0, 0), -1)
    alpha = 0.6
    cv2.addWeighted(overlay, alpha, frame, 1 - alpha, 0, frame)

    font = cv2.FONT_HERSHEY_SIMPLEX

    rows = (
        (Player.PLAYER_1, state.score_1, state.frames_1, y1 + 30),
        (Player.PLAYER_2, state.score_2, state.frames_2, y1 + 60),
    )
    for player, score, frames, y in rows:
        colour = YELLOW if player == state.current_turn and not state.is_finished else WHITE
        cv2.putText(frame, names[player][:16], (x1 + 15, y), font, 0.6, colour, 2)
        cv2.putText(frame, f"({frames})", (x2 - 120, y), font, 0.6, WHITE, 2)
        cv2.putText(frame, str(score), (x2 - 60, y), font, 0.8, WHITE, 2)

    info = f"Frame {state.frame_number}  Break {state.current_break}"
    cv2.putText(frame, info, (x1 + 15, y1 + 90), font, 0.5, WHITE, 1)

    table = f"Reds {state.remaining_reds}  Remaining {state.points_remaining}"
    cv2.putText(frame, table, (x1 + 15, y1 + 115), font, 0.5, WHITE, 1)

    if state.winner is not None:
        cv2.putText(frame, f"Winner: {names[state.winner]}", (x1 + 15, y1 - 10), font, 0.7, GREEN, 2)

    return frame
