# timeline/scheduler.py
from bisect import bisect_right
from timeline.model import Timeline, TimelineEntry


def resolve_position(timeline: Timeline, elapsed: float) -> TimelineEntry:
    """Latest entry whose seconds <= elapsed.

    Clamps to the first entry before the start and to the last one past the end.
    """
    i = bisect_right(timeline.seconds, elapsed) - 1
    if i < 0:
        return timeline[0]
    return timeline[i]


class PlaybackCursor:
    """Advances wall-clock time and tracks the timeline entry in effect.
    Consumers call step() once per frame and read .entry.
    """
    def __init__(self, timeline: Timeline):
        self.timeline = timeline
        self.time = 0.0
        self.entry = timeline[0]

    def step(self, dt: float) -> TimelineEntry:
        self.time += dt
        self.entry = resolve_position(self.timeline, self.time)
        return self.entry

    def seek(self, t: float) -> TimelineEntry:
        self.time = max(0.0, t)
        self.entry = resolve_position(self.timeline, self.time)
        return self.entry

    def reset(self):
        self.seek(0.0)

    @property
    def finished(self) -> bool:
        return self.time >= self.timeline.duration
