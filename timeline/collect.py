# timeline/collect.py
import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from midi.events import TrackEvent, TempoChange, TimeSignatureChange, EndOfTrack
from timeline.model import TempoChangeEvent, TimeSignatureChangeEvent

Track = Sequence[Tuple[int, TrackEvent]]


@dataclass
class ControlEvents:
    tempos: List[TempoChangeEvent] = field(default_factory=list)
    time_signatures: List[TimeSignatureChangeEvent] = field(default_factory=list)
    last_tick: int = 0


def collect_control_events(tracks: Sequence[Track], division: int) -> ControlEvents:
    """Scan every track for tempo / time signature changes at absolute ticks.

    Conductor data may sit in any track, so nothing is assumed about track 0.
    Results are sorted by tick; the sort is stable, so for equal ticks the
    later-recorded event stays later and wins when applied.
    """
    out = ControlEvents()
    for i, track in enumerate(tracks):
        acc = 0
        ended = False
        for delta, ev in track:
            acc += delta
            if isinstance(ev, TempoChange):
                if ev.microseconds_per_quarter <= 0:
                    logging.warning("track %d: ignoring set_tempo of %d us/quarter at tick %d",
                                    i, ev.microseconds_per_quarter, acc)
                    continue
                out.tempos.append(TempoChangeEvent.from_microseconds(ev.microseconds_per_quarter, division, acc))
            elif isinstance(ev, TimeSignatureChange):
                out.time_signatures.append(TimeSignatureChangeEvent(
                    ev.numerator, ev.denominator, ev.midi_clocks_per_click,
                    ev.thirty_seconds_per_quarter, acc))
            elif isinstance(ev, EndOfTrack):
                ended = True
                break
        if not ended:
            logging.debug("track %d has no end_of_track, using last event tick %d", i, acc)
        out.last_tick = max(out.last_tick, acc)

    out.tempos.sort(key=lambda e: e.at_tick)
    out.time_signatures.sort(key=lambda e: e.at_tick)
    logging.debug("collected %d tempo / %d time signature changes, last_tick=%d",
                  len(out.tempos), len(out.time_signatures), out.last_tick)
    return out
