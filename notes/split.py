# notes/split.py
from dataclasses import replace
from typing import List, Sequence

from notes.model import Note
from timeline.model import Timeline


def ends_on_next_downbeat(n: Note) -> bool:
    """Note stops exactly on the first tick of the following measure."""
    off = n.off
    return (off.measure == n.on.measure + 1
            and off.beat == 1 and off.ticks_into_measure == 0)


def split_note(n: Note, timeline: Timeline) -> List[Note]:
    """Cut a closed note into fragments that each stay inside one measure.

    A non-final fragment ends on its measure's last tick and covers it, so its
    duration is off.tick + 1 - on.tick; the final fragment ends at the original
    off. Fragment durations add up to the original duration.
    """
    if n.on.measure == n.off.measure or ends_on_next_downbeat(n):
        return [n]

    out: List[Note] = []
    cur_on = n.on
    for m in range(n.on.measure, n.off.measure):
        _, last = timeline.measure_bounds(m)
        end = timeline[last]
        out.append(replace(n, on=cur_on, off=end, duration_ticks=end.tick + 1 - cur_on.tick))
        cur_on = timeline[last + 1]
    out.append(replace(n, on=cur_on, duration_ticks=n.off.tick - cur_on.tick))
    return out


def split_notes_at_measures(notes_by_channel: Sequence[Sequence[Note]], timeline: Timeline) -> List[List[Note]]:
    out: List[List[Note]] = []
    for notes in notes_by_channel:
        arr: List[Note] = []
        for n in notes:
            if n.is_closed:
                arr.extend(split_note(n, timeline))
        arr.sort(key=lambda x: (x.on.tick, x.key))
        out.append(arr)
    return out
