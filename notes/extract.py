# notes/extract.py
import logging
from dataclasses import replace
from typing import List, Sequence, Tuple

from midi.errors import UnresolvedNoteError
from midi.events import TrackEvent, NoteOn, NoteOff, EndOfTrack, is_release
from notes.model import Note
from timeline.model import Timeline

CHANNELS = 16


def extract_notes(tracks: Sequence[Sequence[Tuple[int, TrackEvent]]],
                  timeline: Timeline,
                  strict: bool = False) -> List[List[Note]]:
    """Pair note-on / note-off per channel and key, one list per channel.

    Releases close the newest still-open note with the same key, so
    overlapping same-key notes pair innermost first. Releases with no open
    note are ignored. Notes left open at the end of a track are dropped,
    or raise UnresolvedNoteError when strict.
    """
    by_channel: List[List[Note]] = [[] for _ in range(CHANNELS)]
    dropped = 0

    for ti, track in enumerate(tracks):
        # 每個 channel 的未關閉音：存放 by_channel 內的索引
        open_idx: List[List[int]] = [[] for _ in range(CHANNELS)]
        acc = 0
        for delta, ev in track:
            acc += delta
            if isinstance(ev, EndOfTrack):
                break
            if not isinstance(ev, (NoteOn, NoteOff)):
                continue
            ch = ev.channel
            notes = by_channel[ch]
            if is_release(ev):
                stack = open_idx[ch]
                for j in range(len(stack) - 1, -1, -1):
                    n = notes[stack[j]]
                    if n.key == ev.key:
                        off = timeline.at_tick(acc)
                        notes[stack[j]] = replace(n, off=off, duration_ticks=off.tick - n.on.tick)
                        del stack[j]
                        break
                else:
                    logging.debug("track %d: unmatched release key=%d ch=%d at tick %d", ti, ev.key, ch, acc)
            else:
                notes.append(Note.opened(timeline.at_tick(acc), ev.key, ev.velocity, ch))
                open_idx[ch].append(len(notes) - 1)

        for ch, stack in enumerate(open_idx):
            for j in stack:
                n = by_channel[ch][j]
                if strict:
                    raise UnresolvedNoteError(ch, n.key, n.on.tick)
                dropped += 1

    if dropped:
        logging.warning("dropped %d note(s) without a matching note-off", dropped)
    out = [[n for n in notes if n.is_closed] for notes in by_channel]
    for notes in out:
        notes.sort(key=lambda n: (n.on.tick, n.key))
    return out


def sounding_notes(notes_by_channel: Sequence[Sequence[Note]], tick: int) -> List[List[Note]]:
    """Per channel, the notes with on.tick <= tick <= off.tick."""
    return [[n for n in notes if n.is_sounding_at(tick)] for notes in notes_by_channel]
