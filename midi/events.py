# midi/events.py
from dataclasses import dataclass
from typing import Union

import mido


@dataclass(frozen=True)
class NoteOn:
    channel: int
    key: int
    velocity: int


@dataclass(frozen=True)
class NoteOff:
    channel: int
    key: int
    velocity: int = 0


@dataclass(frozen=True)
class TempoChange:
    microseconds_per_quarter: int


@dataclass(frozen=True)
class TimeSignatureChange:
    numerator: int
    denominator: int            # 實際拍值 (4 = quarter)，非指數
    midi_clocks_per_click: int
    thirty_seconds_per_quarter: int


@dataclass(frozen=True)
class EndOfTrack:
    pass


@dataclass(frozen=True)
class Other:
    type: str


TrackEvent = Union[NoteOn, NoteOff, TempoChange, TimeSignatureChange, EndOfTrack, Other]


def classify(msg: mido.Message) -> TrackEvent:
    """Map a mido message onto the closed set of event kinds the loader cares about.

    A note_on with velocity 0 stays a NoteOn here; pairing treats it as a release.
    """
    t = msg.type
    if t == 'note_on':
        return NoteOn(msg.channel, msg.note, msg.velocity)
    if t == 'note_off':
        return NoteOff(msg.channel, msg.note, msg.velocity)
    if t == 'set_tempo':
        return TempoChange(msg.tempo)
    if t == 'time_signature':
        return TimeSignatureChange(msg.numerator, msg.denominator,
                                   msg.clocks_per_click, msg.notated_32nd_notes_per_beat)
    if t == 'end_of_track':
        return EndOfTrack()
    return Other(t)


def is_release(ev: TrackEvent) -> bool:
    return isinstance(ev, NoteOff) or (isinstance(ev, NoteOn) and ev.velocity == 0)
