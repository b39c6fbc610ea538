# notes/model.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from timeline.model import TimelineEntry


class PitchClass(Enum):
    C = "C"
    C_SHARP = "C#"
    D = "D"
    D_SHARP = "D#"
    E = "E"
    F = "F"
    F_SHARP = "F#"
    G = "G"
    G_SHARP = "G#"
    A = "A"
    A_SHARP = "A#"
    B = "B"

    @classmethod
    def from_key(cls, key: int) -> "PitchClass":
        return _PITCH_ORDER[key % 12]


_PITCH_ORDER = list(PitchClass)


@dataclass(frozen=True)
class Note:
    on: TimelineEntry                  # snapshot, not an index into the timeline
    off: Optional[TimelineEntry]
    duration_ticks: Optional[int]
    key: int                           # MIDI note number
    pitch_class: PitchClass
    octave_yamaha: int                 # C3 = 60
    octave_general_midi: int           # C4 = 60
    display_name: str
    velocity: int
    channel: int

    @classmethod
    def opened(cls, on: TimelineEntry, key: int, velocity: int, channel: int) -> "Note":
        pc = PitchClass.from_key(key)
        oct_y = key // 12 - 2
        return cls(on=on, off=None, duration_ticks=None, key=key, pitch_class=pc,
                   octave_yamaha=oct_y, octave_general_midi=key // 12 - 1,
                   display_name=f"{pc.value}{oct_y}", velocity=velocity, channel=channel)

    @property
    def is_closed(self) -> bool:
        return self.off is not None

    @property
    def on_ticks_into_measure(self) -> int:
        return self.on.ticks_into_measure

    def is_sounding_at(self, tick: int) -> bool:
        return self.off is not None and self.on.tick <= tick <= self.off.tick
