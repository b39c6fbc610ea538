# timeline/model.py
from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

DEFAULT_BPM = 120.0
DEFAULT_TIME_SIGNATURE = (4, 4, 24, 8)  # (num, den, clocks_per_click, 32nds_per_quarter)


@dataclass(frozen=True)
class TempoChangeEvent:
    tempo_bpm: float
    seconds_per_tick: float
    at_tick: int

    @classmethod
    def from_microseconds(cls, mpqn: int, division: int, at_tick: int) -> "TempoChangeEvent":
        sec_per_quarter = mpqn * 1e-6
        return cls(tempo_bpm=60.0 / sec_per_quarter,
                   seconds_per_tick=sec_per_quarter / division,
                   at_tick=at_tick)


@dataclass(frozen=True)
class TimeSignatureChangeEvent:
    numerator: int
    denominator: int
    midi_clocks_per_click: int
    thirty_seconds_per_quarter: int
    at_tick: int

    @property
    def signature(self) -> Tuple[int, int, int, int]:
        return (self.numerator, self.denominator,
                self.midi_clocks_per_click, self.thirty_seconds_per_quarter)


@dataclass(frozen=True)
class TimelineEntry:
    tick: int
    seconds: float
    measure: int                # 1-based
    beat: int                   # 1-based
    ticks_into_beat: int
    ticks_into_measure: int
    measure_length_ticks: int
    beat_length_ticks: int
    tempo_bpm: float
    seconds_per_tick: float
    time_signature: Tuple[int, int, int, int]

    @property
    def position_text(self) -> str:
        """Transport style 'measure.beat.tick', e.g. 012.03.240."""
        return f"{self.measure:03d}.{self.beat:02d}.{self.ticks_into_beat:03d}"

    @property
    def beat_progress(self) -> float:
        return self.ticks_into_beat / self.beat_length_ticks

    @property
    def measure_progress(self) -> float:
        return self.ticks_into_measure / self.measure_length_ticks


class Timeline:
    """Read-only per-tick table, index == tick."""
    def __init__(self, entries: List[TimelineEntry], division: int):
        self.entries = entries
        self.division = division
        self.seconds: List[float] = [e.seconds for e in entries]  # bisect 用
        self._bounds: Dict[int, Tuple[int, int]] = {}
        for e in entries:
            first, _ = self._bounds.get(e.measure, (e.tick, e.tick))
            self._bounds[e.measure] = (first, e.tick)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, i):
        return self.entries[i]

    def __iter__(self) -> Iterator[TimelineEntry]:
        return iter(self.entries)

    @property
    def last(self) -> TimelineEntry:
        return self.entries[-1]

    @property
    def duration(self) -> float:
        return self.entries[-1].seconds

    @property
    def measure_count(self) -> int:
        return self.entries[-1].measure

    def at_tick(self, tick: int) -> TimelineEntry:
        if tick < 0 or tick >= len(self.entries):
            raise IndexError(f"tick {tick} outside timeline [0, {len(self.entries) - 1}]")
        return self.entries[tick]

    def measure_bounds(self, measure: int) -> Tuple[int, int]:
        """(first_tick, last_tick) covered by a measure inside the table."""
        return self._bounds[measure]
