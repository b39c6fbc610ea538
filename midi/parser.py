# midi/parser.py
import io
import logging
import struct
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import mido

from config import LoaderConfig
from midi.errors import MalformedFileError, UnsupportedTimingError
from midi.events import TrackEvent, classify
from notes.extract import extract_notes
from notes.model import Note
from notes.split import split_notes_at_measures
from timeline.builder import build_timeline
from timeline.collect import collect_control_events
from timeline.model import Timeline, TempoChangeEvent, TimeSignatureChangeEvent

Track = List[Tuple[int, TrackEvent]]

_DECODE_ERRORS = (OSError, EOFError, ValueError, KeyError, IndexError, struct.error)


@dataclass
class MidiHeader:
    format: int
    division: int       # ticks per quarter note
    track_count: int


@dataclass
class LoadedMidi:
    header: MidiHeader
    last_tick: int
    tempo_changes: List[TempoChangeEvent]
    time_signature_changes: List[TimeSignatureChangeEvent]
    timeline: Timeline
    notes_by_channel: List[List[Note]] = field(default_factory=list)

    @property
    def note_count(self) -> int:
        return sum(len(ns) for ns in self.notes_by_channel)


def parse_midi_bytes(data: bytes) -> Tuple[MidiHeader, List[Track]]:
    """Decode an SMF buffer into a header and (delta, event) tracks."""
    try:
        mid = mido.MidiFile(file=io.BytesIO(data))
    except _DECODE_ERRORS as e:
        raise MalformedFileError(f"cannot decode MIDI data: {e}") from e

    tpb = mid.ticks_per_beat
    # mido 以有號 short 讀 division，SMPTE 會變成負數
    if tpb <= 0 or tpb & 0x8000:
        raise UnsupportedTimingError(f"SMPTE division is not supported (raw={tpb})")

    tracks: List[Track] = []
    for i, mt in enumerate(mid.tracks):
        tracks.append([(msg.time, classify(msg)) for msg in mt])
        logging.debug("track %d has %d events", i, len(mt))
    return MidiHeader(mid.type, tpb, len(tracks)), tracks


def load_midi(data: bytes, cfg: Optional[LoaderConfig] = None) -> LoadedMidi:
    """Run the full pipeline: decode, collect, build timeline, extract, split."""
    cfg = cfg or LoaderConfig()
    header, tracks = parse_midi_bytes(data)
    ctrl = collect_control_events(tracks, header.division)
    timeline = build_timeline(ctrl.tempos, ctrl.time_signatures, header.division, ctrl.last_tick,
                              default_bpm=cfg.default_tempo_bpm,
                              default_signature=cfg.default_time_signature)
    notes = extract_notes(tracks, timeline, strict=cfg.strict_notes)
    if cfg.split_at_measures:
        before = sum(len(ns) for ns in notes)
        notes = split_notes_at_measures(notes, timeline)
        logging.debug("measure split: %d notes -> %d fragments", before, sum(len(ns) for ns in notes))

    loaded = LoadedMidi(header, ctrl.last_tick, ctrl.tempos, ctrl.time_signatures, timeline, notes)
    logging.info("MIDI loaded: format=%d division=%d tracks=%d ticks=%d notes=%d",
                 header.format, header.division, header.track_count, len(timeline), loaded.note_count)
    return loaded


def load_midi_file(path: str, cfg: Optional[LoaderConfig] = None) -> LoadedMidi:
    with open(path, "rb") as f:
        data = f.read()
    return load_midi(data, cfg)
