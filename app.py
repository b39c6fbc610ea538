# app.py
import logging
from typing import List, Optional

from config import AppConfig
from midi.parser import LoadedMidi
from notes.extract import sounding_notes
from notes.model import Note
from timeline.model import TimelineEntry
from timeline.scheduler import PlaybackCursor


class Player:
    """Headless playback monitor over a loaded piece.

    Host loops call update(dt) once per frame and then read entry,
    sounding notes and the notes that started during that frame.
    """
    def __init__(self, cfg: AppConfig, loaded: LoadedMidi):
        self.cfg = cfg
        self.loaded = loaded
        self.cursor = PlaybackCursor(loaded.timeline)
        self.is_playing = False
        self.rate_idx = cfg.playback.rate_index

        # note-on 觸發索引（依 on.seconds 排序，不掃全曲）
        self._all_notes: List[Note] = sorted(
            (n for ns in loaded.notes_by_channel for n in ns),
            key=lambda n: (n.on.seconds, n.channel, n.key))
        self._next_on_idx = 0

    @property
    def entry(self) -> TimelineEntry:
        return self.cursor.entry

    @property
    def rate(self) -> float:
        return self.cfg.playback.playback_rates[self.rate_idx]

    def cycle_rate(self) -> float:
        self.rate_idx = (self.rate_idx + 1) % len(self.cfg.playback.playback_rates)
        return self.rate

    def toggle(self):
        """Play from the top, or stop and rewind."""
        self.is_playing = not self.is_playing
        self.cursor.reset()
        self._next_on_idx = 0
        logging.info("playback %s", "started" if self.is_playing else "stopped")

    def update(self, dt: float) -> List[Note]:
        """Advance by dt seconds of wall time; returns notes that began in this step."""
        if not self.is_playing:
            return []
        self.cursor.step(dt * self.rate)
        started: List[Note] = []
        tol = self.cfg.playback.start_tolerance
        while self._next_on_idx < len(self._all_notes) and \
              self._all_notes[self._next_on_idx].on.seconds <= self.cursor.time + tol:
            started.append(self._all_notes[self._next_on_idx])
            self._next_on_idx += 1
        if self.cursor.finished:
            # 播完：回到停止狀態並倒帶到開頭
            logging.info("playback finished at %s", self.entry.position_text)
            self.is_playing = False
            self.cursor.reset()
            self._next_on_idx = 0
        return started

    def sounding(self, channel: Optional[int] = None) -> List[List[Note]]:
        per_ch = sounding_notes(self.loaded.notes_by_channel, self.entry.tick)
        if channel is not None:
            return [per_ch[channel]]
        return per_ch

    def status_line(self) -> str:
        e = self.entry
        num, den = e.time_signature[0], e.time_signature[1]
        return (f"{e.position_text}  {e.seconds:7.3f}s  "
                f"BPM {e.tempo_bpm:6.2f}  {num}/{den}  "
                f"SPEED {int(self.rate * 100)}%  {'PLAY' if self.is_playing else 'STOP'}")
