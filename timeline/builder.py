# timeline/builder.py
import logging
from typing import List, Sequence, Tuple

from timeline.model import (
    Timeline, TimelineEntry, TempoChangeEvent, TimeSignatureChangeEvent,
    DEFAULT_BPM, DEFAULT_TIME_SIGNATURE,
)


def beat_length(division: int, denominator: int) -> int:
    return max(1, division * 4 // denominator)


def build_timeline(tempos: Sequence[TempoChangeEvent],
                   time_signatures: Sequence[TimeSignatureChangeEvent],
                   division: int,
                   last_tick: int,
                   default_bpm: float = DEFAULT_BPM,
                   default_signature: Tuple[int, int, int, int] = DEFAULT_TIME_SIGNATURE) -> Timeline:
    """Materialize one TimelineEntry for every tick in [0, last_tick].

    Both event lists must be sorted by at_tick. Every event with
    at_tick <= tick is applied before the entry for that tick is emitted,
    so of several events on one tick the last one wins.
    """
    bpm = default_bpm
    spt = 60.0 / bpm / division
    sig = tuple(default_signature)

    # 以 tempo 區段為單位計算秒數，避免逐 tick 累加的浮點誤差
    seg_tick, seg_seconds = 0, 0.0
    measure, tim = 1, 0
    ti = si = 0
    entries: List[TimelineEntry] = []

    for tick in range(last_tick + 1):
        seconds = seg_seconds + (tick - seg_tick) * spt

        while ti < len(tempos) and tempos[ti].at_tick <= tick:
            if spt != tempos[ti].seconds_per_tick:
                seg_tick, seg_seconds = tick, seconds
            bpm, spt = tempos[ti].tempo_bpm, tempos[ti].seconds_per_tick
            ti += 1

        sig_changed = False
        while si < len(time_signatures) and time_signatures[si].at_tick <= tick:
            sig = time_signatures[si].signature
            sig_changed = True
            si += 1

        blen = beat_length(division, sig[1])
        mlen = blen * sig[0]
        if sig_changed and tim >= mlen:
            # 拍號在小節中途變短：從這個 tick 開新小節
            measure += 1
            tim = 0

        entries.append(TimelineEntry(
            tick=tick,
            seconds=seconds,
            measure=measure,
            beat=tim // blen + 1,
            ticks_into_beat=tim % blen,
            ticks_into_measure=tim,
            measure_length_ticks=mlen,
            beat_length_ticks=blen,
            tempo_bpm=bpm,
            seconds_per_tick=spt,
            time_signature=sig,
        ))

        tim += 1
        if tim >= mlen:
            tim = 0
            measure += 1

    logging.debug("timeline built: %d ticks, %d measures, %.3f s",
                  len(entries), entries[-1].measure, entries[-1].seconds)
    return Timeline(entries, division)
