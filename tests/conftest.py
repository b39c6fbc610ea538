# tests/conftest.py
import io
import sys, os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import mido
import pytest


def smf_bytes(tracks, ticks_per_beat=480, type=1) -> bytes:
    """Serialize tracks given as lists of mido messages (delta times in .time)."""
    mid = mido.MidiFile(type=type, ticks_per_beat=ticks_per_beat)
    for msgs in tracks:
        t = mido.MidiTrack()
        t.extend(msgs)
        mid.tracks.append(t)
    buf = io.BytesIO()
    mid.save(file=buf)
    return buf.getvalue()


def on(note, time=0, velocity=100, channel=0):
    return mido.Message('note_on', note=note, velocity=velocity, channel=channel, time=time)


def off(note, time=0, channel=0):
    return mido.Message('note_off', note=note, velocity=0, channel=channel, time=time)


def tempo(bpm, time=0):
    return mido.MetaMessage('set_tempo', tempo=mido.bpm2tempo(bpm), time=time)


def timesig(num, den, time=0):
    return mido.MetaMessage('time_signature', numerator=num, denominator=den, time=time)


def eot(time=0):
    return mido.MetaMessage('end_of_track', time=time)


@pytest.fixture
def simple_song() -> bytes:
    """4/4, 120 BPM, two measures; ch0 C4 crosses the bar line at 1920."""
    conductor = [tempo(120), timesig(4, 4), eot(3840)]
    piano = [on(60, 0), off(60, 480), on(64, 1420), off(64, 200), eot(1740)]
    return smf_bytes([conductor, piano])
