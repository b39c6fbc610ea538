import pytest

from app import Player
from config import AppConfig, PlaybackConfig
from midi.parser import load_midi
from timeline.scheduler import resolve_position, PlaybackCursor


@pytest.fixture
def loaded(simple_song):
    return load_midi(simple_song)


def test_resolve_clamps_and_exact_match(loaded):
    tl = loaded.timeline
    assert resolve_position(tl, -1.0) is tl[0]
    assert resolve_position(tl, 0.0) is tl[0]
    assert resolve_position(tl, 999.0) is tl.last
    exact = tl[1234]
    assert resolve_position(tl, exact.seconds) is exact
    # just before the next tick still resolves to the previous one
    assert resolve_position(tl, tl[1235].seconds - 1e-9).tick == 1234


def test_cursor_steps_and_finishes(loaded):
    cur = PlaybackCursor(loaded.timeline)
    assert cur.step(0.5005).tick == 480
    assert not cur.finished
    cur.step(10.0)
    assert cur.finished
    assert cur.entry is loaded.timeline.last
    cur.reset()
    assert cur.entry.tick == 0 and cur.time == 0.0


def test_player_reports_started_and_sounding_notes(loaded):
    p = Player(AppConfig(), loaded)
    assert p.update(0.1) == []          # stopped
    p.toggle()
    assert p.is_playing
    started = p.update(0.0)
    assert [n.display_name for n in started] == ["C3"]
    assert [n.key for n in p.sounding()[0]] == [60]

    # tick 1900 = 1.979 s, E3 starts
    started = p.update(1.98)
    assert [(n.key, n.on.tick) for n in started] == [(64, 1900)]
    assert p.entry.measure == 1
    assert p.sounding(channel=0) == [[n for n in loaded.notes_by_channel[0] if n.on.tick == 1900]]

    started = p.update(0.1)
    assert [(n.key, n.on.tick) for n in started] == [(64, 1920)]
    assert p.entry.measure == 2

    p.update(100.0)
    assert not p.is_playing
    assert p.entry is loaded.timeline[0] and p.cursor.time == 0.0
    # rewound: starting again replays from the first note
    p.toggle()
    assert [n.on.tick for n in p.update(0.0)] == [0]


def test_player_rate_and_status(loaded):
    p = Player(AppConfig(playback=PlaybackConfig(rate_index=4)), loaded)
    assert p.rate == 1.5
    p.toggle()
    p.update(1.0)
    assert p.cursor.time == pytest.approx(1.5)
    assert p.cycle_rate() == 0.5
    line = p.status_line()
    assert "BPM 120.00" in line and "4/4" in line and "SPEED 50%" in line and "PLAY" in line
    p.toggle()
    assert not p.is_playing and p.entry.tick == 0
