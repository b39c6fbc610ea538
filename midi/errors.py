# midi/errors.py

class MidiLoadError(Exception):
    """Base class for every failure raised while loading a MIDI buffer."""


class MalformedFileError(MidiLoadError):
    """The byte stream is not a valid Standard MIDI File."""


class UnsupportedTimingError(MidiLoadError):
    """Division is SMPTE-based; only ticks-per-quarter-note is handled."""


class UnresolvedNoteError(MidiLoadError):
    """A note-on was never closed before its track ended.

    Only raised in strict mode; by default such notes are dropped.
    """
    def __init__(self, channel: int, key: int, at_tick: int):
        super().__init__(f"note {key} on channel {channel} opened at tick {at_tick} was never closed")
        self.channel = channel
        self.key = key
        self.at_tick = at_tick
