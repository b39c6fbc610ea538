# main.py
import sys, os
sys.path.append(os.path.dirname(__file__))  # 確保能找到 config.py

import argparse
import logging
from logging.handlers import RotatingFileHandler

from config import AppConfig, LoaderConfig
from app import Player
from midi.errors import MidiLoadError
from midi.parser import load_midi_file
from utils.crashlog import install_excepthook, log_exception, log_dir

FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def _init_logging(verbose: bool):
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=FMT, encoding="utf-8")
    try:
        fh = RotatingFileHandler(os.path.join(log_dir(), "app.log"),
                                 maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
    except OSError:
        logging.warning("file logging disabled, logs/ is not writable")
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(FMT))
    logging.getLogger().addHandler(fh)

def _positive_float(s: str) -> float:
    v = float(s)
    if v <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {s}")
    return v

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Build the tick timeline and per-channel notes of a MIDI file")
    ap.add_argument('path', help="Standard MIDI File (.mid)")
    ap.add_argument('--at', type=float, action='append', default=[], metavar='SECONDS',
                    help="print the position and sounding notes at this playback time (repeatable)")
    ap.add_argument('--dump', type=int, default=0, metavar='N', help="print the first N timeline rows")
    ap.add_argument('--no-split', action='store_true', help="keep measure-crossing notes whole")
    ap.add_argument('--strict', action='store_true', help="fail on notes that are never released")
    ap.add_argument('--bpm', type=_positive_float, default=120.0, help="tempo before the first tempo event")
    ap.add_argument('-v', '--verbose', action='store_true')
    return ap

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _init_logging(args.verbose)

    cfg = AppConfig(loader=LoaderConfig(
        default_tempo_bpm=args.bpm,
        split_at_measures=not args.no_split,
        strict_notes=args.strict,
    ))
    try:
        loaded = load_midi_file(args.path, cfg.loader)
    except (OSError, MidiLoadError) as e:
        try:
            path = log_exception("load_midi_file", e)
        except OSError:
            path = "logs/ 無法寫入"
        logging.error("無法載入 %s: %s (詳見 %s)", args.path, e, path)
        return 1

    tl = loaded.timeline
    print(f"{args.path}: format {loaded.header.format}, {loaded.header.division} ticks/quarter, "
          f"{loaded.header.track_count} tracks")
    print(f"  {len(tl)} ticks, {tl.measure_count} measures, {tl.duration:.3f} s, "
          f"{len(loaded.tempo_changes)} tempo / {len(loaded.time_signature_changes)} time signature changes")
    for ch, notes in enumerate(loaded.notes_by_channel):
        if notes:
            print(f"  ch{ch + 1}: {len(notes)} notes")

    for e in tl.entries[:args.dump]:
        print(f"  {e.tick:>7} {e.seconds:10.4f} {e.position_text}  bpm={e.tempo_bpm:.2f} "
              f"sig={e.time_signature[0]}/{e.time_signature[1]}")

    player = Player(cfg, loaded)
    for t in args.at:
        entry = player.cursor.seek(t)
        print(f"@{t:.3f}s -> {player.status_line()}")
        for ch, notes in enumerate(player.sounding()):
            if notes:
                names = " ".join(f"({n.display_name}, vel {n.velocity})" for n in notes)
                print(f"    ch{ch + 1}: {names}")
        logging.debug("resolved %.3fs to tick %d", t, entry.tick)
    return 0

if __name__ == '__main__':
    install_excepthook()
    sys.exit(main())
