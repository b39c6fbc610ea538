# ========================= config.py =========================
from dataclasses import dataclass, field
from typing import List, Tuple

@dataclass
class LoaderConfig:
    default_tempo_bpm: float = 120.0                # 第一個 set_tempo 之前
    default_time_signature: Tuple[int, int, int, int] = (4, 4, 24, 8)
    split_at_measures: bool = True
    strict_notes: bool = False                      # True: 未關閉的音直接報錯

@dataclass
class PlaybackConfig:
    playback_rates: List[float] = field(default_factory=lambda: [0.5, 0.75, 1.0, 1.25, 1.5])
    rate_index: int = 2  # 100%
    start_tolerance: float = 0.004

@dataclass
class AppConfig:
    loader: LoaderConfig = field(default_factory=LoaderConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
