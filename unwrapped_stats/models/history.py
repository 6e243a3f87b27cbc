"""Domain models for streaming history play events"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Tuple

# (artist_name, track_name), exact match after trimming
TrackKey = Tuple[str, str]

@dataclass(frozen=True)
class PlayEvent:
    """A single normalized play from the streaming history"""
    end_time: datetime
    artist_name: str
    track_name: str
    ms_played: int

    @property
    def track_key(self) -> TrackKey:
        return (self.artist_name, self.track_name)

class SkipVerdict(Enum):
    """Outcome of classifying a short play"""
    REAL_SKIP = "real_skip"
    RESTART = "restart"
