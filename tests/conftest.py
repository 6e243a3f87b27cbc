from datetime import datetime, timedelta

import pytest

from unwrapped_stats.models.history import PlayEvent

BASE_TIME = datetime(2021, 3, 1, 12, 0)  # a Monday in March


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def play():
    """Build a PlayEvent ending `seconds` after BASE_TIME."""
    def _play(artist: str, track: str, ms_played: int, seconds: float = 0) -> PlayEvent:
        return PlayEvent(
            end_time=BASE_TIME + timedelta(seconds=seconds),
            artist_name=artist,
            track_name=track,
            ms_played=ms_played,
        )
    return _play


@pytest.fixture
def record():
    """Build a raw account-data export record."""
    def _record(artist, track, ms_played, end_time="2021-03-01 12:00"):
        return {
            "endTime": end_time,
            "artistName": artist,
            "trackName": track,
            "msPlayed": ms_played,
        }
    return _record
