"""Listening statistics aggregation"""
import logging
import math
from collections import Counter
from datetime import date
from typing import Callable, Dict, Iterable, List, Set, Tuple, TypeVar

from unwrapped_stats.classifier import SkipClassification, is_substantive
from unwrapped_stats.models.history import PlayEvent
from unwrapped_stats.models.report import (
    AggregateReport, ArtistSongCount, ArtistSongTally, ArtistTime, DayTime,
    MonthBucket, RestartArtist, SkippedArtist, SongCount, WeekdayBucket
)

logger = logging.getLogger(__name__)

TOP_N = 10
TOP_N_PER_ARTIST = 3

MS_PER_MINUTE = 60000
MS_PER_HOUR = 3600000

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December"
]

T = TypeVar('T')

def top(items: Iterable[T], metric: Callable[[T], float], limit: int = TOP_N) -> List[T]:
    """Highest `limit` items by metric, ties keeping their original order"""
    return sorted(items, key=metric, reverse=True)[:limit]

def percentage(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0

def round_rate(value: float) -> float:
    """Round half up to 2 decimals"""
    return math.floor(value * 100 + 0.5) / 100

class ListeningTally:
    """Keyed accumulators over substantive plays"""

    def __init__(self):
        self.total_ms = 0
        self.song_counts: Counter = Counter()
        self.artist_songs: Dict[str, Set[str]] = {}
        self.artist_time: Dict[str, int] = {}
        self.day_time: Dict[date, int] = {}
        self.weekday_time = [0] * len(WEEKDAYS)
        self.month_time = [0] * len(MONTHS)

    def add(self, event: PlayEvent) -> None:
        self.total_ms += event.ms_played
        self.song_counts[event.track_key] += 1
        self.artist_songs.setdefault(event.artist_name, set()).add(event.track_name)
        self.artist_time[event.artist_name] = self.artist_time.get(event.artist_name, 0) + event.ms_played
        day = event.end_time.date()
        self.day_time[day] = self.day_time.get(day, 0) + event.ms_played
        self.weekday_time[event.end_time.weekday()] += event.ms_played
        self.month_time[event.end_time.month - 1] += event.ms_played

def _buckets(names: List[str], totals: List[int]) -> List[Tuple[str, int, int, float]]:
    grand_total = sum(totals)
    return [
        (name, ms // MS_PER_MINUTE, ms // MS_PER_HOUR, percentage(ms, grand_total))
        for name, ms in zip(names, totals)
    ]

def _song_ranking(counts: Counter) -> List[SongCount]:
    return [
        SongCount(track_name=track_name, artist_name=artist_name, count=count)
        for (artist_name, track_name), count in top(counts.items(), lambda item: item[1])
    ]

def _songs_by_artist(counts: Counter) -> Dict[str, Tuple[ArtistSongTally, ...]]:
    """Top 3 tracks per artist, artists in order of first appearance"""
    per_artist: Dict[str, List[Tuple[str, int]]] = {}
    for (artist_name, track_name), count in counts.items():
        per_artist.setdefault(artist_name, []).append((track_name, count))
    return {
        artist_name: tuple(
            ArtistSongTally(track_name=track_name, count=count)
            for track_name, count in top(tracks, lambda item: item[1], TOP_N_PER_ARTIST)
        )
        for artist_name, tracks in per_artist.items()
    }

def _artist_counts(events: Iterable[PlayEvent]) -> Counter:
    return Counter(event.artist_name for event in events)

def _track_counts(events: Iterable[PlayEvent]) -> Counter:
    return Counter(event.track_key for event in events)

def aggregate(classification: SkipClassification) -> AggregateReport:
    """Build the AggregateReport from classified play events"""
    events = classification.events
    tally = ListeningTally()
    for event in events:
        if is_substantive(event):
            tally.add(event)

    # Denominator for per-artist skip/restart percentages: every retained play
    plays_per_artist = _artist_counts(events)
    retained = len(events)

    skips = classification.real_skips()
    restarts = classification.restarts()
    skipped_tracks: Counter = _track_counts(skips)
    restarted_tracks: Counter = _track_counts(restarts)

    skipped_artists = [
        SkippedArtist(
            artist_name=artist_name,
            skipped_count=count,
            total_songs=plays_per_artist[artist_name],
            skip_percentage=percentage(count, plays_per_artist[artist_name])
        )
        for artist_name, count in _artist_counts(skips).items()
    ]
    restart_artists = [
        RestartArtist(
            artist_name=artist_name,
            restart_count=count,
            total_songs=plays_per_artist[artist_name],
            restart_percentage=percentage(count, plays_per_artist[artist_name])
        )
        for artist_name, count in _artist_counts(restarts).items()
    ]

    report = AggregateReport(
        total_minutes=tally.total_ms // MS_PER_MINUTE,
        total_songs=len(tally.song_counts),
        top_songs=_song_ranking(tally.song_counts),
        total_artists=len(tally.artist_songs),
        top_artists_by_songs=[
            ArtistSongCount(artist_name=artist_name, unique_songs=len(tracks))
            for artist_name, tracks in top(tally.artist_songs.items(), lambda item: len(item[1]))
        ],
        top_artists_by_time=[
            ArtistTime(artist_name=artist_name, total_time=total_time)
            for artist_name, total_time in top(tally.artist_time.items(), lambda item: item[1])
        ],
        top_days=[
            DayTime(date=day.isoformat(), total_time=total_time)
            for day, total_time in top(tally.day_time.items(), lambda item: item[1])
        ],
        by_day_of_week=[
            WeekdayBucket(day=name, minutes=minutes, hours=hours, percentage=share)
            for name, minutes, hours, share in _buckets(WEEKDAYS, tally.weekday_time)
        ],
        by_month=[
            MonthBucket(month=name, minutes=minutes, hours=hours, percentage=share)
            for name, minutes, hours, share in _buckets(MONTHS, tally.month_time)
        ],
        total_skipped_songs=len(skips),
        total_restart_songs=len(restarts),
        top_skipped_songs=_song_ranking(skipped_tracks),
        top_restart_songs=_song_ranking(restarted_tracks),
        top_skipped_artists=top(skipped_artists, lambda artist: artist.skipped_count),
        top_restart_artists=top(restart_artists, lambda artist: artist.restart_count),
        skip_rate=round_rate(percentage(len(skips), retained)),
        restart_rate=round_rate(percentage(len(restarts), retained)),
        top_skipped_songs_by_artist=_songs_by_artist(skipped_tracks),
        top_restart_songs_by_artist=_songs_by_artist(restarted_tracks)
    )
    logger.info(
        f"Aggregated {retained} plays: {report.total_minutes} minutes, "
        f"{report.total_songs} songs, {report.total_artists} artists"
    )
    return report
