"""AggregateReport model definition"""
from types import MappingProxyType
from typing import Annotated, Dict, Mapping, Tuple

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

class ReportModel(BaseModel):
    """Immutable base serialized with the camelCase names report consumers expect"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True
    )

class SongCount(ReportModel):
    track_name: str = Field(description="Track name")
    artist_name: str = Field(description="Artist name")
    count: int = Field(description="Number of plays")

class ArtistSongCount(ReportModel):
    artist_name: str
    unique_songs: int = Field(description="Distinct tracks among substantive plays")

class ArtistTime(ReportModel):
    artist_name: str
    total_time: int = Field(description="Listening time in milliseconds")

class DayTime(ReportModel):
    date: str = Field(description="Calendar date, YYYY-MM-DD")
    total_time: int = Field(description="Listening time in milliseconds")

class WeekdayBucket(ReportModel):
    day: str
    minutes: int
    hours: int
    percentage: float = Field(description="Share of the week's total listening time, 0-100")

class MonthBucket(ReportModel):
    month: str
    minutes: int
    hours: int
    percentage: float = Field(description="Share of the year's total listening time, 0-100")

class ArtistSongTally(ReportModel):
    track_name: str
    count: int

# Read-only artist -> top tracks mapping, dumped as a plain JSON object
ArtistSongsMap = Annotated[
    Mapping[str, Tuple[ArtistSongTally, ...]],
    AfterValidator(lambda songs_by_artist: MappingProxyType(dict(songs_by_artist))),
    PlainSerializer(
        lambda songs_by_artist: dict(songs_by_artist),
        return_type=Dict[str, Tuple[ArtistSongTally, ...]]
    )
]

class SkippedArtist(ReportModel):
    artist_name: str
    skipped_count: int
    total_songs: int = Field(description="All retained plays of the artist, any duration")
    skip_percentage: float

class RestartArtist(ReportModel):
    artist_name: str
    restart_count: int
    total_songs: int = Field(description="All retained plays of the artist, any duration")
    restart_percentage: float

class AggregateReport(ReportModel):
    """
    Listening statistics derived from one streaming history batch.

    Totals and rankings only consider substantive plays (30s or longer).
    Skip and restart figures come from the short-play classification:
        totalSkippedSongs / totalRestartSongs: classified short plays
        skipRate / restartRate: share of all retained plays, 2 decimals
        top*SongsByArtist: top 3 tracks for every artist with a verdict
    """
    total_minutes: int = 0
    total_songs: int = 0
    top_songs: Tuple[SongCount, ...] = ()
    total_artists: int = 0
    top_artists_by_songs: Tuple[ArtistSongCount, ...] = ()
    top_artists_by_time: Tuple[ArtistTime, ...] = ()
    top_days: Tuple[DayTime, ...] = ()
    by_day_of_week: Tuple[WeekdayBucket, ...] = ()
    by_month: Tuple[MonthBucket, ...] = ()
    total_skipped_songs: int = 0
    total_restart_songs: int = 0
    top_skipped_songs: Tuple[SongCount, ...] = ()
    top_restart_songs: Tuple[SongCount, ...] = ()
    top_skipped_artists: Tuple[SkippedArtist, ...] = ()
    top_restart_artists: Tuple[RestartArtist, ...] = ()
    skip_rate: float = 0.0
    restart_rate: float = 0.0
    top_skipped_songs_by_artist: ArtistSongsMap = Field(default_factory=lambda: MappingProxyType({}))
    top_restart_songs_by_artist: ArtistSongsMap = Field(default_factory=lambda: MappingProxyType({}))

    def to_json_dict(self) -> dict:
        """Dump with the report's external field names"""
        return self.model_dump(by_alias=True, mode='json')
