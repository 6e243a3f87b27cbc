"""Validation and cleanup of raw streaming history records"""
import logging
from datetime import datetime, timezone, tzinfo
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

from unwrapped_stats.models.history import PlayEvent

logger = logging.getLogger(__name__)

# Primary field -> alternate field used by the extended streaming history export
FIELD_ALIASES = {
    'endTime': 'ts',
    'artistName': 'master_metadata_album_artist_name',
    'trackName': 'master_metadata_track_name',
    'msPlayed': 'ms_played',
}

def _field(record: Mapping[str, Any], name: str) -> Any:
    """Read a field, falling back to its alternate name when the primary is missing"""
    value = record.get(name)
    if value is None:
        value = record.get(FIELD_ALIASES[name])
    return value

def parse_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse an export timestamp into a naive wall-clock datetime.

    Accepts datetime objects and ISO 8601 strings ("2023-01-15 10:30" or
    "2023-01-15T10:30:00Z"). Aware values are converted to tz (UTC when None)
    before dropping the offset. Naive values are read as UTC, which is how the
    account data export writes endTime, so a mixed batch stays on one clock.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    is_aware = dt.tzinfo is not None and dt.tzinfo.utcoffset(dt) is not None
    if not is_aware and tz is not None:
        dt = dt.replace(tzinfo=timezone.utc)
        is_aware = True
    if is_aware:
        dt = dt.astimezone(tz or timezone.utc).replace(tzinfo=None)
    return dt

def coerce_ms_played(value: Any) -> Optional[int]:
    """Coerce a played duration to int milliseconds, None if not numeric"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None

def _clean_name(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ''

def normalize_record(record: Any, tz: Optional[tzinfo] = None) -> Optional[PlayEvent]:
    """Turn one raw record into a PlayEvent, None when it is malformed"""
    if not isinstance(record, Mapping):
        return None

    artist_name = _clean_name(_field(record, 'artistName'))
    track_name = _clean_name(_field(record, 'trackName'))
    if not artist_name or not track_name:
        return None

    ms_played = coerce_ms_played(_field(record, 'msPlayed'))
    if ms_played is None or ms_played <= 0:
        return None

    end_time = parse_timestamp(_field(record, 'endTime'), tz)
    if end_time is None:
        return None

    return PlayEvent(
        end_time=end_time,
        artist_name=artist_name,
        track_name=track_name,
        ms_played=ms_played
    )

def normalize_records(records: Iterable[Any], tz: Optional[tzinfo] = None) -> List[PlayEvent]:
    """Validate raw records, keeping input order and dropping malformed entries"""
    events: List[PlayEvent] = []
    dropped = 0
    for position, record in enumerate(records):
        event = normalize_record(record, tz)
        if event is None:
            dropped += 1
            logger.debug(f"Dropping malformed record at position {position}: {record!r}")
            continue
        events.append(event)

    logger.info(f"Normalized {len(events)} play events ({dropped} malformed records dropped)")
    return events
