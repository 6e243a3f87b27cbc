"""Skip vs restart classification of short plays"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from unwrapped_stats.models.history import PlayEvent, SkipVerdict, TrackKey

logger = logging.getLogger(__name__)

# Part of the report contract, not configurable
SUBSTANTIVE_MS = 30000        # plays at or above count toward listening totals
SKIP_CANDIDATE_MS = 20000     # plays below are classified as skip or restart
RESTART_WINDOW_MS = 300000    # a longer replay within 5 minutes is a restart
QUICK_RESTART_MS = 30000      # any replay within 30 seconds is a restart

@dataclass(frozen=True)
class SkipClassification:
    """Normalized events with a verdict per skip-candidate (None otherwise)"""
    events: Tuple[PlayEvent, ...]
    verdicts: Tuple[Optional[SkipVerdict], ...]

    def verdict_for(self, index: int) -> Optional[SkipVerdict]:
        return self.verdicts[index]

    def with_verdict(self, verdict: SkipVerdict) -> List[PlayEvent]:
        """Events carrying the given verdict, in input order"""
        return [event for event, label in zip(self.events, self.verdicts) if label is verdict]

    def real_skips(self) -> List[PlayEvent]:
        return self.with_verdict(SkipVerdict.REAL_SKIP)

    def restarts(self) -> List[PlayEvent]:
        return self.with_verdict(SkipVerdict.RESTART)

def is_skip_candidate(event: PlayEvent) -> bool:
    return event.ms_played < SKIP_CANDIDATE_MS

def is_substantive(event: PlayEvent) -> bool:
    return event.ms_played >= SUBSTANTIVE_MS

def _gap_ms(earlier: PlayEvent, later: PlayEvent) -> float:
    return (later.end_time - earlier.end_time).total_seconds() * 1000

def group_by_track(events: Sequence[PlayEvent]) -> Dict[TrackKey, List[int]]:
    """
    Group event indices by TrackKey, each group in chronological order.

    Groups are keyed in order of first appearance. Members are sorted by
    end_time with a stable sort, so equal timestamps keep input order.
    """
    groups: Dict[TrackKey, List[int]] = {}
    for index, event in enumerate(events):
        groups.setdefault(event.track_key, []).append(index)
    for indices in groups.values():
        indices.sort(key=lambda i: events[i].end_time)
    return groups

def classify_candidate(events: Sequence[PlayEvent], group: List[int], position: int) -> SkipVerdict:
    """
    Classify the short play at group[position] from the later plays of its track.

    A later play ending less than 5 minutes after it that played longer,
    or any later play ending less than 30 seconds after it, marks a restart.
    Later plays are in chronological order, so the walk stops as soon as
    the 5 minute window is exceeded.
    """
    current = events[group[position]]
    for later_index in group[position + 1:]:
        later = events[later_index]
        gap = _gap_ms(current, later)
        if gap >= RESTART_WINDOW_MS:
            break
        if later.ms_played > current.ms_played:
            return SkipVerdict.RESTART
        if gap < QUICK_RESTART_MS:
            return SkipVerdict.RESTART
    return SkipVerdict.REAL_SKIP

def classify_skips(events: Sequence[PlayEvent]) -> SkipClassification:
    """Label every skip-candidate as a real skip or a restart"""
    events = tuple(events)
    verdicts: List[Optional[SkipVerdict]] = [None] * len(events)

    for group in group_by_track(events).values():
        for position, index in enumerate(group):
            if is_skip_candidate(events[index]):
                verdicts[index] = classify_candidate(events, group, position)

    classification = SkipClassification(events=events, verdicts=tuple(verdicts))
    logger.info(
        f"Classified short plays: {len(classification.real_skips())} skips, "
        f"{len(classification.restarts())} restarts"
    )
    return classification
