from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime

from anilist_export.anilist.models import FuzzyDate

ANIME = 0
MANGA = 1

LIST_STATUS_MAP: dict[str, int] = {
    "CURRENT": 0,
    "PLANNING": 1,
    "COMPLETED": 2,
    "DROPPED": 3,
    "PAUSED": 4,
    "REPEATING": 5,
}

# l'ordre compte : "rewatched" / "reread" doivent passer avant "watched" / "read"
ACTION_TYPE_KEYWORDS: tuple[tuple[str, int], ...] = (
    ("completed", 1),
    ("plans", 2),
    ("dropped", 5),
    ("paused", 4),
    ("rewatched", 6),
    ("reread", 6),
    ("watched", 3),
    ("read", 3),
)

ARCHIVE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def unix_seconds_to_timestamp(seconds: int | float) -> str:
    return datetime.fromtimestamp(seconds, tz=UTC).strftime(ARCHIVE_TIMESTAMP_FORMAT)


def fuzzy_date_to_int(value: FuzzyDate | None) -> int:
    """YYYYMMDD si la date est complète, 0 sinon (date absente ou partielle)."""
    if not value:
        return 0
    year, month, day = value.get("year"), value.get("month"), value.get("day")
    if not year or not month or not day:
        return 0
    return year * 10000 + month * 100 + day


def media_type_to_series_type(media_type: str | None) -> int:
    return MANGA if media_type == "MANGA" else ANIME


def list_status_to_int(status: str | None) -> int:
    return LIST_STATUS_MAP.get(status or "", 0)


def activity_status_to_action_type(status: str | None) -> int:
    if not status:
        return 0
    normalized = status.lower()
    for keyword, action_type in ACTION_TYPE_KEYWORDS:
        if keyword in normalized:
            return action_type
    return 0


def extract_active_names(value: Mapping[str, bool] | None) -> list[str]:
    if not value:
        return []
    return [name for name, is_active in value.items() if is_active]
