from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from anilist_export.anilist.errors import TransformError
from anilist_export.anilist.mappers import (
    MANGA,
    activity_status_to_action_type,
    extract_active_names,
    fuzzy_date_to_int,
    list_status_to_int,
    media_type_to_series_type,
    unix_seconds_to_timestamp,
)
from anilist_export.anilist.models import (
    ArchiveActivityEntry,
    ArchiveListEntry,
    ArchiveUser,
    RawActivityEntry,
    RawListEntry,
    UserProfile,
)
from anilist_export.utils.logger import LoggerProtocol, ensure_logger


@dataclass(frozen=True)
class CustomListNames:
    """Noms de custom lists rencontrés, par type de série, dans l'ordre d'apparition."""

    anime: tuple[str, ...] = ()
    manga: tuple[str, ...] = ()

    def add(self, series_type: int, names: Iterable[str]) -> CustomListNames:
        if series_type == MANGA:
            return CustomListNames(self.anime, _append_unseen(self.manga, names))
        return CustomListNames(_append_unseen(self.anime, names), self.manga)


def _append_unseen(current: tuple[str, ...], names: Iterable[str]) -> tuple[str, ...]:
    out = list(current)
    for name in names:
        if name not in out:
            out.append(name)
    return tuple(out)


def build_advanced_score_names(entries: Iterable[RawListEntry], initial: Sequence[str] = ()) -> list[str]:
    """
    Colonnes de notes avancées, dans l'ordre où chaque nom apparaît pour la première fois.

    ``initial`` fixe les premières colonnes (celles d'une archive existante).
    """
    names: list[str] = list(dict.fromkeys(initial))
    seen: set[str] = set(names)
    for entry in entries:
        for key in entry.get("advancedScores") or {}:
            if key in seen:
                continue
            seen.add(key)
            names.append(key)
    return names


def map_advanced_scores(entry: RawListEntry, ordered_names: Sequence[str]) -> list[float]:
    scores = entry.get("advancedScores") or {}
    return [scores.get(name, 0) or 0 for name in ordered_names]


def transform_list_entry(entry: RawListEntry, advanced_score_names: Sequence[str]) -> ArchiveListEntry:
    media = entry.get("media") or {}
    return {
        "id": entry["id"],
        "series_type": media_type_to_series_type(media.get("type")),
        "user_id": entry.get("userId", 0),
        "series_id": entry.get("mediaId", 0),
        "status": list_status_to_int(entry.get("status")),
        "score": entry.get("score", 0),
        "progress": entry.get("progress", 0),
        "progress_volume": entry.get("progressVolumes"),
        "priority": 0,
        "repeat": entry.get("repeat", 0),
        "private": 1 if entry.get("private") else 0,
        "notes": entry.get("notes"),
        "custom_lists": extract_active_names(entry.get("customLists")),
        "advanced_scores": map_advanced_scores(entry, advanced_score_names),
        "hidden_default": 0,
        "started_on": fuzzy_date_to_int(entry.get("startedAt")),
        "finished_on": fuzzy_date_to_int(entry.get("completedAt")),
        "created_at": unix_seconds_to_timestamp(entry.get("createdAt", 0)),
        "updated_at": unix_seconds_to_timestamp(entry.get("updatedAt", 0)),
    }


def transform_media_list(
    entries: Sequence[RawListEntry],
    initial_score_names: Sequence[str] = (),
) -> tuple[list[ArchiveListEntry], CustomListNames, list[str]]:
    """
    Convertit toute la liste média en une seule passe.

    Les colonnes de notes avancées sont calculées d'abord sur l'ensemble de la
    collection pour que chaque entrée ait un tableau de même longueur. Les noms
    de custom lists sont accumulés entrée par entrée. En reprise, les colonnes
    de l'archive précédente restent en tête et dans le même ordre.
    """
    score_names = build_advanced_score_names(entries, initial=initial_score_names)
    custom_lists = CustomListNames()
    lists: list[ArchiveListEntry] = []

    for entry in entries:
        archived = transform_list_entry(entry, score_names)
        custom_lists = custom_lists.add(archived["series_type"], archived["custom_lists"])
        lists.append(archived)

    return lists, custom_lists, score_names


def transform_activity_entry(entry: RawActivityEntry) -> ArchiveActivityEntry:
    media = entry.get("media") or {}
    created_at = unix_seconds_to_timestamp(entry.get("createdAt", 0))
    return {
        "id": entry["id"],
        "user_id": entry.get("userId", 0),
        "messenger_id": None,
        "action_type": activity_status_to_action_type(entry.get("status")),
        "object_id": media.get("id") or 0,
        "object_type": media_type_to_series_type(media.get("type")) + 1,
        "object_value": entry.get("progress") or "",
        "reply_count": entry.get("replyCount", 0),
        "created_at": created_at,
        "updated_at": created_at,
        "locked": 1 if entry.get("isLocked") else 0,
        "like_count": entry.get("likeCount", 0),
        "private": 0,
    }


def transform_activities(
    entries: Sequence[RawActivityEntry], logger: LoggerProtocol | None = None
) -> list[ArchiveActivityEntry]:
    logger = ensure_logger(logger, __name__)
    activity = [transform_activity_entry(e) for e in entries]
    if len(activity) != len(entries):
        logger.error("Activités: %s reçues, %s transformées", len(entries), len(activity))
        raise TransformError("Activity list length mismatch after transformation")
    return activity


def _sorted_names(names: Iterable[str]) -> list[str]:
    return sorted(set(names), key=lambda name: (name.casefold(), name))


def build_user(
    profile: UserProfile | None,
    custom_lists: CustomListNames,
    advanced_score_names: Sequence[str],
) -> ArchiveUser:
    profile = profile or {}
    avatar = profile.get("avatar") or {}
    return {
        "display_name": profile.get("name"),
        "about": profile.get("about"),
        "avatar_url": avatar.get("large"),
        "banner_url": profile.get("bannerImage"),
        "custom_lists": {
            "anime": _sorted_names(custom_lists.anime),
            "manga": _sorted_names(custom_lists.manga),
        },
        "advanced_scores": {
            "active": len(advanced_score_names) > 0,
            "names": list(advanced_score_names),
        },
    }
