from __future__ import annotations

from typing import Any, Protocol, TypedDict

# --- Transport minimal (ce que le moteur de pagination utilise vraiment) -----


class GraphQLTransport(Protocol):
    def request(
        self, document: str, variables: dict[str, Any], headers: dict[str, str] | None = None
    ) -> JsonObj: ...


# --- AniList raw payloads (subset utile) -------------------------------------


class FuzzyDate(TypedDict, total=False):
    year: int | None
    month: int | None
    day: int | None


class MediaRef(TypedDict, total=False):
    id: int
    type: str | None  # "ANIME" | "MANGA"


class Avatar(TypedDict, total=False):
    large: str | None
    medium: str | None


class UserProfile(TypedDict, total=False):
    id: int
    name: str
    about: str | None
    avatar: Avatar | None
    bannerImage: str | None


class RawListEntry(TypedDict, total=False):
    id: int
    mediaId: int
    userId: int
    status: str | None  # CURRENT | PLANNING | COMPLETED | DROPPED | PAUSED | REPEATING
    score: float
    progress: int
    progressVolumes: int | None
    repeat: int
    private: bool
    notes: str | None
    customLists: dict[str, bool] | None  # nom -> actif, ordre = ordre des clés
    advancedScores: dict[str, float] | None  # nom -> note
    startedAt: FuzzyDate | None
    completedAt: FuzzyDate | None
    createdAt: int  # unix seconds
    updatedAt: int  # unix seconds
    media: MediaRef | None


class RawActivityEntry(TypedDict, total=False):
    id: int
    userId: int
    type: str | None  # ANIME_LIST | MANGA_LIST
    status: str | None  # "watched episode", "completed", ...
    progress: str | None  # "3" ou "1 - 4"
    likeCount: int
    replyCount: int
    isLocked: bool
    createdAt: int
    media: MediaRef | None


# --- Archive (format export GDPR) --------------------------------------------


class ArchiveListEntry(TypedDict):
    id: int
    series_type: int  # 0 anime, 1 manga
    user_id: int
    series_id: int
    status: int
    score: float
    progress: int
    progress_volume: int | None
    priority: int
    repeat: int
    private: int
    notes: str | None
    custom_lists: list[str]
    advanced_scores: list[float]
    hidden_default: int
    started_on: int  # YYYYMMDD ou 0
    finished_on: int
    created_at: str  # "YYYY-mm-dd HH:MM:SS" UTC
    updated_at: str


class ArchiveActivityEntry(TypedDict):
    id: int
    user_id: int
    messenger_id: int | None
    action_type: int
    object_id: int
    object_type: int  # series_type + 1
    object_value: str
    reply_count: int
    created_at: str
    updated_at: str
    locked: int
    like_count: int
    private: int


class CustomListCatalog(TypedDict):
    anime: list[str]
    manga: list[str]


class AdvancedScoreCatalog(TypedDict):
    active: bool
    names: list[str]


class ArchiveUser(TypedDict, total=False):
    display_name: str | None
    about: str | None
    avatar_url: str | None
    banner_url: str | None
    custom_lists: CustomListCatalog
    advanced_scores: AdvancedScoreCatalog


class ExportOutput(TypedDict):
    user: ArchiveUser
    lists: list[ArchiveListEntry]
    activity: list[ArchiveActivityEntry]


JsonObj = dict[str, Any]
