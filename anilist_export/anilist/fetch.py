from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar, cast

from anilist_export.anilist.anilist_client import auth_headers
from anilist_export.anilist.errors import AniListRequestError, RateLimitedError
from anilist_export.anilist.models import GraphQLTransport, JsonObj, RawActivityEntry, RawListEntry, UserProfile
from anilist_export.anilist.queries import ACTIVITY_QUERY, MEDIA_LIST_QUERY, USER_QUERY
from anilist_export.utils.config import REQUESTS_PER_MINUTE
from anilist_export.utils.logger import LoggerProtocol, ensure_logger, get_logger

T = TypeVar("T")

PER_PAGE = 50
PAGE_DELAY = 60 / REQUESTS_PER_MINUTE  # 30 req/min -> 2s entre deux pages

Sleeper = Callable[[float], None]


def fetch_user(
    transport: GraphQLTransport,
    username: str,
    token: str | None = None,
    logger: LoggerProtocol | None = None,
) -> UserProfile:
    logger = ensure_logger(logger, __name__)
    data = transport.request(USER_QUERY, {"name": username}, auth_headers(token))
    user = data.get("User")
    if not user or user.get("id") is None:
        raise AniListRequestError(f"Utilisateur AniList introuvable: {username}")
    logger.info("👤 Utilisateur %s → id %s", username, user["id"])
    return cast(UserProfile, user)


def fetch_all_pages(
    transport: GraphQLTransport,
    query: str,
    user_id: int,
    extract: Callable[[JsonObj], list[T]],
    token: str | None = None,
    start_page: int = 1,
    per_page: int = PER_PAGE,
    delay: float = PAGE_DELAY,
    sleep: Sleeper = time.sleep,
    logger: LoggerProtocol | None = None,
) -> list[T]:
    """
    Récupère une collection paginée page par page à partir de ``start_page``.

    Une page pleine déclenche la suivante après ``delay`` secondes, une page
    courte (ou vide) termine la collection. Un 429 met en pause pendant la durée
    ``Retry-After`` puis rejoue la même page. Toute autre erreur remonte telle quelle.
    """
    # le logger reçu est déjà celui du module appelant
    logger = logger if logger is not None else get_logger(__name__)
    headers = auth_headers(token)
    all_entries: list[T] = []
    page = start_page

    while True:
        try:
            data = transport.request(query, {"page": page, "perPage": per_page, "userId": user_id}, headers)
        except RateLimitedError as exc:
            logger.warning("⏳ Rate limit atteint page %s, nouvel essai dans %ss", page, exc.retry_after)
            sleep(exc.retry_after)
            continue

        entries = extract(data)
        all_entries.extend(entries)
        logger.debug("📄 Page %s : %s entrées (total %s)", page, len(entries), len(all_entries))

        if len(entries) < per_page:
            break
        page += 1
        sleep(delay)

    return all_entries


def _page_items(data: JsonObj, key: str) -> list[JsonObj]:
    page = data.get("Page") or {}
    return page.get(key) or []


def fetch_media_list_entries(
    transport: GraphQLTransport,
    user_id: int,
    token: str | None = None,
    start_page: int = 1,
    sleep: Sleeper = time.sleep,
    logger: LoggerProtocol | None = None,
) -> list[RawListEntry]:
    logger = ensure_logger(logger, __name__)
    entries = fetch_all_pages(
        transport,
        MEDIA_LIST_QUERY,
        user_id,
        lambda data: cast(list[RawListEntry], _page_items(data, "mediaList")),
        token=token,
        start_page=start_page,
        sleep=sleep,
        logger=logger,
    )
    logger.info("📚 Liste média : %s entrées récupérées (depuis la page %s)", len(entries), start_page)
    return entries


def fetch_activity_entries(
    transport: GraphQLTransport,
    user_id: int,
    token: str | None = None,
    start_page: int = 1,
    sleep: Sleeper = time.sleep,
    logger: LoggerProtocol | None = None,
) -> list[RawActivityEntry]:
    logger = ensure_logger(logger, __name__)
    entries = fetch_all_pages(
        transport,
        ACTIVITY_QUERY,
        user_id,
        lambda data: cast(list[RawActivityEntry], _page_items(data, "activities")),
        token=token,
        start_page=start_page,
        sleep=sleep,
        logger=logger,
    )
    logger.info("📝 Activités : %s entrées récupérées (depuis la page %s)", len(entries), start_page)
    return entries
