from __future__ import annotations

import math
from typing import Any, cast

import requests

from anilist_export.anilist.errors import AniListRequestError, RateLimitedError
from anilist_export.anilist.models import JsonObj
from anilist_export.utils.config import ANILIST_API_URL, REQUEST_TIMEOUT
from anilist_export.utils.logger import get_logger

logger = get_logger("AniListClient")

DEFAULT_RETRY_AFTER = 1.0
MAX_RETRY_AFTER = 900.0  # 15 min


def parse_retry_after(value: str | None) -> float:
    """Durée d'attente en secondes lue dans ``Retry-After`` (1s si absente ou illisible)."""
    if value is None:
        return DEFAULT_RETRY_AFTER
    try:
        seconds = float(value.strip())
    except ValueError:
        return DEFAULT_RETRY_AFTER
    if not math.isfinite(seconds) or seconds < 0:
        return DEFAULT_RETRY_AFTER
    return min(seconds, MAX_RETRY_AFTER)


def auth_headers(token: str | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


class AniListClient:
    """Transport GraphQL over HTTPS vers l'API AniList."""

    def __init__(self, api_url: str = ANILIST_API_URL, timeout: int = REQUEST_TIMEOUT) -> None:
        self.api_url = api_url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": "AniList_GDPR_Exporter/1.0",
            }
        )

    def request(self, document: str, variables: dict[str, Any], headers: dict[str, str] | None = None) -> JsonObj:
        """
        Envoie une requête GraphQL et retourne le bloc ``data``.

        Lève ``RateLimitedError`` sur HTTP 429, ``AniListRequestError`` pour tout autre échec.
        """
        try:
            r = self.session.post(
                self.api_url,
                json={"query": document, "variables": variables},
                headers=headers or {},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AniListRequestError(f"Erreur réseau AniList: {exc}") from exc

        if r.status_code == 429:
            retry_after = parse_retry_after(r.headers.get("Retry-After"))
            raise RateLimitedError(retry_after)

        if not r.ok:
            raise AniListRequestError(r.text[:200], status=r.status_code)

        try:
            payload: Any = r.json()
        except ValueError as exc:
            raise AniListRequestError("Réponse AniList non JSON", status=r.status_code) from exc

        if not isinstance(payload, dict):
            raise AniListRequestError("Réponse AniList inattendue", status=r.status_code)

        errors = payload.get("errors")
        data = payload.get("data")
        if errors and not data:
            messages = "; ".join(str(e.get("message", e)) for e in errors if isinstance(e, dict)) or str(errors)
            raise AniListRequestError(messages, status=r.status_code)
        if errors:
            logger.warning("⚠️ Erreurs GraphQL partielles: %s", errors)

        return cast(JsonObj, data or {})

    def close(self) -> None:
        self.session.close()
