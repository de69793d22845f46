"""Erreurs de l'export AniList.

Le transport décide du type d'erreur : le moteur de pagination ne regarde que
``RateLimitedError`` et laisse remonter tout le reste.
"""

from __future__ import annotations


class ExportError(Exception):
    """Base de toutes les erreurs de l'export."""


class RateLimitedError(ExportError):
    """HTTP 429 : la requête peut être rejouée après ``retry_after`` secondes."""

    def __init__(self, retry_after: float, message: str = "rate limited") -> None:
        super().__init__(f"{message} (retry after {retry_after}s)")
        self.retry_after = retry_after


class AniListRequestError(ExportError):
    """Échec non récupérable d'une requête GraphQL (HTTP, réseau, payload)."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message if status is None else f"HTTP {status}: {message}")
        self.status = status


class TransformError(ExportError):
    """Invariant de transformation violé, l'export est abandonné."""
