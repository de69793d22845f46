from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, TypeVar, cast

from anilist_export.anilist.fetch import PER_PAGE
from anilist_export.anilist.models import (
    ArchiveActivityEntry,
    ArchiveListEntry,
    ArchiveUser,
    ExportOutput,
)
from anilist_export.utils.logger import LoggerProtocol, ensure_logger

R = TypeVar("R", bound=Mapping[str, Any])


def _is_record_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(record, dict) and isinstance(record.get("id"), int) for record in value
    )


def load_archive(path: Path, logger: LoggerProtocol | None = None) -> ExportOutput | None:
    """
    Relit une archive existante pour le mode mise à jour.

    Fichier absent, illisible ou mal formé : avertissement et ``None`` (export complet).
    """
    logger = ensure_logger(logger, __name__)
    if not path.exists():
        logger.warning("⚠️ Archive %s introuvable, export complet.", path)
        return None
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("⚠️ Archive %s illisible (%s), export complet.", path, exc)
        return None
    if not isinstance(data, dict):
        logger.warning("⚠️ Archive %s au format inattendu, export complet.", path)
        return None

    user = data.get("user") or {}
    lists = data.get("lists") or []
    activity = data.get("activity") or []
    if not isinstance(user, dict) or not _is_record_list(lists) or not _is_record_list(activity):
        logger.warning("⚠️ Archive %s : user/lists/activity mal formés, export complet.", path)
        return None

    return {
        "user": cast(ArchiveUser, user),
        "lists": cast(list[ArchiveListEntry], lists),
        "activity": cast(list[ArchiveActivityEntry], activity),
    }


def _score_names(user: Mapping[str, Any]) -> list[str]:
    scores = user.get("advanced_scores")
    names = scores.get("names") if isinstance(scores, dict) else None
    if not isinstance(names, list):
        return []
    return [name for name in names if isinstance(name, str)]


def prior_score_names(prior: ExportOutput | None) -> list[str]:
    """Colonnes de notes avancées déjà fixées par l'archive précédente."""
    if not prior:
        return []
    return _score_names(prior["user"])


def resume_start_page(prior_length: int, per_page: int = PER_PAGE) -> int:
    """
    Page de reprise estimée depuis la taille de l'archive précédente.

    Suppose que l'archive ne contient que des pages complètes : si la collection
    distante a perdu ou réordonné des entrées depuis, certaines peuvent être sautées.
    """
    return max(1, prior_length // per_page)


def dedupe_by_id(records: Iterable[R]) -> list[R]:
    """Une entrée par ``id`` ; en cas de doublon la dernière rencontrée gagne."""
    by_id: dict[int, R] = {}
    for record in records:
        by_id[record["id"]] = record
    return list(by_id.values())


def merge_user(fresh: ArchiveUser, prior: ArchiveUser | None = None) -> ArchiveUser:
    """
    Les champs déjà sauvegardés priment sur ceux recalculés.

    Exception : les colonnes de notes avancées. Quand la liste fraîche prolonge
    celle de l'archive (mêmes noms en tête, nouveaux noms à la fin), c'est elle
    qui est gardée.
    """
    if not prior:
        return fresh
    merged = cast(ArchiveUser, {**fresh, **prior})

    fresh_scores = fresh.get("advanced_scores")
    prior_names = _score_names(prior)
    if fresh_scores and fresh_scores["names"][: len(prior_names)] == prior_names:
        merged["advanced_scores"] = fresh_scores
    return merged


def _pad_scores(entry: ArchiveListEntry, width: int) -> ArchiveListEntry:
    scores = list(entry.get("advanced_scores") or [])
    if len(scores) >= width:
        return entry
    return cast(ArchiveListEntry, {**entry, "advanced_scores": scores + [0] * (width - len(scores))})


def build_export(
    user: ArchiveUser,
    lists: list[ArchiveListEntry],
    activity: list[ArchiveActivityEntry],
    prior: ExportOutput | None = None,
) -> ExportOutput:
    if prior is None:
        return {
            "user": user,
            "lists": dedupe_by_id(lists),
            "activity": dedupe_by_id(activity),
        }

    merged_user = merge_user(user, prior.get("user"))
    # les anciennes lignes n'ont pas les colonnes ajoutées depuis
    width = len(_score_names(merged_user))
    merged_lists = [_pad_scores(entry, width) for entry in dedupe_by_id([*prior.get("lists", []), *lists])]
    return {
        "user": merged_user,
        "lists": merged_lists,
        "activity": dedupe_by_id([*prior.get("activity", []), *activity]),
    }


def write_archive(path: Path, output: ExportOutput, logger: LoggerProtocol | None = None) -> Path:
    logger = ensure_logger(logger, __name__)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(output, f, indent=2, ensure_ascii=False)
    logger.info("💾 Archive écrite → %s", path)
    return path
