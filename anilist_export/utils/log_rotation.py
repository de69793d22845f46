"""Purge des fichiers de logs journaliers."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path


def rotate_logs(log_dir: str | Path, keep_days: int, logf: str | Path | None = None) -> list[Path]:
    """
    Supprime les fichiers ``*.log`` de ``log_dir`` plus vieux que ``keep_days`` jours.

    Le fichier ``logf`` (log courant du script) n'est jamais supprimé.
    Retourne la liste des fichiers effacés.
    """
    directory = Path(log_dir)
    if keep_days <= 0 or not directory.is_dir():
        return []

    current = Path(logf).resolve() if logf else None
    limit = datetime.now() - timedelta(days=keep_days)
    removed: list[Path] = []

    for log_file in directory.glob("*.log"):
        if current is not None and log_file.resolve() == current:
            continue
        modified = datetime.fromtimestamp(log_file.stat().st_mtime)
        if modified < limit:
            log_file.unlink()
            removed.append(log_file)

    return removed
