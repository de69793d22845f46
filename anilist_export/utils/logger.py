"""2026-10-19 - logger du projet anilist_export."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from anilist_export.utils.config import LOG_FILE_PATH, LOG_LEVEL, LOG_ROTATION_DAYS, LOG_TO_FILE
from anilist_export.utils.log_rotation import rotate_logs

GLOBAL_LOG_NAME = "anilist_export"


# ---------- Protocole (contrat) ----------
class LoggerProtocol(Protocol):
    """
    Interface minimale attendue par les modules d'export.

    Toute fonction qui accepte un ``logger=`` ne dépend que de ces méthodes, ce qui
    permet de passer un logger enfant, un ``logging.Logger`` standard ou un faux
    logger dans les tests.
    """

    def debug(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def exception(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def get_child(self, suffix: str) -> LoggerProtocol:
        """
        Get child logger.
        """
        ...


# ---------- Classe concrète (instanciable) ----------


@dataclass(frozen=True)
class ExportLogger:
    """
    Logger de l'exporteur AniList.

    Enveloppe fine autour d'un ``logging.Logger`` : les handlers (console + fichiers
    journaliers) sont posés une seule fois par ``get_logger`` et les loggers enfants
    créés via ``get_child`` remontent vers ces mêmes handlers.

    Attributes:
        _base: The wrapped standard library logger.
    """

    _base: logging.Logger

    # expose la même API que le Protocol
    def debug(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args: object, **kwargs: Any) -> None:
        """
        Logs at ERROR level with the current traceback attached.

        Only meaningful inside an ``except`` block.
        """
        self._base.exception(msg, *args, **kwargs)

    def get_child(self, suffix: str) -> LoggerProtocol:
        """
        Creates a child logger named ``<parent>.<suffix>``.

        Args:
        - suffix (str): The suffix to append to the original logger name.

        Returns:
        A new ExportLogger wrapping the child logger.
        """
        return ExportLogger(self._base.getChild(suffix))


def _ensure_handlers(base: logging.Logger, global_log_file: str | None, script_log_file: str | None) -> None:
    if getattr(base, "_anilist_export_configured", False):
        return

    formatter = logging.Formatter("%(asctime)s - %(levelname)s - [%(name)s] %(message)s")

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    base.addHandler(stream)

    if global_log_file:
        fh_global = logging.FileHandler(global_log_file, encoding="utf-8")
        fh_global.setFormatter(formatter)
        base.addHandler(fh_global)

    if script_log_file:
        fh_script = logging.FileHandler(script_log_file, encoding="utf-8")
        fh_script.setFormatter(formatter)
        base.addHandler(fh_script)

    setattr(base, "_anilist_export_configured", True)


def get_logger(script_name: str) -> LoggerProtocol:
    """
    Constructeur de logger.

    Crée le dossier de logs si besoin, purge les fichiers trop anciens et pose les
    handlers console + fichiers (sauf si ``LOG_TO_FILE`` est désactivé).

    :param script_name: Nom du script.
    :return: Instanciation de logger.
    """
    global_log_file: str | None = None
    script_log_file: str | None = None

    if LOG_TO_FILE:
        os.makedirs(LOG_FILE_PATH, exist_ok=True)
        date_str = datetime.now().strftime("%Y-%m-%d")
        global_log_file = os.path.join(LOG_FILE_PATH, f"{date_str}_{GLOBAL_LOG_NAME}.log")
        script_log_file = os.path.join(LOG_FILE_PATH, f"{date_str}_{script_name.replace(' ', '_')}.log")

        try:
            rotate_logs(LOG_FILE_PATH, LOG_ROTATION_DAYS, logf=script_log_file)
        except OSError as exc:
            base_fallback = logging.getLogger(script_name)
            base_fallback.setLevel(LOG_LEVEL)
            _ensure_handlers(base_fallback, global_log_file, script_log_file)
            ExportLogger(base_fallback).warning(f"Rotation des logs échouée: {exc}")

    base = logging.getLogger(script_name)
    base.setLevel(LOG_LEVEL)
    _ensure_handlers(base, global_log_file, script_log_file)
    return ExportLogger(base)  # ← classe concrète, pas le Protocol


# ---------- Utilities ----------
def ensure_logger(logger: LoggerProtocol | None, module: str) -> LoggerProtocol:
    """
    Retourne un logger utilisable pour ``module``.

    Sans logger fourni, un logger racine est construit pour le module ; sinon on
    dérive un enfant du logger reçu.
    """
    if logger is None:
        return get_logger(module)
    return logger.get_child(module)
