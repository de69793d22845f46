from __future__ import annotations

import functools
import sys
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from anilist_export.utils.logger import get_logger

P = ParamSpec("P")
R = TypeVar("R")

logger = get_logger("safe_runner")


def safe_main(func: Callable[P, R]) -> Callable[P, R]:
    """
    Enveloppe un point d'entrée de script.

    Toute exception non gérée est journalisée avec sa trace puis transformée en
    code de sortie 1. Une interruption clavier sort en 130.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            logger.warning("⛔ Interruption par l'utilisateur (%s)", func.__name__)
            sys.exit(130)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("💥 Erreur fatale dans %s : %s", func.__name__, exc)
            sys.exit(1)

    return wrapper
