# config.py
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Chargement du .env à la racine du package
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path, override=True)

# --- Fonctions utilitaires ---


def get_bool(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).lower() in ("true", "1", "yes")


def get_str(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def get_int(key: str, default: int = 0) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        print(f"[CONFIG ERROR] La variable {key} doit être un entier.")
        sys.exit(1)


def get_float(key: str, default: float = 0.0) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        print(f"[CONFIG ERROR] La variable {key} doit être un nombre.")
        sys.exit(1)


# --- Variables d'environnement accessibles globalement ---

LOG_FILE_PATH = get_str("LOG_FILE_PATH", "logs")
LOG_ROTATION_DAYS = get_int("LOG_ROTATION_DAYS", 30)
LOG_TO_FILE = get_bool("LOG_TO_FILE", "true")
LOG_LEVEL = get_str("LOG_LEVEL", "INFO").upper()

# AniList
ANILIST_API_URL = get_str("ANILIST_API_URL", "https://graphql.anilist.co")
ANILIST_TOKEN = get_str("ANILIST_TOKEN")
ANILIST_USERNAME = get_str("ANILIST_USERNAME")
REQUESTS_PER_MINUTE = get_float("REQUESTS_PER_MINUTE", 30)
REQUEST_TIMEOUT = get_int("REQUEST_TIMEOUT", 20)

OUTPUT_PATH = Path(get_str("OUTPUT_PATH", "data-export.json"))
