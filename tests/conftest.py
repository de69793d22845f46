import os

# avant tout import du package : pas de fichiers de logs pendant les tests
os.environ["LOG_TO_FILE"] = "false"

import pytest  # noqa: E402


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(sleeps):
    return sleeps.append
