import pytest

from api import accounts, game_store


@pytest.fixture(autouse=True)
def clean_stores():
    """Each test starts with no games and no accounts."""
    game_store.clear()
    accounts.clear()
    yield
    game_store.clear()
    accounts.clear()
