"""Tests for the in-memory game store."""

import threading

import pytest

from api import game_store
from game.engine import create_game, join_game
from game.errors import NotFound


def test_create_get_list():
    assert game_store.create(create_game("abc", "host"))
    assert game_store.get("abc").host == "host"
    assert game_store.list_games() == ["abc"]
    assert game_store.get("missing") is None


def test_create_refuses_taken_id():
    assert game_store.create(create_game("abc", "host"))
    assert not game_store.create(create_game("abc", "intruder"))
    assert game_store.get("abc").host == "host"
    assert game_store.list_games() == ["abc"]


def test_concurrent_creates_with_same_id_keep_one_game():
    results: list[bool] = []

    def create(host: str) -> None:
        results.append(game_store.create(create_game("abc", host)))

    threads = [threading.Thread(target=create, args=(f"h{i}",)) for i in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results.count(True) == 1
    assert game_store.get("abc").host in {f"h{i}" for i in range(10)}


def test_locked_unknown_game():
    with pytest.raises(NotFound):
        with game_store.locked("missing"):
            pass


def test_locked_releases_on_error():
    game_store.create(create_game("abc", "host"))
    with pytest.raises(ValueError):
        with game_store.locked("abc"):
            raise ValueError("boom")
    with game_store.locked("abc") as state:
        assert state.game_id == "abc"


def test_concurrent_joins_are_serialized():
    game_store.create(create_game("abc", "host"))

    def join(name: str) -> None:
        with game_store.locked("abc") as state:
            game_store.update("abc", join_game(state, name))

    threads = [threading.Thread(target=join, args=(f"p{i}",)) for i in range(14)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(game_store.get("abc").players) == 15
