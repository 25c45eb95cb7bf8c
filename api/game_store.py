"""In-memory game store with one lock per game. Contents live for the process lifetime."""

import threading
from contextlib import contextmanager
from typing import Iterator

from game.errors import NotFound
from game.state import GameState

# game_id -> state
_store: dict[str, GameState] = {}
# game_id -> lock serializing read-modify-write on that game
_locks: dict[str, threading.Lock] = {}
# guards the two dicts above
_registry_lock = threading.Lock()


def create(state: GameState) -> bool:
    """Register a new game. Returns False, storing nothing, if the id is already taken."""
    with _registry_lock:
        if state.game_id in _store:
            return False
        _store[state.game_id] = state
        _locks[state.game_id] = threading.Lock()
        return True


def get(game_id: str) -> GameState | None:
    with _registry_lock:
        return _store.get(game_id)


def update(game_id: str, state: GameState) -> None:
    with _registry_lock:
        if game_id in _store:
            _store[game_id] = state


@contextmanager
def locked(game_id: str) -> Iterator[GameState]:
    """
    Hold the game's lock for the duration of the block and yield its current state.
    Raises NotFound for unknown ids. Writes inside the block go through update().
    """
    with _registry_lock:
        lock = _locks.get(game_id)
    if lock is None:
        raise NotFound()
    with lock:
        state = get(game_id)
        if state is None:
            raise NotFound()
        yield state


def list_games() -> list[str]:
    with _registry_lock:
        return list(_store.keys())


def clear() -> None:
    """Drop every game."""
    with _registry_lock:
        _store.clear()
        _locks.clear()
