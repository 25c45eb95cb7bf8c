"""Game rules and constants for Mafia."""

from enum import Enum


class Role(str, Enum):
    """Player roles in the game."""

    VILLAGER = "villager"
    DOCTOR = "doctor"
    MAFIA = "mafia"


class Phase(str, Enum):
    """Current game phase."""

    LOBBY = "lobby"
    NIGHT = "night"
    DAY = "day"
    ENDED = "ended"


class Winner(str, Enum):
    """Side that won the game."""

    VILLAGERS = "villagers"
    MAFIA = "mafia"


# Roster bounds: a lobby may hold up to MAX_PLAYERS, starting needs MIN_PLAYERS
MIN_PLAYERS = 4
MAX_PLAYERS = 15

# Rosters larger than this get LARGE_GAME_MAFIA mafia instead of one
LARGE_GAME_THRESHOLD = 12
SMALL_GAME_MAFIA = 1
LARGE_GAME_MAFIA = 3
DOCTOR_COUNT = 1


def mafia_count_for(num_players: int) -> int:
    """Number of mafia for a roster of the given size."""
    if num_players > LARGE_GAME_THRESHOLD:
        return LARGE_GAME_MAFIA
    return SMALL_GAME_MAFIA
