"""Game engine for Mafia."""

from game.engine import (
    create_game,
    join_game,
    assign_roles,
    start_game,
    submit_mafia_target,
    submit_doctor_target,
    submit_day_vote,
    tally_votes,
    resolve_night,
    resolve_day,
    is_game_over,
    get_winner,
)
from game.errors import GameError
from game.rules import Role, Phase, Winner
from game.state import GameState, Player, Event
from game.view import GameView, project

__all__ = [
    "create_game",
    "join_game",
    "assign_roles",
    "start_game",
    "submit_mafia_target",
    "submit_doctor_target",
    "submit_day_vote",
    "tally_votes",
    "resolve_night",
    "resolve_day",
    "is_game_over",
    "get_winner",
    "GameError",
    "Role",
    "Phase",
    "Winner",
    "GameState",
    "Player",
    "Event",
    "GameView",
    "project",
]
