"""Game state types for Mafia."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from game.rules import Phase, Role, Winner


@dataclass(frozen=True)
class Player:
    """A player in one game."""

    username: str
    role: Optional[Role] = None
    alive: bool = True
    self_heal_used: bool = False


class EventKind(str, Enum):
    """Type of game event."""

    GAME_START = "game_start"
    NIGHT_KILL = "night_kill"
    NIGHT_SAVE = "night_save"
    QUIET_NIGHT = "quiet_night"
    ELIMINATED = "eliminated"
    NO_ELIMINATION = "no_elimination"
    PHASE_CHANGE = "phase_change"
    GAME_OVER = "game_over"


@dataclass
class Event:
    """A single public game event for history. Never carries a role."""

    kind: EventKind
    round_index: int
    phase: Phase
    message: str
    target: Optional[str] = None


@dataclass
class GameState:
    """Full game state."""

    game_id: str
    host: str
    phase: Phase = Phase.LOBBY
    players: list[Player] = field(default_factory=list)
    mafia_targets: dict[str, str] = field(default_factory=dict)  # mafia username -> target, night only
    doctor_target: Optional[str] = None  # night only
    day_votes: dict[str, str] = field(default_factory=dict)  # voter username -> target, day only
    winner: Optional[Winner] = None
    round_index: int = 0
    events: list[Event] = field(default_factory=list)
    created_at: float = 0.0
    last_phase_change: float = 0.0

    def get_alive_players(self) -> list[Player]:
        """Return list of alive players."""
        return [p for p in self.players if p.alive]

    def get_player(self, username: str) -> Optional[Player]:
        """Return player by username or None."""
        for p in self.players:
            if p.username == username:
                return p
        return None

    def get_players_by_role(self, role: Role) -> list[Player]:
        """Return alive players with the given role."""
        return [p for p in self.players if p.alive and p.role == role]

    def replace_player(self, player: Player) -> None:
        """Swap in an updated record for the player with the same username (mutates state)."""
        self.players = [player if p.username == player.username else p for p in self.players]

    def clear_phase_data(self) -> None:
        """Reset night targets and day votes (mutates state)."""
        self.mafia_targets = {}
        self.doctor_target = None
        self.day_votes = {}
