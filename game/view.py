"""Per-viewer projection of a game."""

from dataclasses import dataclass, field
from typing import Optional

from game.rules import Phase, Role, Winner
from game.state import Event, GameState


@dataclass(frozen=True)
class SelfView:
    """The viewer's own record, including their role."""

    username: str
    role: Optional[Role]
    alive: bool
    self_heal_used: bool


@dataclass(frozen=True)
class PlayerView:
    """Another player as everyone sees them: no role."""

    username: str
    alive: bool


@dataclass(frozen=True)
class GameView:
    """A game as seen by one viewer."""

    game_id: str
    host: str
    phase: Phase
    winner: Optional[Winner]
    round_index: int
    last_phase_change: float
    me: Optional[SelfView]
    players: list[PlayerView] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)


def project(state: GameState, viewer: str) -> GameView:
    """Build the view of state for viewer. Only the viewer's own role is included."""
    me = state.get_player(viewer)
    return GameView(
        game_id=state.game_id,
        host=state.host,
        phase=state.phase,
        winner=state.winner,
        round_index=state.round_index,
        last_phase_change=state.last_phase_change,
        me=SelfView(
            username=me.username,
            role=me.role,
            alive=me.alive,
            self_heal_used=me.self_heal_used,
        )
        if me
        else None,
        players=[PlayerView(username=p.username, alive=p.alive) for p in state.players],
        events=list(state.events),
    )
