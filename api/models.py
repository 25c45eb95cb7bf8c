"""Pydantic request/response models for the API."""

from pydantic import BaseModel, Field, field_validator

from game.view import GameView

# Validation constants (no magic numbers in validation)
MAX_USERNAME_LENGTH = 32
MIN_PASSWORD_LENGTH = 1
MAX_PASSWORD_LENGTH = 128


class CredentialsRequest(BaseModel):
    """Body for POST /api/signup and /api/login."""

    username: str = Field(..., min_length=1, max_length=MAX_USERNAME_LENGTH)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username must not be blank")
        return v


class SessionResponse(BaseModel):
    username: str
    token: str = Field(description="Send as 'Authorization: Bearer <token>'")


class UserPublic(BaseModel):
    username: str


class MeResponse(BaseModel):
    user: UserPublic | None = None


class GameCreatedResponse(BaseModel):
    game_id: str
    join_link: str


class TargetRequest(BaseModel):
    """Body for night actions and day votes. A null target retracts a day vote."""

    target: str | None = Field(default=None, description="Username of the targeted player")


class AckResponse(BaseModel):
    ok: bool = True


class SelfPublic(BaseModel):
    """The requesting player's own record, including their role."""

    username: str
    role: str | None = Field(default=None, description="Unset while in the lobby")
    alive: bool
    self_heal_used: bool


class PlayerPublic(BaseModel):
    """Player as shown to everyone: role never included."""

    username: str
    alive: bool


class EventPublic(BaseModel):
    kind: str
    round_index: int
    phase: str
    message: str
    target: str | None = None


class GameStateResponse(BaseModel):
    """Game state as seen by the requesting player."""

    id: str
    host: str
    phase: str
    winner: str | None = Field(default=None, description="villagers or mafia when game over")
    round_index: int
    last_phase_change: float = Field(description="Epoch seconds; advisory, phases never time out")
    me: SelfPublic | None = Field(default=None, description="Null when the viewer has not joined")
    players: list[PlayerPublic]
    events: list[EventPublic] = Field(default_factory=list)


def game_view_to_public(view: GameView) -> GameStateResponse:
    """Build response model from a projected GameView."""
    me = None
    if view.me is not None:
        me = SelfPublic(
            username=view.me.username,
            role=view.me.role.value if view.me.role else None,
            alive=view.me.alive,
            self_heal_used=view.me.self_heal_used,
        )
    return GameStateResponse(
        id=view.game_id,
        host=view.host,
        phase=view.phase.value,
        winner=view.winner.value if view.winner else None,
        round_index=view.round_index,
        last_phase_change=view.last_phase_change,
        me=me,
        players=[PlayerPublic(username=p.username, alive=p.alive) for p in view.players],
        events=[
            EventPublic(
                kind=e.kind.value,
                round_index=e.round_index,
                phase=e.phase.value,
                message=e.message,
                target=e.target,
            )
            for e in view.events
        ],
    )
