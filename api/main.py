"""FastAPI app: accounts, game lobby, night actions, day votes, host resolution."""

import logging
import uuid
from typing import Callable

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api import accounts, game_store
from api.config import configure_logging, get_cors_origins, get_role_seed
from api.models import (
    AckResponse,
    CredentialsRequest,
    GameCreatedResponse,
    GameStateResponse,
    MeResponse,
    SessionResponse,
    TargetRequest,
    UserPublic,
    game_view_to_public,
)
from game.engine import (
    create_game as engine_create_game,
    join_game,
    resolve_day,
    resolve_night,
    start_game,
    submit_day_vote,
    submit_doctor_target,
    submit_mafia_target,
)
from game.errors import (
    Forbidden,
    GameError,
    GameFull,
    InvalidCredentials,
    InvalidTarget,
    NotFound,
    RosterSizeInvalid,
    SelfHealExhausted,
    Unauthenticated,
    UsernameTaken,
    WrongPhase,
)
from game.state import GameState
from game.view import project

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Mafia API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Most specific class first; WrongPhase also covers GameNotStartable
ERROR_STATUS: list[tuple[type[GameError], int]] = [
    (NotFound, 404),
    (Unauthenticated, 401),
    (Forbidden, 403),
    (WrongPhase, 400),
    (InvalidTarget, 400),
    (SelfHealExhausted, 400),
    (RosterSizeInvalid, 400),
    (GameFull, 400),
    (UsernameTaken, 400),
    (InvalidCredentials, 400),
]

_bearer = HTTPBearer(auto_error=False)


def _status_for(exc: GameError) -> int:
    for cls, status in ERROR_STATUS:
        if isinstance(exc, cls):
            return status
    return 400


@app.exception_handler(GameError)
async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    status = _status_for(exc)
    logger.info("Rejected %s %s: %s (%s)", request.method, request.url.path, type(exc).__name__, exc.message)
    return JSONResponse(status_code=status, content={"detail": exc.message})


def _session_token(credentials: HTTPAuthorizationCredentials | None = Depends(_bearer)) -> str:
    if credentials is None:
        raise Unauthenticated()
    return credentials.credentials


def current_user(token: str = Depends(_session_token)) -> str:
    """Username of the authenticated caller."""
    username = accounts.username_for(token)
    if username is None:
        raise Unauthenticated()
    return username


def _respond(state: GameState, username: str) -> GameStateResponse:
    return game_view_to_public(project(state, username))


def _apply(game_id: str, operation: Callable[..., GameState], *args) -> GameState:
    """Run an engine operation on the stored game under its lock and store the result."""
    with game_store.locked(game_id) as state:
        new_state = operation(state, *args)
        game_store.update(game_id, new_state)
    return new_state


# AUTH


@app.post("/api/signup", response_model=SessionResponse, tags=["Auth"], summary="Create account")
def signup(body: CredentialsRequest):
    token = accounts.signup(body.username, body.password)
    return SessionResponse(username=body.username, token=token)


@app.post("/api/login", response_model=SessionResponse, tags=["Auth"], summary="Log in")
def login(body: CredentialsRequest):
    token = accounts.login(body.username, body.password)
    return SessionResponse(username=body.username, token=token)


@app.post("/api/logout", response_model=AckResponse, tags=["Auth"], summary="Log out")
def logout(token: str = Depends(_session_token)):
    accounts.logout(token)
    return AckResponse()


@app.get("/api/me", response_model=MeResponse, tags=["Auth"], summary="Current user")
def me(credentials: HTTPAuthorizationCredentials | None = Depends(_bearer)):
    """Return the logged-in user, or {user: null} without a valid session."""
    username = accounts.username_for(credentials.credentials) if credentials else None
    return MeResponse(user=UserPublic(username=username) if username else None)


# GAMES


@app.post("/api/games", response_model=GameCreatedResponse, tags=["Games"], summary="Create game")
def create_game(username: str = Depends(current_user)):
    """Create a game in the lobby; the caller becomes host and first player."""
    game_id = uuid.uuid4().hex[:8]
    while not game_store.create(engine_create_game(game_id, username)):
        game_id = uuid.uuid4().hex[:8]
    logger.info("Game %s created by %s", game_id, username)
    return GameCreatedResponse(game_id=game_id, join_link=f"/api/games/{game_id}/join")


@app.get("/api/games", response_model=list[str], tags=["Games"], summary="List game IDs")
def list_games_route(username: str = Depends(current_user)):
    return game_store.list_games()


@app.get("/api/games/{game_id}", response_model=GameStateResponse, tags=["Games"], summary="Get game state")
def get_game(game_id: str, username: str = Depends(current_user)):
    state = game_store.get(game_id)
    if state is None:
        raise NotFound()
    return _respond(state, username)


@app.post("/api/games/{game_id}/join", response_model=GameStateResponse, tags=["Games"], summary="Join game")
def join_game_endpoint(game_id: str, username: str = Depends(current_user)):
    state = _apply(game_id, join_game, username)
    return _respond(state, username)


@app.post("/api/games/{game_id}/start", response_model=GameStateResponse, tags=["Games"], summary="Start game")
def start_game_endpoint(game_id: str, username: str = Depends(current_user)):
    """Host only: assign roles and enter the first night."""
    state = _apply(game_id, start_game, username, get_role_seed())
    return _respond(state, username)


# NIGHT ACTIONS


@app.post("/api/games/{game_id}/night/mafia", response_model=AckResponse, tags=["Night"], summary="Mafia target")
def mafia_target(game_id: str, body: TargetRequest, username: str = Depends(current_user)):
    _apply(game_id, submit_mafia_target, username, body.target)
    return AckResponse()


@app.post("/api/games/{game_id}/night/doctor", response_model=AckResponse, tags=["Night"], summary="Doctor target")
def doctor_target(game_id: str, body: TargetRequest, username: str = Depends(current_user)):
    _apply(game_id, submit_doctor_target, username, body.target)
    return AckResponse()


@app.post("/api/games/{game_id}/night/resolve", response_model=GameStateResponse, tags=["Night"], summary="Resolve night")
def night_resolve(game_id: str, username: str = Depends(current_user)):
    """Host only: apply the mafia kill (unless saved) and move to day or end the game."""
    state = _apply(game_id, resolve_night, username)
    return _respond(state, username)


# DAY VOTING


@app.post("/api/games/{game_id}/day/vote", response_model=AckResponse, tags=["Day"], summary="Day vote")
def day_vote(game_id: str, body: TargetRequest, username: str = Depends(current_user)):
    """Vote for a living player; a null target retracts the caller's vote."""
    _apply(game_id, submit_day_vote, username, body.target)
    return AckResponse()


@app.post("/api/games/{game_id}/day/resolve", response_model=GameStateResponse, tags=["Day"], summary="Resolve day")
def day_resolve(game_id: str, username: str = Depends(current_user)):
    """Host only: eliminate the plurality choice and move to night or end the game."""
    state = _apply(game_id, resolve_day, username)
    return _respond(state, username)


@app.get("/health", tags=["System"], summary="Health check")
def health():
    return {"status": "ok"}
