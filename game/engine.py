"""Game engine: pure state transitions.

Every operation that changes a game deep-copies the input and returns the new
state, so a rejected operation never leaves a half-applied game behind.
"""

import copy
import logging
import random
import time
from typing import Iterable, Optional

from game.errors import (
    Forbidden,
    GameFull,
    GameNotStartable,
    InvalidTarget,
    RosterSizeInvalid,
    SelfHealExhausted,
    WrongPhase,
)
from game.rules import (
    DOCTOR_COUNT,
    MAX_PLAYERS,
    MIN_PLAYERS,
    Phase,
    Role,
    Winner,
    mafia_count_for,
)
from game.state import Event, EventKind, GameState, Player

logger = logging.getLogger(__name__)


def _emit(state: GameState, event: Event) -> None:
    """Append event to state (mutates state)."""
    state.events.append(event)


def _require_host(state: GameState, username: str, action: str) -> None:
    if state.host != username:
        raise Forbidden(f"Only host can {action}")


def _require_phase(state: GameState, phase: Phase) -> None:
    if state.phase != phase:
        raise WrongPhase(f"Not {phase.value} phase")


def _require_living_player(state: GameState, username: str) -> Player:
    """Return the actor's record; dead or unenrolled actors are always Forbidden."""
    me = state.get_player(username)
    if me is None or not me.alive:
        raise Forbidden("Dead or not in game")
    return me


def _require_living_target(state: GameState, target: Optional[str]) -> Player:
    player = state.get_player(target) if target else None
    if player is None or not player.alive:
        raise InvalidTarget()
    return player


def _enter_phase(state: GameState, phase: Phase, message: str) -> None:
    """Move to phase, dropping all phase-scoped votes (mutates state)."""
    state.phase = phase
    state.clear_phase_data()
    state.last_phase_change = time.time()
    _emit(
        state,
        Event(
            kind=EventKind.PHASE_CHANGE,
            round_index=state.round_index,
            phase=phase,
            message=message,
        ),
    )


def _eliminate(state: GameState, username: str) -> None:
    """Mark player dead (mutates state)."""
    player = state.get_player(username)
    if player is not None:
        state.replace_player(
            Player(
                username=player.username,
                role=player.role,
                alive=False,
                self_heal_used=player.self_heal_used,
            )
        )


def _finish_if_over(state: GameState) -> bool:
    """Run win evaluation; on a win, end the game (mutates state). Returns True if ended."""
    winner = get_winner(state)
    if winner is None:
        return False
    state.phase = Phase.ENDED
    state.winner = winner
    state.clear_phase_data()
    state.last_phase_change = time.time()
    _emit(
        state,
        Event(
            kind=EventKind.GAME_OVER,
            round_index=state.round_index,
            phase=Phase.ENDED,
            message=f"Game over: {winner.value} win.",
        ),
    )
    logger.info("Game %s ended, winner=%s", state.game_id, winner.value)
    return True


def create_game(game_id: str, host: str) -> GameState:
    """Create a new game in the lobby with the host enrolled as its first player."""
    now = time.time()
    return GameState(
        game_id=game_id,
        host=host,
        players=[Player(username=host)],
        created_at=now,
        last_phase_change=now,
    )


def join_game(state: GameState, username: str) -> GameState:
    """
    Enroll username while in the lobby. Re-joining an enrolled identity is a no-op.
    Returns new state; does not mutate input.
    """
    if state.phase != Phase.LOBBY:
        raise GameNotStartable()
    if state.get_player(username) is not None:
        return state
    if len(state.players) >= MAX_PLAYERS:
        raise GameFull()
    state = copy.deepcopy(state)
    state.players.append(Player(username=username))
    return state


def assign_roles(players: list[Player], rng: Optional[random.Random] = None) -> list[Player]:
    """
    Assign roles to a roster of 4..15 players.

    The shuffled order decides who gets which role: the first slots are mafia,
    the next one is the doctor, the rest are villagers. The returned list keeps
    the original (join) order.
    """
    if not MIN_PLAYERS <= len(players) <= MAX_PLAYERS:
        raise RosterSizeInvalid()
    rng = rng or random.Random()
    mafia_count = mafia_count_for(len(players))

    slots = list(range(len(players)))
    rng.shuffle(slots)
    roles: dict[int, Role] = {}
    for rank, idx in enumerate(slots):
        if rank < mafia_count:
            roles[idx] = Role.MAFIA
        elif rank < mafia_count + DOCTOR_COUNT:
            roles[idx] = Role.DOCTOR
        else:
            roles[idx] = Role.VILLAGER

    return [
        Player(username=p.username, role=roles[i], alive=p.alive, self_heal_used=p.self_heal_used)
        for i, p in enumerate(players)
    ]


def start_game(state: GameState, username: str, seed: Optional[int] = None) -> GameState:
    """
    Host-only lobby -> night transition. Assigns roles with optional seed.
    Returns new state.
    """
    _require_host(state, username, "start the game")
    _require_phase(state, Phase.LOBBY)
    players = assign_roles(state.players, random.Random(seed))

    state = copy.deepcopy(state)
    state.players = players
    state.round_index = 0
    _emit(
        state,
        Event(
            kind=EventKind.GAME_START,
            round_index=0,
            phase=Phase.NIGHT,
            message=f"Game started with {len(players)} players.",
        ),
    )
    _enter_phase(state, Phase.NIGHT, "Night 1.")
    logger.info(
        "Game %s started: %d players, %d mafia",
        state.game_id,
        len(players),
        mafia_count_for(len(players)),
    )
    return state


def submit_mafia_target(state: GameState, username: str, target: Optional[str]) -> GameState:
    """Record (or overwrite) this mafia member's night target. Returns new state."""
    me = _require_living_player(state, username)
    _require_phase(state, Phase.NIGHT)
    if me.role != Role.MAFIA:
        raise Forbidden("Not mafia or dead")
    victim = _require_living_target(state, target)

    state = copy.deepcopy(state)
    state.mafia_targets[me.username] = victim.username
    return state


def submit_doctor_target(state: GameState, username: str, target: Optional[str]) -> GameState:
    """
    Set the doctor's protection for this night. A self-target consumes the
    doctor's single self-heal immediately. Returns new state.
    """
    me = _require_living_player(state, username)
    _require_phase(state, Phase.NIGHT)
    if me.role != Role.DOCTOR:
        raise Forbidden("Not doctor or dead")
    if target == me.username and me.self_heal_used:
        raise SelfHealExhausted()
    patient = _require_living_target(state, target)

    state = copy.deepcopy(state)
    state.doctor_target = patient.username
    if patient.username == me.username:
        state.replace_player(
            Player(username=me.username, role=me.role, alive=me.alive, self_heal_used=True)
        )
    return state


def submit_day_vote(state: GameState, username: str, target: Optional[str]) -> GameState:
    """Cast, change or (with target=None) retract a day vote. Returns new state."""
    me = _require_living_player(state, username)
    _require_phase(state, Phase.DAY)

    if target:
        accused = _require_living_target(state, target)
        state = copy.deepcopy(state)
        state.day_votes[me.username] = accused.username
        return state

    state = copy.deepcopy(state)
    state.day_votes.pop(me.username, None)
    return state


def tally_votes(targets: Iterable[str]) -> Optional[str]:
    """
    Plurality winner of targets, or None for no votes.
    Ties go to the tied candidate whose first vote came earliest.
    """
    counts: dict[str, int] = {}
    for target in targets:
        counts[target] = counts.get(target, 0) + 1
    chosen: Optional[str] = None
    best = 0
    for target, count in counts.items():
        if count > best:
            best = count
            chosen = target
    return chosen


def resolve_night(state: GameState, username: str) -> GameState:
    """
    Host-only night resolution: mafia plurality target dies unless the doctor
    protected them. Then win check, then day. Returns new state.
    """
    _require_host(state, username, "resolve night")
    _require_phase(state, Phase.NIGHT)

    state = copy.deepcopy(state)
    victim = tally_votes(state.mafia_targets.values())
    if victim is None:
        _emit(
            state,
            Event(
                kind=EventKind.QUIET_NIGHT,
                round_index=state.round_index,
                phase=Phase.NIGHT,
                message="The night passed quietly.",
            ),
        )
    elif victim == state.doctor_target:
        _emit(
            state,
            Event(
                kind=EventKind.NIGHT_SAVE,
                round_index=state.round_index,
                phase=Phase.NIGHT,
                message="The doctor saved the mafia's target; no one died.",
            ),
        )
    else:
        _eliminate(state, victim)
        _emit(
            state,
            Event(
                kind=EventKind.NIGHT_KILL,
                round_index=state.round_index,
                phase=Phase.NIGHT,
                message=f"{victim} was killed during the night.",
                target=victim,
            ),
        )
    logger.info("Game %s night %d resolved, victim=%s", state.game_id, state.round_index + 1, victim)

    if not _finish_if_over(state):
        _enter_phase(state, Phase.DAY, f"Day {state.round_index + 1}.")
    return state


def resolve_day(state: GameState, username: str) -> GameState:
    """
    Host-only day resolution: the plurality of day votes is eliminated
    (no save during the day). Then win check, then night. Returns new state.
    """
    _require_host(state, username, "resolve day")
    _require_phase(state, Phase.DAY)

    state = copy.deepcopy(state)
    accused = tally_votes(state.day_votes.values())
    if accused is None:
        _emit(
            state,
            Event(
                kind=EventKind.NO_ELIMINATION,
                round_index=state.round_index,
                phase=Phase.DAY,
                message="No votes; no one was eliminated.",
            ),
        )
    else:
        _eliminate(state, accused)
        _emit(
            state,
            Event(
                kind=EventKind.ELIMINATED,
                round_index=state.round_index,
                phase=Phase.DAY,
                message=f"{accused} was eliminated by vote.",
                target=accused,
            ),
        )
    logger.info("Game %s day %d resolved, eliminated=%s", state.game_id, state.round_index + 1, accused)

    if not _finish_if_over(state):
        state.round_index += 1
        _enter_phase(state, Phase.NIGHT, f"Night {state.round_index + 1}.")
    return state


def get_winner(state: GameState) -> Optional[Winner]:
    """Return the winning side among living players, or None if play continues."""
    alive = state.get_alive_players()
    mafia_alive = sum(1 for p in alive if p.role == Role.MAFIA)
    non_mafia_alive = len(alive) - mafia_alive
    if mafia_alive == 0:
        return Winner.VILLAGERS
    if mafia_alive >= non_mafia_alive:
        return Winner.MAFIA
    return None


def is_game_over(state: GameState) -> bool:
    """True if mafia win or villagers win."""
    return get_winner(state) is not None
