"""Domain errors raised by the game engine and stores."""


class GameError(Exception):
    """Base class for every rejected game operation."""

    message = "Game error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class NotFound(GameError):
    message = "Game not found"


class Unauthenticated(GameError):
    message = "Not authenticated"


class Forbidden(GameError):
    message = "Not allowed"


class WrongPhase(GameError):
    message = "Operation not valid in the current phase"


class GameNotStartable(WrongPhase):
    """Joining a game that has already left the lobby."""

    message = "Game already started"


class InvalidTarget(GameError):
    message = "Invalid target"


class SelfHealExhausted(GameError):
    message = "Self-heal already used"


class RosterSizeInvalid(GameError):
    message = "Players must be between 4 and 15 to start"


class GameFull(GameError):
    message = "Game is full (max 15)"


class UsernameTaken(GameError):
    message = "Username already exists"


class InvalidCredentials(GameError):
    message = "Invalid credentials"
