"""Environment-driven settings and logging setup for the Mafia server."""

import logging
import os

# Default env var names
ENV_LOG_LEVEL = "MAFIA_LOG_LEVEL"
ENV_CORS_ORIGINS = "MAFIA_CORS_ORIGINS"
ENV_ROLE_SEED = "MAFIA_ROLE_SEED"

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_cors_origins() -> list[str]:
    """Allowed CORS origins; '*' unless MAFIA_CORS_ORIGINS lists them comma-separated."""
    raw = os.environ.get(ENV_CORS_ORIGINS, "*")
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


def get_role_seed() -> int | None:
    """Fixed seed for role shuffles, or None for system randomness."""
    raw = os.environ.get(ENV_ROLE_SEED)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-integer %s=%r", ENV_ROLE_SEED, raw)
        return None


def configure_logging() -> None:
    """Configure root logging from MAFIA_LOG_LEVEL."""
    level = os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
