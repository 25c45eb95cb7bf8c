"""HTTP layer for Mafia: FastAPI routes, stores and settings."""
