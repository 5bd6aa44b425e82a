"""Internal application services (in-memory, no persistence)."""

from .games import GameSession, GameStore, game_store

__all__ = [
    "GameSession",
    "GameStore",
    "game_store",
]
