from __future__ import annotations

from asyncio import Lock
from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
import uuid

from ..config import MAX_GAMES, MAX_PLAYERS
from ..exceptions import GameLimitReached, GameNotFound
from ..scoring.bowling import Game, Player

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    id: str
    game: Game
    lock: Lock = field(default_factory=Lock)


class GameStore:
    """In-memory registry of running games.

    The engine itself is not safe for concurrent use, so every mutation of a
    game happens while holding that game's own lock.
    """

    def __init__(self, max_games: int = MAX_GAMES) -> None:
        self._max_games = max_games
        self._lock = Lock()
        self._sessions: dict[str, GameSession] = {}

    async def create(
        self, max_players: int | None = None, players: Sequence[str] = ()
    ) -> GameSession:
        game = Game(max_players or MAX_PLAYERS)
        for name in players:
            game.add_player(name)

        async with self._lock:
            if len(self._sessions) >= self._max_games:
                raise GameLimitReached(self._max_games)
            session = GameSession(id=uuid.uuid4().hex, game=game)
            self._sessions[session.id] = session

        logger.info(
            "Created game %s (max_players=%d, players=%d)",
            session.id,
            game.max_players,
            len(game.players),
        )
        return session

    async def get(self, game_id: str) -> GameSession:
        async with self._lock:
            session = self._sessions.get(game_id)
        if session is None:
            raise GameNotFound(game_id)
        return session

    async def ids(self) -> list[str]:
        async with self._lock:
            return list(self._sessions)

    async def delete(self, game_id: str) -> None:
        async with self._lock:
            if self._sessions.pop(game_id, None) is None:
                raise GameNotFound(game_id)
        logger.info("Deleted game %s", game_id)

    async def add_player(self, game_id: str, name: str) -> Player:
        session = await self.get(game_id)
        async with session.lock:
            return session.game.add_player(name)

    async def roll(self, game_id: str, pins: int) -> GameSession:
        session = await self.get(game_id)
        async with session.lock:
            session.game.roll(pins)
            if session.game.is_finished:
                winner = session.game.winner
                logger.info(
                    "Game %s finished; winner %s with %d",
                    game_id,
                    winner.name,
                    session.game.get_player_score(winner.id),
                )
        return session

    async def clear(self) -> None:
        async with self._lock:
            self._sessions.clear()


game_store = GameStore()
