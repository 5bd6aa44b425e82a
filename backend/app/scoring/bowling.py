"""Ten-pin bowling scoring engine.

``Game`` takes one roll at a time for a rotation of registered players and
keeps every frame score current, crediting strike and spare bonuses as the
following balls are rolled. ``init_state``/``apply``/``summary`` drive a game
from ``{"type": "ROLL", "pins": n}`` events like the other scoring modules.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, List, Optional, Tuple

from ..config import MAX_PLAYERS

logger = logging.getLogger(__name__)

NUMBER_OF_PINS = 10
MAX_FRAMES = 10
LAST_FRAME = MAX_FRAMES - 1


class ErrorKind(str, Enum):
    CAPACITY_EXCEEDED = "capacity_exceeded"
    ALREADY_STARTED = "already_started"
    NO_PLAYERS = "no_players"
    OUT_OF_RANGE = "out_of_range"
    GAME_OVER = "game_over"
    PLAYER_NOT_FOUND = "player_not_found"


class BowlingError(Exception):
    """Base class for rejected game operations.

    ``kind`` tells callers which rule was broken without matching on the
    exception class. A rejected call never changes the game state.
    """

    kind: ErrorKind

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class TooManyPlayersError(BowlingError):
    kind = ErrorKind.CAPACITY_EXCEEDED


class GameAlreadyStartedError(BowlingError):
    kind = ErrorKind.ALREADY_STARTED


class NoPlayersError(BowlingError):
    kind = ErrorKind.NO_PLAYERS


class PinsOutOfRangeError(BowlingError):
    kind = ErrorKind.OUT_OF_RANGE


class GameOverError(BowlingError):
    kind = ErrorKind.GAME_OVER


class PlayerNotFoundError(BowlingError):
    kind = ErrorKind.PLAYER_NOT_FOUND


@dataclass(frozen=True)
class Roll:
    id: int
    pins: int


@dataclass
class Frame:
    player_id: int
    index: int
    score: int = 0
    scored_a_strike: bool = False
    scored_a_spare: bool = False
    rolls: List[Roll] = field(default_factory=list)
    current_try: int = 0
    is_latest: bool = False

    @property
    def is_last(self) -> bool:
        return self.index == LAST_FRAME

    @property
    def pins(self) -> List[int]:
        return [roll.pins for roll in self.rolls]

    @property
    def pins_standing(self) -> int:
        standing = NUMBER_OF_PINS
        for pins in self.pins:
            standing -= pins
            # The tenth frame gets a fresh rack after a strike or a spare.
            if standing == 0 and self.is_last:
                standing = NUMBER_OF_PINS
        return standing

    @property
    def is_complete(self) -> bool:
        if not self.is_last:
            return self.scored_a_strike or self.current_try == 2
        if self.current_try == 3:
            return True
        return self.current_try == 2 and sum(self.pins) < NUMBER_OF_PINS


@dataclass
class PendingBonus:
    frame: Frame
    balls: int


@dataclass
class Player:
    """A bowler and their cursor through the game.

    ``current_roll`` counts every ball the player has thrown so far and is
    never reset between frames. ``pending_bonus`` holds the (at most two)
    frames still owed balls from a strike or a spare.
    """

    id: int
    name: str
    current_roll: int = 0
    frame_index: int = 0
    pending_bonus: Deque[PendingBonus] = field(
        default_factory=lambda: deque(maxlen=2)
    )


class Game:
    def __init__(self, max_players: int = MAX_PLAYERS) -> None:
        self.max_players = max_players
        self.winner: Optional[Player] = None
        self._players: List[Player] = []
        self._frames: Dict[int, List[Frame]] = {}
        self._current_player_index = 0

    @property
    def players(self) -> Tuple[Player, ...]:
        return tuple(self._players)

    @property
    def current_player(self) -> Player:
        if not self._players:
            raise NoPlayersError("Cannot start game without players")
        return self._players[self._current_player_index]

    @property
    def frame(self) -> Frame:
        """The frame that receives the current player's next ball."""
        player = self.current_player
        return self._frames[player.id][player.frame_index]

    @property
    def current_frame_index(self) -> int:
        return self.current_player.frame_index

    @property
    def has_started(self) -> bool:
        return any(player.current_roll for player in self._players)

    @property
    def is_finished(self) -> bool:
        return self.winner is not None

    def add_player(self, name: str) -> Player:
        if len(self._players) >= self.max_players:
            raise TooManyPlayersError(
                f"Cannot have more than {self.max_players} players in this bowling game"
            )
        if self.has_started:
            raise GameAlreadyStartedError(
                "Cannot add players once the game has started"
            )

        player = Player(id=len(self._players), name=name)
        frames = [Frame(player_id=player.id, index=i) for i in range(MAX_FRAMES)]
        frames[0].is_latest = True

        self._frames[player.id] = frames
        self._players.append(player)
        logger.debug("Registered player %d (%s)", player.id, name)
        return player

    def check_roll(self, pins: int) -> Optional[ErrorKind]:
        """Return why ``roll(pins)`` would be rejected, or ``None``.

        Non-integer ``pins`` (including booleans) raise ``TypeError`` instead.
        """
        if isinstance(pins, bool) or not isinstance(pins, int):
            raise TypeError("pins must be an integer")
        if not self._players:
            return ErrorKind.NO_PLAYERS
        if not 0 <= pins <= NUMBER_OF_PINS:
            return ErrorKind.OUT_OF_RANGE
        if self.is_finished:
            return ErrorKind.GAME_OVER
        if pins > self.frame.pins_standing:
            return ErrorKind.OUT_OF_RANGE
        return None

    def roll(self, pins: int) -> None:
        error = self.check_roll(pins)
        if error is ErrorKind.NO_PLAYERS:
            raise NoPlayersError("Cannot start game without players")
        if error is ErrorKind.GAME_OVER:
            raise GameOverError(
                "Cannot play anymore as the game is already finished."
            )
        if error is ErrorKind.OUT_OF_RANGE:
            standing = NUMBER_OF_PINS if self.is_finished else self.frame.pins_standing
            raise PinsOutOfRangeError(
                f"pins must be between 0 and {standing}, got {pins}"
            )

        player = self.current_player
        frame = self.frame
        self._add_score(player, frame, pins)

        if frame.is_complete:
            self._complete_frame(player, frame)

    def _add_score(self, player: Player, frame: Frame, pins: int) -> None:
        frame.score += pins
        frame.rolls.append(Roll(id=player.current_roll, pins=pins))

        if frame.current_try == 0:
            frame.scored_a_strike = pins == NUMBER_OF_PINS
        elif frame.current_try == 1:
            frame.scored_a_spare = (
                not frame.scored_a_strike and sum(frame.pins) == NUMBER_OF_PINS
            )

        self._credit_bonus(player, pins)

        # Fill balls in the tenth frame are already counted in its own score.
        if not frame.is_last:
            if frame.scored_a_strike:
                player.pending_bonus.append(PendingBonus(frame, balls=2))
            elif frame.scored_a_spare:
                player.pending_bonus.append(PendingBonus(frame, balls=1))

        frame.current_try += 1
        player.current_roll += 1

    def _credit_bonus(self, player: Player, pins: int) -> None:
        for pending in player.pending_bonus:
            pending.frame.score += pins
            pending.balls -= 1
        while player.pending_bonus and player.pending_bonus[0].balls == 0:
            player.pending_bonus.popleft()

    def _complete_frame(self, player: Player, frame: Frame) -> None:
        frame.is_latest = False
        logger.debug(
            "Player %d completed frame %d with %s", player.id, frame.index, frame.pins
        )

        if not frame.is_last:
            player.frame_index += 1
            self._frames[player.id][player.frame_index].is_latest = True
        elif self._current_player_index == len(self._players) - 1:
            self.winner = self._decide_winner()
            logger.debug(
                "Game finished; winner is player %d (%s)",
                self.winner.id,
                self.winner.name,
            )
            return

        self._current_player_index = (self._current_player_index + 1) % len(
            self._players
        )

    def _decide_winner(self) -> Player:
        # max() keeps the first maximal element, so ties go to the earliest
        # registered player.
        return max(self._players, key=lambda p: self.get_player_score(p.id))

    def _player_frames(self, player_id: int) -> List[Frame]:
        try:
            return self._frames[player_id]
        except KeyError:
            raise PlayerNotFoundError(f"player '{player_id}' not found") from None

    def frames_for(self, player_id: int) -> List[Frame]:
        return list(self._player_frames(player_id))

    def frame_scores(self, player_id: int) -> List[int]:
        return [frame.score for frame in self._player_frames(player_id)]

    def running_totals(self, player_id: int) -> List[int]:
        totals: List[int] = []
        cumulative = 0
        for score in self.frame_scores(player_id):
            cumulative += score
            totals.append(cumulative)
        return totals

    def score(self) -> int:
        """Total of the player whose turn it is (0 before anyone joins)."""
        if not self._players:
            return 0
        return self.get_player_score(self.current_player.id)

    def get_player_score(self, player_id: int) -> int:
        return sum(self.frame_scores(player_id))

    def standings(self) -> List[Tuple[Player, int]]:
        return [(player, self.get_player_score(player.id)) for player in self._players]


def init_state(config: Dict) -> Dict:
    game = Game(int(config.get("maxPlayers", MAX_PLAYERS)))
    for name in config.get("players", []):
        game.add_player(name)
    return {"config": config, "game": game}


def apply(event: Dict, state: Dict) -> Dict:
    game: Game = state["game"]
    kind = event.get("type")
    if kind == "PLAYER":
        name = event.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("invalid bowling event")
        game.add_player(name.strip())
    elif kind == "ROLL":
        pins = event.get("pins")
        if isinstance(pins, bool) or not isinstance(pins, int):
            raise ValueError("invalid bowling event")
        game.roll(pins)
    else:
        raise ValueError("invalid bowling event")
    return state


def summary(state: Dict) -> Dict:
    game: Game = state["game"]
    players = []
    for player in game.players:
        frames = game.frames_for(player.id)
        players.append(
            {
                "id": player.id,
                "name": player.name,
                "frames": [frame.pins for frame in frames],
                "scores": game.frame_scores(player.id),
                "runningTotals": game.running_totals(player.id),
                "total": game.get_player_score(player.id),
            }
        )
    current = game.current_player.id if game.players else None
    return {
        "players": players,
        "currentPlayer": current,
        "currentFrame": game.current_frame_index if game.players else None,
        "winner": game.winner.id if game.winner else None,
    }
