from pydantic import BaseModel
from typing import Optional

from .scoring.bowling import BowlingError, ErrorKind


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class GameNotFound(DomainException):
    def __init__(self, game_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Game not found",
            detail=f"game '{game_id}' not found",
            code="game_not_found",
        )


class GameLimitReached(DomainException):
    def __init__(self, limit: int) -> None:
        super().__init__(
            status_code=409,
            title="Too many games",
            detail=f"cannot host more than {limit} games at once",
            code="game_limit_reached",
        )


_BOWLING_ERRORS: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.CAPACITY_EXCEEDED: (409, "Game is full"),
    ErrorKind.ALREADY_STARTED: (409, "Game already started"),
    ErrorKind.NO_PLAYERS: (409, "No players"),
    ErrorKind.GAME_OVER: (409, "Game over"),
    ErrorKind.OUT_OF_RANGE: (422, "Pins out of range"),
    ErrorKind.PLAYER_NOT_FOUND: (404, "Player not found"),
}


def from_bowling_error(exc: BowlingError) -> DomainException:
    """Translate a rejected engine call into a problem response."""

    status_code, title = _BOWLING_ERRORS[exc.kind]
    return DomainException(
        status_code=status_code,
        title=title,
        detail=exc.detail,
        code=exc.kind.value,
    )
