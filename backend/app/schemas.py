from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

MAX_NAME_LENGTH = 100


def _clean_name(value: str) -> str:
    if not isinstance(value, str):
        raise ValueError("name must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("name must not be empty")
    if len(trimmed) > MAX_NAME_LENGTH:
        raise ValueError(f"name must be at most {MAX_NAME_LENGTH} characters")
    return trimmed


class GameCreate(BaseModel):
    maxPlayers: Optional[int] = Field(default=None, ge=1)
    players: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @field_validator("players", mode="before")
    @classmethod
    def _validate_players(cls, value):
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("players must be a list of names")
        return [_clean_name(name) for name in value]


class PlayerCreate(BaseModel):
    name: str

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _clean_name(value)


class RollIn(BaseModel):
    # Range is enforced by the engine so errors share one problem code.
    pins: int

    model_config = ConfigDict(extra="forbid")


class FrameOut(BaseModel):
    index: int
    rolls: List[int]
    score: int
    strike: bool
    spare: bool


class PlayerOut(BaseModel):
    id: int
    name: str


class PlayerScoreOut(BaseModel):
    id: int
    name: str
    total: int
    frameIndex: int
    frames: List[FrameOut]
    runningTotals: List[int]


class GameOut(BaseModel):
    id: str
    maxPlayers: int
    players: List[PlayerScoreOut]
    currentPlayer: Optional[int] = None
    currentFrame: Optional[int] = None
    finished: bool
    winner: Optional[PlayerOut] = None


class GameIdOut(BaseModel):
    id: str
