# backend/app/routers/games.py
from fastapi import APIRouter, Response

from ..exceptions import from_bowling_error
from ..schemas import (
    FrameOut,
    GameCreate,
    GameIdOut,
    GameOut,
    PlayerCreate,
    PlayerOut,
    PlayerScoreOut,
    RollIn,
)
from ..scoring.bowling import BowlingError, Game
from ..services.games import GameSession, game_store

# Resource-only prefix; versioning is added in main.py
router = APIRouter(prefix="/games", tags=["games"])


def _player_score_out(game: Game, player_id: int) -> PlayerScoreOut:
    # frames_for raises PlayerNotFoundError for unknown ids
    frames = [
        FrameOut(
            index=f.index,
            rolls=f.pins,
            score=f.score,
            strike=f.scored_a_strike,
            spare=f.scored_a_spare,
        )
        for f in game.frames_for(player_id)
    ]
    player = game.players[player_id]
    return PlayerScoreOut(
        id=player.id,
        name=player.name,
        total=game.get_player_score(player_id),
        frameIndex=player.frame_index,
        frames=frames,
        runningTotals=game.running_totals(player_id),
    )


def _game_out(session: GameSession) -> GameOut:
    game = session.game
    winner = game.winner
    return GameOut(
        id=session.id,
        maxPlayers=game.max_players,
        players=[_player_score_out(game, p.id) for p in game.players],
        currentPlayer=game.current_player.id if game.players else None,
        currentFrame=game.current_frame_index if game.players else None,
        finished=game.is_finished,
        winner=PlayerOut(id=winner.id, name=winner.name) if winner else None,
    )


# POST /api/v0/games
@router.post("", response_model=GameOut, status_code=201)
async def create_game(body: GameCreate) -> GameOut:
    try:
        session = await game_store.create(body.maxPlayers, body.players)
    except BowlingError as exc:
        raise from_bowling_error(exc) from exc
    return _game_out(session)


@router.get("", response_model=list[GameIdOut])
async def list_games() -> list[GameIdOut]:
    return [GameIdOut(id=gid) for gid in await game_store.ids()]


@router.get("/{game_id}", response_model=GameOut)
async def get_game(game_id: str) -> GameOut:
    return _game_out(await game_store.get(game_id))


@router.delete("/{game_id}", status_code=204)
async def delete_game(game_id: str) -> Response:
    await game_store.delete(game_id)
    return Response(status_code=204)


@router.post("/{game_id}/players", response_model=PlayerOut, status_code=201)
async def add_player(game_id: str, body: PlayerCreate) -> PlayerOut:
    try:
        player = await game_store.add_player(game_id, body.name)
    except BowlingError as exc:
        raise from_bowling_error(exc) from exc
    return PlayerOut(id=player.id, name=player.name)


@router.post("/{game_id}/rolls", response_model=GameOut)
async def roll(game_id: str, body: RollIn) -> GameOut:
    try:
        session = await game_store.roll(game_id, body.pins)
    except BowlingError as exc:
        raise from_bowling_error(exc) from exc
    return _game_out(session)


@router.get("/{game_id}/players/{player_id}/score", response_model=PlayerScoreOut)
async def get_player_score(game_id: str, player_id: int) -> PlayerScoreOut:
    session = await game_store.get(game_id)
    try:
        return _player_score_out(session.game, player_id)
    except BowlingError as exc:
        raise from_bowling_error(exc) from exc
