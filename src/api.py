import logging
import threading
import uuid
from collections import OrderedDict
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

import game_engine
from best_score import BestScoreStore
from game_state import GameState, GameStatus
from settings import configure_logging, load_settings
from tiles import RandomTileSource

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="2048 Game API",
    description="Play 2048 over HTTP. The server keeps each game's state; "\
                "clients send directions and read back the board.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Game sessions ---

class GameSession:
    """One game plus the lock that serializes every change made to it."""

    def __init__(self, game_id: str, state: GameState):
        self.game_id = game_id
        self.state = state
        self.lock = threading.Lock()

class SessionRegistry:
    """
    In-memory games of this process. They all share one best score store.

    At most max_sessions games are kept; creating one more drops the game
    that was used least recently.
    """

    def __init__(self, best_score_store: BestScoreStore, seed: Optional[int] = None, max_sessions: int = 1000):
        self.best_score_store = best_score_store
        self.seed = seed
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, GameSession]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self) -> GameSession:
        game_id = uuid.uuid4().hex
        state = GameState(
            tile_source=RandomTileSource(self.seed),
            best_score_store=self.best_score_store,
        )
        state.reset()
        session = GameSession(game_id, state)
        with self._lock:
            self._sessions[game_id] = session
            while len(self._sessions) > self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info("Evicted game %s", evicted_id)
        logger.info("Created game %s", game_id)
        return session

    def get(self, game_id: str) -> GameSession:
        with self._lock:
            session = self._sessions.get(game_id)
            if session is not None:
                self._sessions.move_to_end(game_id)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Unknown game id: {game_id}")
        return session

    def delete(self, game_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(game_id, None)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Unknown game id: {game_id}")
        logger.info("Deleted game %s", game_id)

registry = SessionRegistry(settings.best_score_store(), seed=settings.seed, max_sessions=settings.max_sessions)

# --- Pydantic Models for API requests and responses ---

class GameStateData(BaseModel):
    """Represents the complete state of a game instance."""
    game_id: str = Field(..., description="Identifier to use in later requests for this game.")
    board: List[List[int]] = Field(..., description="The 4 x 4 game board, represented as a list of lists.")
    score: int = Field(..., description="Current score of the game.")
    best_score: int = Field(..., ge=0, description="Highest score reached on this server.")
    move_count: int = Field(..., ge=0, description="Number of effective moves in this game.")
    status: GameStatus = Field(
        ...,
        description="Current progress state of the game (playing, won, lost)."
    )

class MoveRequestData(BaseModel):
    """Data required to make a move."""
    direction: str = Field(
        ...,
        description="Direction of the move (up, down, left, right)."
    )

class MoveResponseData(GameStateData):
    """Response after a move, including the new game state and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the move resulted in a change to the board state, False otherwise."
    )
    message: Optional[str] = Field(
        default=None,
        description="An optional message, e.g., if a move was invalid, game ended, or other info."
    )

class EngineInfoData(BaseModel):
    """Diagnostic snapshot of a game."""
    can_move: bool
    empty_cells: int = Field(..., ge=0)
    game_status: GameStatus

def _state_data(session: GameSession) -> Dict[str, object]:
    # Callers hold session.lock.
    state = session.state
    stats = state.get_stats()
    return dict(
        game_id=session.game_id,
        board=[list(row) for row in state.get_grid()],
        score=stats["score"],
        best_score=stats["best_score"],
        move_count=stats["move_count"],
        status=stats["status"],
    )

# --- API Endpoints ---

@app.post("/game/new", response_model=GameStateData, summary="Start a New 2048 Game")
@limiter.limit(settings.rate_limit)
def start_new_game(request: Request):
    """
    Starts a new 4 x 4 game with two random tiles.

    Returns the initial game state, including the `game_id` to use for moves.
    """
    try:
        session = registry.create()
        with session.lock:
            return GameStateData(**_state_data(session))
    except Exception as e:
        logger.error("Unexpected error in /game/new: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred during game creation: {str(e)}")

@app.get("/game/{game_id}", response_model=GameStateData, summary="Get a Game's State")
@limiter.limit(settings.rate_limit)
def get_game(request: Request, game_id: str):
    session = registry.get(game_id)
    with session.lock:
        return GameStateData(**_state_data(session))

@app.post("/game/{game_id}/move", response_model=MoveResponseData, summary="Make a Move in the Game")
@limiter.limit(settings.rate_limit)
def make_move(request: Request, game_id: str, request_data: MoveRequestData):
    """
    Processes a player's move in the game.

    The server will:
    1. Slide and merge the tiles in the given `direction`.
    2. If the move changed the board, add a new random tile (2 or 4).
    3. Determine the new game status (playing, won, lost).

    Returns the updated game state, whether the move was effective, and an optional message.
    """
    direction = game_engine.parse_direction(request_data.direction)
    if direction is None:
        raise HTTPException(status_code=400, detail=f"Invalid direction: {request_data.direction}")

    session = registry.get(game_id)
    message_for_client: Optional[str] = None

    try:
        with session.lock:
            status_before = session.state.get_game_status()
            move_was_effective = game_engine.move(session.state, direction)
            data = _state_data(session)
    except Exception as e:
        logger.error("Unexpected error in /game/%s/move: %s", game_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected server error occurred while processing the move: {str(e)}")

    if status_before != GameStatus.PLAYING:
        message_for_client = f"Game is {status_before.value}; no moves are accepted."
    elif not move_was_effective:
        message_for_client = "Move was not effective; board state unchanged by slide."
    # Enhance client message based on game status
    elif data["status"] == GameStatus.WON:
        message_for_client = "Congratulations! You won!"
    elif data["status"] == GameStatus.LOST:
        message_for_client = "Game Over. No more valid moves."

    return MoveResponseData(
        **data,
        move_was_effective=move_was_effective,
        message=message_for_client
    )

@app.post("/game/{game_id}/continue", response_model=GameStateData, summary="Keep Playing After 2048")
@limiter.limit(settings.rate_limit)
def continue_game(request: Request, game_id: str):
    session = registry.get(game_id)
    with session.lock:
        if not session.state.continue_game():
            raise HTTPException(status_code=409, detail="Only a won game can be continued.")
        return GameStateData(**_state_data(session))

@app.post("/game/{game_id}/reset", response_model=GameStateData, summary="Restart a Game")
@limiter.limit(settings.rate_limit)
def reset_game(request: Request, game_id: str):
    session = registry.get(game_id)
    with session.lock:
        session.state.reset()
        return GameStateData(**_state_data(session))

@app.get("/game/{game_id}/engine", response_model=EngineInfoData, summary="Engine Diagnostics")
@limiter.limit(settings.rate_limit)
def engine_info(request: Request, game_id: str):
    session = registry.get(game_id)
    with session.lock:
        return EngineInfoData(**game_engine.get_engine_info(session.state))

@app.delete("/game/{game_id}", status_code=204, summary="Delete a Game")
@limiter.limit(settings.rate_limit)
def delete_game(request: Request, game_id: str):
    """Frees a finished or abandoned game. Its id is unknown afterwards."""
    registry.delete(game_id)
    return Response(status_code=204)
