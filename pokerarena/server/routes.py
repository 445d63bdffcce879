"""
HTTP API Routes for PokerArena.

These routes start games, play them one action at a time, and expose the
state and replay log. Engine errors are mapped to HTTP status codes here.
"""

from typing import Any, Dict
from fastapi import APIRouter, HTTPException, Request
import logging

from pokerarena.core.actions import enumerate_legal_actions
from pokerarena.core.errors import GameOver
from pokerarena.core.game import GameSettings, build_game_log
from pokerarena.core.rules import DEFAULT_MODELS, GameMode
from pokerarena.server.schemas import (
    ActionResponse, GameResponse, LegalActionsResponse,
    ReasoningRequest, ReasoningResponse, StartGameRequest, StartGameResponse,
)
from pokerarena.server.service import GameService
from pokerarena.server.storage import GameNotFound

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> GameService:
    """The GameService attached to the running app."""
    return request.app.state.service


def _not_found(error: GameNotFound) -> HTTPException:
    return HTTPException(status_code=404, detail=str(error))


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {"status": "ok"}


@router.post("/games", response_model=StartGameResponse)
async def start_game(req: StartGameRequest, request: Request) -> Dict[str, Any]:
    """
    Start a new game and deal its first hand.
    """
    service = get_service(request)

    try:
        mode = GameMode(req.mode)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid mode: {req.mode}")

    try:
        settings = GameSettings(
            small_blind=req.small_blind,
            big_blind=req.big_blind,
            starting_chips=req.starting_chips,
            action_timeout_ms=req.action_timeout_ms,
            win_threshold=req.win_threshold,
            models=tuple(req.models) if req.models else DEFAULT_MODELS,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    state = service.start_game(mode, settings)
    return {"game_id": state.id, "state": state.to_dict()}


@router.get("/games/{game_id}", response_model=GameResponse)
async def get_game(game_id: str, request: Request) -> Dict[str, Any]:
    """
    Get the current game state and its replay log.
    """
    service = get_service(request)
    try:
        state = service.repository.get(game_id)
    except GameNotFound as e:
        raise _not_found(e)

    return {"state": state.to_dict(), "log": build_game_log(state).to_dict()}


@router.post("/games/{game_id}/action", response_model=ActionResponse)
async def take_action(game_id: str, request: Request) -> Dict[str, Any]:
    """
    Play one action for the current player.

    The seat's agent decides; slow or illegal decisions are replaced by the
    fallback action.
    """
    service = get_service(request)

    try:
        result = await service.step(game_id)
    except GameNotFound as e:
        raise _not_found(e)
    except GameOver:
        state = service.repository.get(game_id)
        winner = state.winner
        raise HTTPException(
            status_code=400,
            detail={"error": "Game finished", "winner": winner.model if winner else None},
        )

    message = None
    if result.state.is_finished:
        message = "Game finished"
    elif result.hand_ended:
        message = "Hand ended, new hand started"

    logger.info(
        f"Game {game_id}: {result.log.model} {result.log.action.value}"
        f"{' (fallback)' if result.used_fallback else ''}"
    )

    return {
        "state": result.state.to_dict(),
        "action": result.log.to_dict(),
        "used_fallback": result.used_fallback,
        "message": message,
    }


@router.delete("/games/{game_id}")
async def delete_game(game_id: str, request: Request) -> Dict[str, Any]:
    """
    Remove a game and its seated agents.
    """
    service = get_service(request)
    try:
        async with service.repository.lock(game_id):
            service.end_game(game_id)
    except GameNotFound as e:
        raise _not_found(e)

    return {"deleted": game_id}


@router.get("/games/{game_id}/legal_actions", response_model=LegalActionsResponse)
async def get_legal_actions(game_id: str, request: Request) -> Dict[str, Any]:
    """
    Get legal actions for the current player.
    """
    service = get_service(request)
    try:
        state = service.repository.get(game_id)
    except GameNotFound as e:
        raise _not_found(e)

    player = state.current_player
    if player is None:
        return {"model": None, "actions": []}

    actions = enumerate_legal_actions(player, state)
    return {"model": player.model, "actions": [a.to_dict() for a in actions]}


@router.post("/games/{game_id}/reasoning", response_model=ReasoningResponse)
async def attach_reasoning(game_id: str, req: ReasoningRequest, request: Request) -> Dict[str, Any]:
    """
    Attach a rationale to one logged action. The first rationale stored wins.
    """
    service = get_service(request)

    try:
        async with service.repository.lock(game_id):
            reasoning = service.repository.attach_reasoning(game_id, req.action_index, req.reasoning)
    except GameNotFound as e:
        raise _not_found(e)
    except IndexError:
        raise HTTPException(status_code=404, detail="Action not found")

    return {"reasoning": reasoning}
