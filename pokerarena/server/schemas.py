"""
Pydantic schemas for API request/response validation.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from pokerarena.core.rules import (
    DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND, DEFAULT_STARTING_CHIPS,
    DEFAULT_WIN_THRESHOLD, MAX_PLAYERS, MIN_PLAYERS,
)


# ============= Request Schemas =============

class StartGameRequest(BaseModel):
    """Request to start a new game."""
    mode: str = Field(..., description="Game mode: fast or smart")
    action_timeout_ms: Optional[int] = Field(default=None, gt=0)
    win_threshold: float = Field(default=DEFAULT_WIN_THRESHOLD, gt=0, le=1)
    models: Optional[List[str]] = Field(
        default=None, min_length=MIN_PLAYERS, max_length=MAX_PLAYERS,
        description="Seat identifiers in seating order",
    )
    small_blind: int = Field(default=DEFAULT_SMALL_BLIND, gt=0)
    big_blind: int = Field(default=DEFAULT_BIG_BLIND, gt=0)
    starting_chips: int = Field(default=DEFAULT_STARTING_CHIPS, gt=0)


class ReasoningRequest(BaseModel):
    """Request to attach a rationale to an action log entry."""
    action_index: int = Field(..., ge=0)
    reasoning: str = Field(..., min_length=1)


# ============= Response Schemas =============

class StartGameResponse(BaseModel):
    """A freshly started game."""
    game_id: str
    state: Dict[str, Any]


class GameResponse(BaseModel):
    """Game state plus its replay log."""
    state: Dict[str, Any]
    log: Dict[str, Any]


class ActionResponse(BaseModel):
    """Result of one played action."""
    state: Dict[str, Any]
    action: Dict[str, Any]
    used_fallback: bool
    message: Optional[str] = None


class LegalActionsResponse(BaseModel):
    """Legal actions for the current player."""
    model: Optional[str] = None
    actions: List[Dict[str, Any]] = []


class ReasoningResponse(BaseModel):
    """Reasoning stored for an action."""
    reasoning: str
