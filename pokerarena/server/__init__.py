"""
PokerArena Server - FastAPI surface, game repository and decision pipeline.
"""

from pokerarena.server.service import GameService
from pokerarena.server.storage import GameNotFound, GameRepository

__all__ = ["GameNotFound", "GameRepository", "GameService"]
