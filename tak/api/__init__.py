"""
API Module - Client interface to the engine.

Exposes the engine via a REST API. A client:
1. Creates a game session for a board size
2. Submits moves in notation
3. Reads board snapshots to render stacks and reserves
4. Ends the session

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    MoveRequest,
    # Responses
    BoardSetupResponse,
    BoardStateResponse,
    ErrorResponse,
    MoveResponse,
    SessionResponse,
    # Shared
    FieldInfo,
    PlayerInfo,
    StoneInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "MoveRequest",
    # Responses
    "BoardSetupResponse",
    "BoardStateResponse",
    "ErrorResponse",
    "MoveResponse",
    "SessionResponse",
    # Shared
    "FieldInfo",
    "PlayerInfo",
    "StoneInfo",
    # Service
    "APIService",
    "create_app",
]
