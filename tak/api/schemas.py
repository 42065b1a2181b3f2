"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a client (renderer,
scripted player) and the engine. Boards are sent as plain snapshots:
every field lists its stones bottom to top.

Error Codes:
- INVALID_BOARD_SIZE: No setup is known for the requested size
- SESSION_NOT_FOUND: Session does not exist or has been ended
- NOTATION_SYNTAX: Move text could not be parsed
- ILLEGAL_MOVE: Move parsed but the rules reject it
- GAME_OVER: Session already has a result
- VALIDATION_ERROR: Request body does not match the schema
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class PlayerId(str, Enum):
    """Player identifiers as seen by clients."""
    FIRST = "first"
    SECOND = "second"
    BOTH = "both"
    NONE = "none"


class StoneKind(str, Enum):
    """Stone types."""
    FLAT = "flat"
    STANDING = "standing"
    CAPSTONE = "capstone"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_BOARD_SIZE = "INVALID_BOARD_SIZE"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    NOTATION_SYNTAX = "NOTATION_SYNTAX"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    GAME_OVER = "GAME_OVER"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class StoneInfo(BaseModel):
    """One stone in a stack."""
    owner: PlayerId
    stone_type: StoneKind

    model_config = {"from_attributes": True}


class FieldInfo(BaseModel):
    """One board field and its stack, bottom to top."""
    x: int
    y: int
    square: str = Field(description="Square name, e.g. 'b2'")
    stones: list[StoneInfo] = Field(default_factory=list)
    controlled_by: PlayerId = PlayerId.NONE

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """Player information for display."""
    player: PlayerId
    name: str
    num_stones: int = Field(0, description="Unplaced stones in reserve")
    num_capstones: int = Field(0, description="Unplaced capstones in reserve")
    is_current_turn: bool = False

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    board_size: int = Field(5, description="Board size, 3 to 8")
    first_player_name: str = Field("First", description="Display name for the first player")
    second_player_name: str = Field("Second", description="Display name for the second player")


class MoveRequest(BaseModel):
    """A move in notation for the player to act next."""
    notation: str = Field(..., min_length=1, description="Move text, e.g. 'c2', 'Sb1', '3a1>12'")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class BoardSetupResponse(BaseModel):
    """Pieces each player starts with for a board size."""
    board_size: int
    num_stones: int
    num_capstones: int


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    board_size: int
    players: list[PlayerInfo] = Field(default_factory=list)
    current_player: PlayerId = PlayerId.NONE
    turn_number: int = Field(0, description="Number of moves played")
    winner: PlayerId = PlayerId.NONE
    score: int = -1
    created_at: float = 0.0
    api_version: str = "v1"


class BoardStateResponse(BaseModel):
    """Complete board snapshot for rendering."""
    session_id: str
    status: SessionStatus
    board_size: int
    fields: list[FieldInfo] = Field(default_factory=list)
    players: list[PlayerInfo] = Field(default_factory=list)
    current_player: PlayerId = PlayerId.NONE
    history: list[str] = Field(default_factory=list, description="Applied moves in notation")
    is_consistent: bool = Field(True, description="Result of the engine's state audit")
    api_version: str = "v1"


class MoveResponse(BaseModel):
    """Response after submitting a move."""
    session_id: str
    accepted: bool
    move: Optional[str] = Field(None, description="Canonical text of the applied move")
    status: SessionStatus
    next_player: PlayerId = PlayerId.NONE
    winner: PlayerId = PlayerId.NONE
    score: int = -1
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
