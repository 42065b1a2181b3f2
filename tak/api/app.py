"""
FastAPI Application - REST API over the rules engine.

Endpoints:
    GET    /api/v1/health                     Health check
    GET    /api/v1/setups/{size}              Starting reserve for a board size
    POST   /api/v1/sessions                   Create game session
    GET    /api/v1/sessions                   List sessions
    GET    /api/v1/sessions/{id}              Get session status
    GET    /api/v1/sessions/{id}/board        Get board snapshot
    POST   /api/v1/sessions/{id}/moves        Submit a move in notation
    DELETE /api/v1/sessions/{id}              End session

Move Flow:
    1. POST /moves with the notation of the player to act next
    2. Rejected moves return an ErrorResponse; the board is unchanged
    3. Accepted moves return the canonical move text and, once the game
       is decided, the winner and score

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import os

from .. import __version__

# Environment configuration
TAK_ENV = os.getenv("TAK_ENV", "development")
TAK_DEFAULT_BOARD_SIZE = int(os.getenv("TAK_DEFAULT_BOARD_SIZE", "5"))
TAK_SESSION_MAX_AGE = int(os.getenv("TAK_SESSION_MAX_AGE", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Body, Query
        from fastapi.encoders import jsonable_encoder
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        MoveRequest,
        # Response models
        BoardSetupResponse,
        BoardStateResponse,
        EndSessionResponse,
        ErrorResponse,
        HealthResponse,
        MoveResponse,
        SessionListResponse,
        SessionResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Tak Engine API",
        description="""
Rules engine for the board game Tak.

## Move Flow

1. Create a session with `POST /sessions`
2. Submit moves with `POST /sessions/{id}/moves`, e.g. `{"notation": "a0"}`
3. Read the board with `GET /sessions/{id}/board`

## Error Codes

| Code | Description |
|------|-------------|
| `INVALID_BOARD_SIZE` | No setup is known for the board size |
| `SESSION_NOT_FOUND` | Session does not exist |
| `NOTATION_SYNTAX` | Move text could not be parsed |
| `ILLEGAL_MOVE` | Move is not allowed by the rules |
| `GAME_OVER` | Session already has a result |
| `VALIDATION_ERROR` | Request body does not match the schema |
        """,
        version=__version__,
        docs_url=None if TAK_ENV == "production" else "/api/docs",
        redoc_url=None if TAK_ENV == "production" else "/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.INVALID_BOARD_SIZE: 400,
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.NOTATION_SYNTAX: 400,
        ErrorCode.ILLEGAL_MOVE: 409,
        ErrorCode.GAME_OVER: 409,
        ErrorCode.VALIDATION_ERROR: 422,
    }

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_codes.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request, exc: RequestValidationError) -> JSONResponse:
        """Malformed request bodies get the same error shape as engine errors."""
        return make_error_response(
            ErrorResponse(
                error="Request validation failed",
                error_code=ErrorCode.VALIDATION_ERROR,
                details={"errors": jsonable_encoder(exc.errors())},
            )
        )

    # =========================================================================
    # Health & Setup Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="tak-engine", version=__version__)

    @app.get(
        "/api/v1/setups/{board_size}",
        response_model=BoardSetupResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Rules"],
        summary="Starting reserve for a board size",
    )
    async def get_board_setup(board_size: int) -> Union[BoardSetupResponse, JSONResponse]:
        response = api_service.get_board_setup(board_size)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid board size"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(
        request: Optional[CreateSessionRequest] = Body(None),
    ) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session.

        Without a body, a board of the configured default size is used.
        """
        request = request or CreateSessionRequest(board_size=TAK_DEFAULT_BOARD_SIZE)
        response = api_service.create_session(request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        api_service.cleanup_stale_sessions(TAK_SESSION_MAX_AGE)
        return response

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current status of a game session."""
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/board",
        response_model=BoardStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the board snapshot",
    )
    async def get_board(session_id: str) -> Union[BoardStateResponse, JSONResponse]:
        """Every field with its stones bottom to top, plus both reserves."""
        response = api_service.get_board(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/moves",
        response_model=MoveResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Notation could not be parsed"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Move rejected or game over"},
        },
        tags=["Game"],
        summary="Submit a move",
    )
    async def submit_move(session_id: str, request: MoveRequest) -> Union[MoveResponse, JSONResponse]:
        """
        Submit a move for the player to act next.

        A rejected move leaves the board unchanged.
        """
        response = api_service.submit_move(session_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    return app


# For running directly: uvicorn tak.api.app:app
app = create_app()
