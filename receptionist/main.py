"""
FastAPI server for the reception call-routing and signaling relay.

This module initializes the FastAPI application that visitor widgets and staff
dashboards connect to. Both sides share one WebSocket endpoint; the first event
a connection sends (start-conversation or staff-login) decides its role.

Read-only HTTP endpoints expose the call queue for dashboards and monitoring.
"""

from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket

from receptionist.config import settings
from receptionist.config.constants import CALL_STATUS_WAITING, ROLE_STAFF, ROLE_VISITOR
from receptionist.config.logging_config import configure_logging
from receptionist.errors import UnknownCall
from receptionist.services.call_archive import CallArchive
from receptionist.services.switchboard import Switchboard
from receptionist.websocket_manager import WebSocketManager

# Configure logging
logger = configure_logging(settings.LOG_LEVEL)

# Create FastAPI application
app = FastAPI(
    title="Reception Relay",
    description="Call routing and WebRTC signaling relay between website visitors and reception staff",
    version="1.0.0",
)

archive = CallArchive(settings.CALL_ARCHIVE_PATH) if settings.CALL_ARCHIVE_PATH else None
switchboard = Switchboard(staff_access_key=settings.STAFF_ACCESS_KEY, archive=archive)

# Create WebSocket manager
websocket_manager = WebSocketManager(switchboard)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint shared by visitor widgets and staff dashboards.

    This endpoint handles the complete WebSocket lifecycle:
    - Visitor sign-on and call requests (start-conversation)
    - Staff sign-on, queue reconciliation and call claiming
    - Relaying offer, answer and ice-candidate messages between the two parties
    - Call decisions, hang-ups and disconnect cleanup
    """
    await websocket_manager.handle_websocket(websocket)


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring system status.

    Returns:
        dict: Status plus live connection counts and the length of the waiting queue.
    """
    registry = switchboard.registry
    return {
        "status": "healthy",
        "visitors_connected": registry.count(ROLE_VISITOR),
        "staff_connected": registry.count(ROLE_STAFF),
        "waiting_calls": len(switchboard.call_queue.list_waiting()),
    }


@app.get("/api/calls")
async def list_calls(staffId: Optional[str] = None, status: Optional[str] = None):
    """List known calls, newest first; ``staffId`` gives one staff member's history."""
    calls = switchboard.call_queue.list_calls(staff_id=staffId, status=status)
    return {"calls": [call.model_dump(mode="json") for call in calls]}


@app.get("/api/calls/waiting")
async def list_waiting_calls():
    """List waiting calls, oldest first."""
    calls = switchboard.call_queue.list_waiting()
    return {"status": CALL_STATUS_WAITING, "calls": [call.to_summary() for call in calls]}


@app.get("/api/calls/{call_id}")
async def get_call(call_id: str):
    try:
        call = switchboard.call_queue.get_call(call_id)
    except UnknownCall as e:
        raise HTTPException(status_code=404, detail=e.message)
    return call.model_dump(mode="json")


@app.get("/")
async def root():
    """Root endpoint to display basic information about the API.

    Returns:
        dict: Basic information about the API and its purpose.
    """
    return {
        "name": "Reception Relay",
        "description": "Call routing and WebRTC signaling relay between website visitors and reception staff",
        "version": "1.0.0",
        "endpoints": {
            "/ws": "WebSocket endpoint for visitors and staff",
            "/health": "Health check endpoint",
            "/api/calls": "Call history, filterable by staffId and status",
            "/api/calls/waiting": "Waiting calls, oldest first",
        },
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        websocket_ping_interval=5,
        websocket_ping_timeout=20,
        http="h11",
    )
