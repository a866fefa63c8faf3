"""
WebSocket connection manager for the reception relay.

This module implements the server side of the visitor/staff WebSocket protocol,
providing the infrastructure to:
- Accept connections and give each one an opaque connection id
- Route incoming events to the handler registered for their type
- Turn recoverable errors into ``error`` events for the originating connection
- Deliver the outbound messages handlers return to the addressed sockets
- Run the disconnect path exactly once when a socket goes away

Handlers never write to sockets themselves; they return Outbound messages and
the manager delivers them after the state change has been committed.
"""

import json
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from receptionist.config.constants import (
    EVENT_ACCEPT_CALL,
    EVENT_ANSWER,
    EVENT_CALL_DECISION,
    EVENT_END_CALL,
    EVENT_ICE_CANDIDATE,
    EVENT_LIST_WAITING,
    EVENT_OFFER,
    EVENT_STAFF_LOGIN,
    EVENT_START_CONVERSATION,
    LOGGER_NAME,
    ROLE_STAFF,
    VISITOR_CONTINUE_FAILED,
    VISITOR_START_FAILED,
)
from receptionist.errors import RelayError, TargetUnreachable
from receptionist.handlers.call_handlers import (
    handle_accept_call,
    handle_call_decision,
    handle_end_call,
)
from receptionist.handlers.session_handlers import (
    handle_list_waiting,
    handle_staff_login,
    handle_start_conversation,
)
from receptionist.handlers.signaling_handlers import handle_signaling
from receptionist.models.message_schemas import ErrorResponse, Outbound
from receptionist.services.switchboard import Switchboard

logger = logging.getLogger(LOGGER_NAME)

# Type hint for handler functions
HandlerFunc = Callable[[Dict[str, Any], str, Switchboard], List[Outbound]]


class WebSocketManager:
    """Manages WebSocket connections and routes events to the call-routing handlers.

    Each event is routed to a handler based on its "type" field. Handlers run
    synchronously on the event loop, so no two of them interleave mid-mutation.
    """

    def __init__(self, switchboard: Optional[Switchboard] = None):
        self.switchboard = switchboard or Switchboard()
        self.sockets: Dict[str, WebSocket] = {}

        self.handlers: Dict[str, HandlerFunc] = {
            EVENT_START_CONVERSATION: handle_start_conversation,
            EVENT_STAFF_LOGIN: handle_staff_login,
            EVENT_LIST_WAITING: handle_list_waiting,
            EVENT_ACCEPT_CALL: handle_accept_call,
            EVENT_CALL_DECISION: handle_call_decision,
            EVENT_END_CALL: handle_end_call,
            EVENT_OFFER: handle_signaling,
            EVENT_ANSWER: handle_signaling,
            EVENT_ICE_CANDIDATE: handle_signaling,
        }

    def dispatch(self, connection_id: str, message: Dict[str, Any]) -> List[Outbound]:
        """Route one inbound event and return the messages it produced.

        Args:
            connection_id: Connection the event arrived on
            message: Decoded JSON frame

        Returns:
            Messages to deliver, including an ``error`` event for the sender
            when the request failed. A signaling message whose target is gone
            is dropped without telling the sender.
        """
        message_type = message.get("type")
        if not isinstance(message_type, str):
            logger.warning(f"Message without a string type from {connection_id}: {message_type!r}")
            return [self._error(connection_id, None, "Invalid message format")]

        handler = self.handlers.get(message_type)
        if handler is None:
            logger.warning(f"Unhandled message type received: {message_type}")
            return [self._error(connection_id, message_type, f"Unknown event type: {message_type}")]

        try:
            return handler(message, connection_id, self.switchboard)
        except TargetUnreachable as e:
            logger.warning(f"Dropped {message_type} from {connection_id}: {e.message}")
            return []
        except ValidationError as e:
            logger.error(f"Invalid {message_type} message from {connection_id}: {e}")
            return [self._error(connection_id, message_type, "Invalid message format")]
        except RelayError as e:
            logger.warning(f"{type(e).__name__} for {message_type} from {connection_id}: {e.message}")
            return [self._error(connection_id, message_type, e.message)]

    def disconnect(self, connection_id: str) -> List[Outbound]:
        """Forget the socket and run call cleanup for the connection."""
        self.sockets.pop(connection_id, None)
        return self.switchboard.disconnect(connection_id)

    async def deliver(self, outbound: List[Outbound]) -> None:
        """Send each message to its addressed socket; messages for closed sockets are dropped."""
        for item in outbound:
            websocket = self.sockets.get(item.connection_id)
            if websocket is None:
                logger.debug(f"No socket for {item.connection_id}, dropping message")
                continue
            try:
                await websocket.send_text(json.dumps(item.to_dict()))
            except Exception as e:
                # The receiving connection's own loop runs its disconnect path
                logger.warning(f"Failed to deliver to {item.connection_id}: {e}")

    async def handle_websocket(self, websocket: WebSocket):
        """Handle a WebSocket connection throughout its lifecycle.

        Args:
            websocket (WebSocket): The FastAPI WebSocket connection object

        This method:
        1. Accepts the WebSocket connection and assigns it a connection id
        2. Processes incoming events in a loop
        3. Dispatches each event and delivers the resulting messages
        4. Runs the disconnect path when the client goes away or the transport faults
        """
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        self.sockets[connection_id] = websocket
        logger.info(f"WebSocket connection established: {connection_id}")
        client_disconnected = False

        try:
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    logger.error(f"Malformed JSON from {connection_id}")
                    await self.deliver([Outbound(connection_id, ErrorResponse(message="Malformed JSON"))])
                    continue
                if not isinstance(message, dict):
                    await self.deliver([Outbound(connection_id, ErrorResponse(message="Expected a JSON object"))])
                    continue

                logger.info(f"Received {message.get('type')} from {connection_id}")
                await self.deliver(self.dispatch(connection_id, message))

        except WebSocketDisconnect:
            client_disconnected = True
            logger.info(f"Client disconnected: {connection_id}")
        except Exception as e:
            logger.error(f"Error in WebSocket connection {connection_id}: {e}", exc_info=True)
        finally:
            await self.deliver(self.disconnect(connection_id))
            if not client_disconnected:
                try:
                    await websocket.close()
                except RuntimeError as e:
                    logger.debug(f"WebSocket already closed: {e}")
            logger.info(f"WebSocket connection closed: {connection_id}")

    def _error(self, connection_id: str, message_type: Optional[str], reason: str) -> Outbound:
        """Build an error event; visitors see a generic message, staff see the reason."""
        registry = self.switchboard.registry
        is_staff = registry.is_live(connection_id) and registry.lookup(connection_id).role == ROLE_STAFF
        if is_staff or message_type in (EVENT_STAFF_LOGIN, EVENT_LIST_WAITING, EVENT_ACCEPT_CALL, EVENT_CALL_DECISION):
            return Outbound(connection_id, ErrorResponse(message=reason))
        if message_type == EVENT_START_CONVERSATION:
            return Outbound(connection_id, ErrorResponse(message=VISITOR_START_FAILED))
        return Outbound(connection_id, ErrorResponse(message=VISITOR_CONTINUE_FAILED))
