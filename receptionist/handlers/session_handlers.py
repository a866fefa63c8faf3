"""
Handles connection sign-on for visitors and staff.

This module processes the start-conversation message that registers a visitor
and queues their call, and the staff-login and list-waiting messages that put
a staff dashboard on the fan-out list and reconcile it with the current queue.
"""

import hmac
import logging
from typing import Any, Dict, List

from receptionist.config.constants import LOGGER_NAME, ROLE_STAFF, ROLE_VISITOR
from receptionist.errors import InvalidRequest, RelayError
from receptionist.models.call import Identity
from receptionist.models.message_schemas import (
    ConversationStartedResponse,
    ListWaitingMessage,
    LoginErrorResponse,
    LoginSuccessResponse,
    Outbound,
    StaffLoginMessage,
    StartConversationMessage,
    WaitingCallsResponse,
)
from receptionist.services.switchboard import Switchboard

logger = logging.getLogger(LOGGER_NAME)


def handle_start_conversation(
    message: Dict[str, Any],
    connection_id: str,
    switchboard: Switchboard,
) -> List[Outbound]:
    """
    Handle the start-conversation message from a visitor.

    The first message on a visitor connection that queues a call registers
    it. A visitor whose previous call has ended may start another one on the
    same connection; the name and email from the first registration are kept
    and later ones are ignored.

    Args:
        message: The start-conversation message with name, email and purpose
        connection_id: Connection the message arrived on
        switchboard: Shared call-routing state

    Returns:
        conversation-started for the visitor plus a new-call-request for every
        live staff connection
    """
    start = StartConversationMessage(**message)

    registered = False
    if switchboard.registry.is_live(connection_id):
        if switchboard.registry.lookup(connection_id).role != ROLE_VISITOR:
            raise InvalidRequest("Staff connections cannot request calls")
    else:
        switchboard.registry.register(
            connection_id, ROLE_VISITOR, Identity(name=start.name, email=start.email)
        )
        registered = True

    try:
        call = switchboard.call_queue.create_call(
            connection_id, start.purpose, start.description, start.callType
        )
    except RelayError:
        # A visitor only stays registered once a call is queued for them
        if registered:
            switchboard.registry.unregister(connection_id)
        raise

    response = ConversationStartedResponse(
        sessionId=connection_id, callId=call.id, purpose=call.purpose
    )
    return [Outbound(connection_id, response)] + switchboard.notifications.broadcast_new_call(call)


def handle_staff_login(
    message: Dict[str, Any],
    connection_id: str,
    switchboard: Switchboard,
) -> List[Outbound]:
    """
    Handle the staff-login message from the staff dashboard.

    Credentials are checked upstream; here the connection only has to present
    the shared access key when one is configured. On success the dashboard gets
    the current waiting list, since broadcasts sent before it connected are not
    replayed.

    Returns:
        login-success followed by waiting-calls, or login-error
    """
    login = StaffLoginMessage(**message)

    if switchboard.staff_access_key and not hmac.compare_digest(
        login.accessKey or "", switchboard.staff_access_key
    ):
        logger.warning(f"Rejected staff login for {login.name} on {connection_id}")
        return [Outbound(connection_id, LoginErrorResponse(message="Invalid access key"))]

    identity = Identity(name=login.name, email=login.email, department=login.department)
    switchboard.registry.register(connection_id, ROLE_STAFF, identity)

    user = {"id": connection_id, **identity.model_dump()}
    return [
        Outbound(connection_id, LoginSuccessResponse(user=user)),
        _waiting_calls(connection_id, switchboard),
    ]


def handle_list_waiting(
    message: Dict[str, Any],
    connection_id: str,
    switchboard: Switchboard,
) -> List[Outbound]:
    """Handle the list-waiting message: send the waiting queue to a logged-in staff member."""
    ListWaitingMessage(**message)
    if switchboard.registry.lookup(connection_id).role != ROLE_STAFF:
        raise InvalidRequest("Only staff can list waiting calls")
    return [_waiting_calls(connection_id, switchboard)]


def _waiting_calls(connection_id: str, switchboard: Switchboard) -> Outbound:
    calls = [call.to_summary() for call in switchboard.call_queue.list_waiting()]
    return Outbound(connection_id, WaitingCallsResponse(calls=calls))
