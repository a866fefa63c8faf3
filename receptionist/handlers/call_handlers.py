"""
Handles call lifecycle requests from staff and visitors.

accept-call claims a waiting call, call-decision completes it, and end-call
lets either party hang up before a decision is recorded.
"""

from typing import Any, Dict, List

from receptionist.models.message_schemas import (
    AcceptCallMessage,
    CallAcceptedEvent,
    CallCompletedEvent,
    CallDecisionMessage,
    CallStartedResponse,
    DecisionSavedResponse,
    EndCallMessage,
    Outbound,
)
from receptionist.services.switchboard import Switchboard


def handle_accept_call(
    message: Dict[str, Any],
    connection_id: str,
    switchboard: Switchboard,
) -> List[Outbound]:
    """
    Handle the accept-call message from a staff dashboard.

    Args:
        message: The accept-call message with the call id
        connection_id: Staff connection trying to claim the call
        switchboard: Shared call-routing state

    Returns:
        call-started for the winner, call-accepted for the visitor and
        call-claimed for the other staff dashboards
    """
    accept = AcceptCallMessage(**message)
    call = switchboard.call_queue.accept_call(accept.callId, connection_id)

    started = CallStartedResponse(
        callId=call.id,
        clientId=call.visitor_id,
        clientName=call.client_name,
        purpose=call.purpose,
    )
    accepted = CallAcceptedEvent(
        callId=call.id,
        staffId=connection_id,
        staffName=call.staff_name,
        staffDepartment=call.staff_department,
    )
    return (
        [Outbound(connection_id, started)]
        + switchboard.notifications.notify_visitor(call, accepted)
        + switchboard.notifications.broadcast_call_claimed(call)
    )


def handle_call_decision(
    message: Dict[str, Any],
    connection_id: str,
    switchboard: Switchboard,
) -> List[Outbound]:
    """
    Handle the call-decision message from the staff member holding the call.

    Returns:
        call-completed for the visitor and decision-saved for the staff member
    """
    decision = CallDecisionMessage(**message)
    call = switchboard.call_queue.record_decision(
        decision.callId, connection_id, decision.decision, decision.notes
    )

    completed = CallCompletedEvent(callId=call.id, decision=call.decision, notes=call.notes)
    saved = DecisionSavedResponse(callId=call.id, decision=call.decision)
    return switchboard.notifications.notify_visitor(call, completed) + [
        Outbound(connection_id, saved)
    ]


def handle_end_call(
    message: Dict[str, Any],
    connection_id: str,
    switchboard: Switchboard,
) -> List[Outbound]:
    """Handle the end-call message: hang up and tell the other party."""
    end = EndCallMessage(**message)
    ended = switchboard.call_queue.end_call(end.callId, connection_id)
    return switchboard.call_ended_notices(ended, reason="hung up")
