"""
Notification fan-out for call lifecycle events.

New calls are broadcast to every staff connection registered at that moment.
Staff who log in later reconcile through the waiting list sent on login, so a
broadcast never needs to be replayed. Visitor and staff notifications are
addressed to the call's bound connections and silently dropped when that
connection is gone.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel

from receptionist.config.constants import LOGGER_NAME, ROLE_STAFF
from receptionist.models.call import Call
from receptionist.models.message_schemas import (
    CallClaimedEvent,
    CallWithdrawnEvent,
    NewCallRequestEvent,
    Outbound,
)
from receptionist.models.session_registry import SessionRegistry

logger = logging.getLogger(LOGGER_NAME)


class NotificationFanout:
    """Builds the outbound messages that push call events to interested connections."""

    def __init__(self, registry: SessionRegistry):
        self._registry = registry

    def broadcast_new_call(self, call: Call) -> List[Outbound]:
        """Alert every live staff connection about a newly queued call."""
        event = NewCallRequestEvent(
            callId=call.id,
            clientName=call.client_name,
            purpose=call.purpose,
            callType=call.call_type,
            timestamp=call.created_at.isoformat(),
        )
        return self._to_staff(event)

    def broadcast_call_claimed(self, call: Call) -> List[Outbound]:
        """Tell every staff connection except the winner that the call left the queue."""
        return self._to_staff(CallClaimedEvent(callId=call.id), exclude=call.staff_id)

    def broadcast_call_withdrawn(self, call: Call) -> List[Outbound]:
        """Tell every staff connection that a waiting call was abandoned."""
        return self._to_staff(CallWithdrawnEvent(callId=call.id))

    def notify_visitor(self, call: Call, event: BaseModel) -> List[Outbound]:
        return self._to_party(call.visitor_id, event)

    def notify_staff(self, call: Call, event: BaseModel) -> List[Outbound]:
        return self._to_party(call.staff_id, event)

    def _to_party(self, connection_id: Optional[str], event: BaseModel) -> List[Outbound]:
        if connection_id is None or not self._registry.is_live(connection_id):
            logger.debug(f"Dropping {event.type} for disconnected connection {connection_id}")
            return []
        return [Outbound(connection_id, event)]

    def _to_staff(self, event: BaseModel, exclude: Optional[str] = None) -> List[Outbound]:
        recipients = [
            c.connection_id
            for c in self._registry.list_by_role(ROLE_STAFF)
            if c.connection_id != exclude
        ]
        logger.info(f"Broadcasting {event.type} to {len(recipients)} staff connection(s)")
        return [Outbound(connection_id, event) for connection_id in recipients]
