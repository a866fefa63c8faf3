"""
Switchboard: the event-driven core of the reception relay.

The Switchboard owns one Session Registry, one Call Queue, one Signaling Relay
and one Notification Fan-out, and wires them together: unregistering a
connection from the registry drives the call queue's cleanup, and the cleanup
result is turned into notices for whoever was on the other end.

Nothing here touches a socket. Every operation returns the Outbound messages
the transport should deliver.
"""

import logging
from typing import List, Optional

from receptionist.config.constants import CALL_STATUS_WAITING, LOGGER_NAME
from receptionist.models.call import Connection
from receptionist.models.call_queue import AbandonedCall, CallQueue, Clock, utc_now
from receptionist.models.message_schemas import CallEndedEvent, Outbound
from receptionist.models.session_registry import SessionRegistry
from receptionist.services.call_archive import CallArchive
from receptionist.services.notifications import NotificationFanout
from receptionist.services.signaling_relay import SignalingRelay

logger = logging.getLogger(LOGGER_NAME)


class Switchboard:
    """Holds the call-routing state shared by every connection handler."""

    def __init__(
        self,
        clock: Clock = utc_now,
        staff_access_key: str = "",
        archive: Optional[CallArchive] = None,
    ):
        self.registry = SessionRegistry(on_disconnect=self._cleanup_connection)
        self.call_queue = CallQueue(self.registry, clock=clock)
        self.relay = SignalingRelay(self.registry, self.call_queue)
        self.notifications = NotificationFanout(self.registry)
        self.staff_access_key = staff_access_key
        if archive is not None:
            self.call_queue.add_listener(archive)

    def disconnect(self, connection_id: str) -> List[Outbound]:
        """
        Run the disconnect path for a transport connection.

        Connections that never registered (e.g. closed before logging in) have
        nothing to clean up.
        """
        if not self.registry.is_live(connection_id):
            return []
        return self.registry.unregister(connection_id) or []

    def call_ended_notices(self, ended: AbandonedCall, reason: str) -> List[Outbound]:
        """Notices for a call that ended without a decision."""
        call = ended.call
        if ended.previous_status == CALL_STATUS_WAITING:
            return self.notifications.broadcast_call_withdrawn(call)

        event = CallEndedEvent(callId=call.id, reason=reason)
        if ended.counterpart_id == call.visitor_id:
            return self.notifications.notify_visitor(call, event)
        return self.notifications.notify_staff(call, event)

    def _cleanup_connection(self, connection: Connection) -> List[Outbound]:
        outbound = []
        for ended in self.call_queue.abandon(connection.connection_id):
            outbound.extend(self.call_ended_notices(ended, reason=f"{connection.role} disconnected"))
        return outbound
