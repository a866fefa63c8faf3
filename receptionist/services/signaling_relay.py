"""
Relay for WebRTC signaling messages between the two parties of a call.

Offers, answers and ICE candidates are forwarded verbatim: the relay checks
that the target is live and that sender and target are bound together by an
in-progress call, then adds the sender's id under ``from``. Session
descriptions and candidates are never parsed.
"""

import logging
from typing import Any, Dict

from receptionist.config.constants import CALL_STATUS_IN_PROGRESS, LOGGER_NAME
from receptionist.errors import InvalidRequest, TargetUnreachable
from receptionist.models.call_queue import CallQueue
from receptionist.models.message_schemas import Outbound
from receptionist.models.session_registry import SessionRegistry

logger = logging.getLogger(LOGGER_NAME)


class SignalingRelay:
    """Forwards signaling messages between connections bound by an in-progress call."""

    def __init__(self, registry: SessionRegistry, call_queue: CallQueue):
        self._registry = registry
        self._call_queue = call_queue

    def relay(self, sender_id: str, message: Dict[str, Any]) -> Outbound:
        """
        Address a signaling message to its target.

        Args:
            sender_id: Connection id the message arrived on
            message: The inbound frame, including ``type`` and ``target``

        Returns:
            The message to deliver to the target, with ``from`` set to the sender

        Raises:
            TargetUnreachable: If the target is not a live connection
            InvalidRequest: If sender and target are not the two parties of an
                in-progress call
        """
        target_id = message.get("target")
        if not target_id or not self._registry.is_live(target_id):
            raise TargetUnreachable(f"Signaling target {target_id} is not connected")

        call = self._call_queue.active_call_for(sender_id)
        if (
            call is None
            or call.status != CALL_STATUS_IN_PROGRESS
            or {call.visitor_id, call.staff_id} != {sender_id, target_id}
        ):
            raise InvalidRequest("No active call with that peer")

        forwarded = dict(message)
        forwarded["from"] = sender_id
        logger.debug(f"Relaying {message.get('type')} from {sender_id} to {target_id} for call {call.id}")
        return Outbound(target_id, forwarded)
