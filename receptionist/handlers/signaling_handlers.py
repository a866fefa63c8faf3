"""
Handles WebRTC signaling messages (offer, answer, ice-candidate).
"""

from typing import Any, Dict, List

from receptionist.models.message_schemas import Outbound, SignalingMessage
from receptionist.services.switchboard import Switchboard


def handle_signaling(
    message: Dict[str, Any],
    connection_id: str,
    switchboard: Switchboard,
) -> List[Outbound]:
    """
    Forward an offer, answer or ICE candidate to the peer named in ``target``.

    Only the envelope is validated. The forwarded frame is the original one
    with ``from`` added.
    """
    SignalingMessage(**message)
    return [switchboard.relay.relay(connection_id, message)]
