"""
Pydantic models for the reception relay WebSocket protocol.

Every frame exchanged over ``/ws`` is a JSON object whose ``type`` field names
the event. This module defines the inbound events sent by visitor and staff
browsers and the outbound events the server sends back, providing type
validation and documentation for both directions.
"""

from typing import Any, Dict, List, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Base Models
class BaseMessage(BaseModel):
    """Base model for all WebSocket messages."""

    type: str = Field(..., description="Event type identifier")


# Visitor Messages
class StartConversationMessage(BaseMessage):
    """Model for start-conversation message from a visitor."""

    type: Literal["start-conversation"]
    name: str = Field(..., description="Visitor display name")
    email: Optional[str] = Field(None, description="Visitor contact email")
    purpose: str = Field(..., description="Why the visitor wants to talk to staff")
    description: Optional[str] = Field(None, description="Optional detail")
    callType: Literal["video", "audio"] = "video"

    @field_validator("name")
    def validate_name(cls, v):
        """Validate that the visitor name is not empty."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


# Staff Messages
class StaffLoginMessage(BaseMessage):
    """Model for staff-login message from the staff dashboard."""

    type: Literal["staff-login"]
    name: str = Field(..., description="Staff display name")
    email: Optional[str] = None
    department: Optional[str] = None
    accessKey: Optional[str] = Field(None, description="Shared staff access key")

    @field_validator("name")
    def validate_name(cls, v):
        """Validate that the staff name is not empty."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class ListWaitingMessage(BaseMessage):
    """Model for list-waiting message from the staff dashboard."""

    type: Literal["list-waiting"]


class AcceptCallMessage(BaseMessage):
    """Model for accept-call message from the staff dashboard."""

    type: Literal["accept-call"]
    callId: str


class CallDecisionMessage(BaseMessage):
    """Model for call-decision message from the owning staff member."""

    type: Literal["call-decision"]
    callId: str
    decision: Literal["accepted", "rejected"]
    notes: Optional[str] = None


class EndCallMessage(BaseMessage):
    """Model for end-call message from either party."""

    type: Literal["end-call"]
    callId: str


# Signaling Messages
class SignalingMessage(BaseMessage):
    """
    Model for offer, answer and ice-candidate messages.

    Only the target is checked. The session description or candidate travels
    in an extra field (``offer``, ``answer`` or ``candidate``) that is never
    inspected.
    """

    model_config = ConfigDict(extra="allow")

    type: Literal["offer", "answer", "ice-candidate"]
    target: str = Field(..., description="Connection id of the peer")

    @field_validator("target")
    def validate_target(cls, v):
        """Validate that the target is not empty."""
        if not v:
            raise ValueError("Signaling target cannot be empty")
        return v


# Outbound Messages
class ConversationStartedResponse(BaseMessage):
    """Sent to a visitor once their call is queued."""

    type: Literal["conversation-started"] = "conversation-started"
    sessionId: str
    callId: str
    purpose: str


class NewCallRequestEvent(BaseMessage):
    """Broadcast to every staff connection when a call is queued."""

    type: Literal["new-call-request"] = "new-call-request"
    callId: str
    clientName: str
    purpose: str
    callType: str = "video"
    timestamp: str


class LoginSuccessResponse(BaseMessage):
    """Sent to a staff connection after a successful login."""

    type: Literal["login-success"] = "login-success"
    user: Dict[str, Any]


class LoginErrorResponse(BaseMessage):
    """Sent to a connection whose staff login was refused."""

    type: Literal["login-error"] = "login-error"
    message: str


class WaitingCallsResponse(BaseMessage):
    """Snapshot of the waiting queue, oldest first."""

    type: Literal["waiting-calls"] = "waiting-calls"
    calls: List[Dict[str, Any]]


class CallStartedResponse(BaseMessage):
    """Sent to the staff member who won the call."""

    type: Literal["call-started"] = "call-started"
    callId: str
    clientId: str
    clientName: str
    purpose: str


class CallAcceptedEvent(BaseMessage):
    """Sent to the visitor when a staff member picks up their call."""

    type: Literal["call-accepted"] = "call-accepted"
    callId: str
    staffId: str
    staffName: str
    staffDepartment: Optional[str] = None


class CallClaimedEvent(BaseMessage):
    """Sent to the other staff connections when a call leaves the queue by being claimed."""

    type: Literal["call-claimed"] = "call-claimed"
    callId: str


class CallWithdrawnEvent(BaseMessage):
    """Sent to staff when a waiting call is abandoned before anyone picked it up."""

    type: Literal["call-withdrawn"] = "call-withdrawn"
    callId: str


class CallEndedEvent(BaseMessage):
    """Sent to the remaining party when the other one hangs up or disconnects."""

    type: Literal["call-ended"] = "call-ended"
    callId: str
    reason: str


class CallCompletedEvent(BaseMessage):
    """Sent to the visitor when staff records a decision."""

    type: Literal["call-completed"] = "call-completed"
    callId: str
    decision: str
    notes: Optional[str] = None


class DecisionSavedResponse(BaseMessage):
    """Sent to the staff member once their decision is stored."""

    type: Literal["decision-saved"] = "decision-saved"
    callId: str
    decision: str


class ErrorResponse(BaseMessage):
    """Recoverable error reported to the originating connection."""

    type: Literal["error"] = "error"
    message: str


class Outbound(NamedTuple):
    """A message addressed to one connection, produced by a handler and delivered by the transport."""

    connection_id: str
    message: Union[BaseModel, Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.message, BaseModel):
            return self.message.model_dump()
        return dict(self.message)
