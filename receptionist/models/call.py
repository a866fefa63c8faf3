"""
Pydantic models for the state owned by the call-routing core.

Connection describes one live WebSocket peer as the Session Registry sees it.
Call is the canonical record of one visitor's request for staff attention,
mutated only by the CallQueue.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from receptionist.config.constants import (
    CALL_STATUS_COMPLETED,
    CALL_STATUS_REJECTED,
    CALL_STATUS_WAITING,
    CALL_TYPE_VIDEO,
    DECISION_PENDING,
)

Role = Literal["visitor", "staff"]
CallStatus = Literal["waiting", "in-progress", "completed", "rejected"]
Decision = Literal["pending", "accepted", "rejected"]
CallType = Literal["video", "audio"]

TERMINAL_STATUSES = (CALL_STATUS_COMPLETED, CALL_STATUS_REJECTED)


class Identity(BaseModel):
    """Who is behind a connection: a visitor's contact details or a staff profile."""

    name: str = Field(..., description="Display name")
    email: Optional[str] = Field(None, description="Contact email")
    department: Optional[str] = Field(None, description="Staff department")


class Connection(BaseModel):
    """A live transport-level session registered with the Session Registry."""

    connection_id: str = Field(..., description="Opaque connection identifier")
    role: Role = Field(..., description="visitor or staff")
    identity: Identity
    connected_at: datetime


class Call(BaseModel):
    """One visitor's request for a staff video/audio session."""

    id: str = Field(..., description="Unique call identifier")
    visitor_id: str = Field(..., description="Connection id of the visitor")
    staff_id: Optional[str] = Field(
        None, description="Connection id of the staff member, absent until claimed"
    )
    client_name: str = Field(..., description="Visitor display name at creation time")
    staff_name: Optional[str] = None
    staff_department: Optional[str] = None
    purpose: str
    description: Optional[str] = None
    call_type: CallType = CALL_TYPE_VIDEO
    status: CallStatus = CALL_STATUS_WAITING
    decision: Decision = DECISION_PENDING
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration: Optional[float] = Field(None, description="Call length in seconds")
    sequence: int = Field(..., description="Creation order, breaks timestamp ties")

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_summary(self) -> dict:
        """Dashboard view of a waiting call, as sent in new-call-request and waiting-calls."""
        return {
            "callId": self.id,
            "clientName": self.client_name,
            "purpose": self.purpose,
            "callType": self.call_type,
            "timestamp": self.created_at.isoformat(),
        }
