"""
Call queue and lifecycle state machine.

The CallQueue owns the canonical state of every Call and enforces the valid
transitions:

    waiting      -> in-progress   staff accepts, first accept wins
    waiting      -> rejected      visitor disconnects while waiting
    in-progress  -> completed     owning staff records a decision
    in-progress  -> rejected      either party disconnects or hangs up first

``completed`` and ``rejected`` are terminal. Any attempt to change a terminal
call raises InvalidTransition, is logged, and leaves the stored call untouched.

All mutations run under one lock, so ``accept_call`` is an atomic
compare-and-set on the status field even when driven from worker threads.
Transition listeners run after the lock is released and receive a copy of the
committed call.
"""

import itertools
import logging
import threading
import uuid
from datetime import UTC, datetime
from typing import Callable, Dict, List, NamedTuple, Optional

from receptionist.config.constants import (
    CALL_STATUS_COMPLETED,
    CALL_STATUS_IN_PROGRESS,
    CALL_STATUS_REJECTED,
    CALL_STATUS_WAITING,
    CALL_TYPE_VIDEO,
    LOGGER_NAME,
    ROLE_STAFF,
    ROLE_VISITOR,
)
from receptionist.errors import (
    CallClaimed,
    InvalidRequest,
    InvalidState,
    InvalidTransition,
    NotOwner,
    UnknownCall,
)
from receptionist.models.call import Call, CallType, Decision
from receptionist.models.session_registry import SessionRegistry

logger = logging.getLogger(LOGGER_NAME)

TransitionListener = Callable[[Call, str], None]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class AbandonedCall(NamedTuple):
    """A call cleaned up because one of its parties disconnected."""

    call: Call
    previous_status: str
    counterpart_id: Optional[str]


class CallQueue:
    """
    Tracks each call request from creation to its terminal state.

    The queue only reads the session registry through its public operations;
    it never touches the registry's storage.
    """

    def __init__(self, registry: SessionRegistry, clock: Clock = utc_now):
        self._registry = registry
        self._clock = clock
        self._calls: Dict[str, Call] = {}
        self._lock = threading.RLock()
        self._sequence = itertools.count()
        self._listeners: List[TransitionListener] = []

    def add_listener(self, listener: TransitionListener) -> None:
        """Register a callback run with (call, previous_status) after each committed transition."""
        self._listeners.append(listener)

    def create_call(
        self,
        visitor_id: str,
        purpose: str,
        description: Optional[str] = None,
        call_type: CallType = CALL_TYPE_VIDEO,
    ) -> Call:
        """
        Queue a new call for a registered visitor.

        Args:
            visitor_id: Connection id of the requesting visitor
            purpose: Why the visitor wants to talk to staff; must not be blank
            description: Optional free-text detail
            call_type: "video" or "audio"

        Returns:
            A copy of the new call, in the waiting state

        Raises:
            UnknownConnection: If the visitor is not registered
            InvalidRequest: If the purpose is blank, the connection is not a
                visitor, or the visitor already has an unresolved call
        """
        visitor = self._registry.lookup(visitor_id)
        if visitor.role != ROLE_VISITOR:
            raise InvalidRequest("Only visitors can request a call")
        if not purpose or not purpose.strip():
            raise InvalidRequest("A call requires a purpose")

        with self._lock:
            if self._active_call_for(visitor_id) is not None:
                raise InvalidRequest("Visitor already has an active call")

            now = self._clock()
            call = Call(
                id=uuid.uuid4().hex,
                visitor_id=visitor_id,
                client_name=visitor.identity.name,
                purpose=purpose.strip(),
                description=description,
                call_type=call_type,
                created_at=now,
                updated_at=now,
                sequence=next(self._sequence),
            )
            self._calls[call.id] = call
            snapshot = call.model_copy()

        logger.info(f"Call {call.id} queued for visitor {visitor_id}: {call.purpose}")
        self._notify_listeners(snapshot, "")
        return snapshot

    def accept_call(self, call_id: str, staff_id: str) -> Call:
        """
        Claim a waiting call for a staff connection.

        Only the first accept succeeds; every later one gets CallClaimed.

        Raises:
            UnknownConnection: If the staff connection is not registered
            UnknownCall: If no call has this id
            InvalidRequest: If the connection is not staff or is already on a call
            CallClaimed: If another staff connection holds the call
            InvalidTransition: If the call already ended
        """
        staff = self._registry.lookup(staff_id)
        if staff.role != ROLE_STAFF:
            raise InvalidRequest("Only staff can accept calls")

        with self._lock:
            call = self._get(call_id)
            if call.is_terminal:
                self._refuse_terminal(call, "accept")
            if call.status == CALL_STATUS_IN_PROGRESS:
                raise CallClaimed("Call already claimed by another staff member")
            if self._active_call_for(staff_id) is not None:
                raise InvalidRequest("Finish your current call before accepting another")

            now = self._clock()
            call.status = CALL_STATUS_IN_PROGRESS
            call.staff_id = staff_id
            call.staff_name = staff.identity.name
            call.staff_department = staff.identity.department
            call.started_at = now
            call.updated_at = now
            snapshot = call.model_copy()

        logger.info(f"Call {call_id} accepted by staff {staff_id}")
        self._notify_listeners(snapshot, CALL_STATUS_WAITING)
        return snapshot

    def record_decision(
        self, call_id: str, staff_id: str, decision: Decision, notes: Optional[str] = None
    ) -> Call:
        """
        Complete an in-progress call with the owning staff member's decision.

        Raises:
            UnknownCall: If no call has this id
            InvalidTransition: If the call already ended
            InvalidState: If the call is still waiting
            NotOwner: If another staff connection holds the call
        """
        with self._lock:
            call = self._get(call_id)
            if call.is_terminal:
                self._refuse_terminal(call, "record a decision for")
            if call.status != CALL_STATUS_IN_PROGRESS:
                raise InvalidState("Call has not been accepted yet")
            if call.staff_id != staff_id:
                raise NotOwner("Call is handled by another staff member")

            self._finish(call, CALL_STATUS_COMPLETED)
            call.decision = decision
            call.notes = notes
            snapshot = call.model_copy()

        logger.info(f"Call {call_id} completed with decision {decision} ({snapshot.duration:.1f}s)")
        self._notify_listeners(snapshot, CALL_STATUS_IN_PROGRESS)
        return snapshot

    def end_call(self, call_id: str, connection_id: str) -> AbandonedCall:
        """
        Hang up an in-progress call on behalf of one of its parties.

        The call becomes rejected since no decision was recorded.

        Raises:
            UnknownCall: If no call has this id
            InvalidTransition: If the call already ended
            InvalidState: If the call is still waiting
            NotOwner: If the connection is not one of the two parties
        """
        with self._lock:
            call = self._get(call_id)
            if call.is_terminal:
                self._refuse_terminal(call, "end")
            if call.status != CALL_STATUS_IN_PROGRESS:
                raise InvalidState("Call has not been accepted yet")
            if connection_id not in (call.visitor_id, call.staff_id):
                raise NotOwner("You are not a party to this call")

            self._finish(call, CALL_STATUS_REJECTED)
            snapshot = call.model_copy()

        logger.info(f"Call {call_id} ended by {connection_id}")
        self._notify_listeners(snapshot, CALL_STATUS_IN_PROGRESS)
        return AbandonedCall(snapshot, CALL_STATUS_IN_PROGRESS, self._counterpart(snapshot, connection_id))

    def abandon(self, connection_id: str) -> List[AbandonedCall]:
        """
        Reject every unresolved call the disconnected connection is part of.

        Returns:
            The affected calls, each with the status it had and the connection
            id of the other party (None for a call that was still waiting)
        """
        abandoned = []
        with self._lock:
            for call in self._calls.values():
                if call.is_terminal or connection_id not in (call.visitor_id, call.staff_id):
                    continue
                previous_status = call.status
                self._finish(call, CALL_STATUS_REJECTED)
                abandoned.append(
                    AbandonedCall(
                        call.model_copy(),
                        previous_status,
                        self._counterpart(call, connection_id),
                    )
                )

        for item in abandoned:
            logger.info(
                f"Call {item.call.id} rejected after {connection_id} disconnected "
                f"(was {item.previous_status})"
            )
            self._notify_listeners(item.call, item.previous_status)
        return abandoned

    def list_waiting(self) -> List[Call]:
        """Return the waiting calls, oldest first."""
        with self._lock:
            waiting = [c.model_copy() for c in self._calls.values() if c.status == CALL_STATUS_WAITING]
        return sorted(waiting, key=lambda c: (c.created_at, c.sequence))

    def list_calls(self, staff_id: Optional[str] = None, status: Optional[str] = None) -> List[Call]:
        """Return every known call, newest first, optionally filtered by staff or status."""
        with self._lock:
            calls = [
                c.model_copy()
                for c in self._calls.values()
                if (staff_id is None or c.staff_id == staff_id)
                and (status is None or c.status == status)
            ]
        return sorted(calls, key=lambda c: (c.created_at, c.sequence), reverse=True)

    def get_call(self, call_id: str) -> Call:
        with self._lock:
            return self._get(call_id).model_copy()

    def active_call_for(self, connection_id: str) -> Optional[Call]:
        """Return the unresolved call the connection is a party to, if any."""
        with self._lock:
            call = self._active_call_for(connection_id)
            return call.model_copy() if call else None

    def _get(self, call_id: str) -> Call:
        call = self._calls.get(call_id)
        if call is None:
            raise UnknownCall(f"Call {call_id} not found")
        return call

    def _active_call_for(self, connection_id: str) -> Optional[Call]:
        for call in self._calls.values():
            if not call.is_terminal and connection_id in (call.visitor_id, call.staff_id):
                return call
        return None

    def _finish(self, call: Call, status: str) -> None:
        now = self._clock()
        call.status = status
        call.ended_at = now
        call.updated_at = now
        if call.started_at is not None:
            call.duration = (now - call.started_at).total_seconds()

    @staticmethod
    def _counterpart(call: Call, connection_id: str) -> Optional[str]:
        return call.staff_id if connection_id == call.visitor_id else call.visitor_id

    @staticmethod
    def _refuse_terminal(call: Call, action: str) -> None:
        logger.warning(f"Ignoring attempt to {action} call {call.id} in terminal state {call.status}")
        raise InvalidTransition(f"Call is already {call.status}")

    def _notify_listeners(self, call: Call, previous_status: str) -> None:
        for listener in self._listeners:
            try:
                listener(call, previous_status)
            except Exception as e:
                logger.error(f"Call transition listener failed for {call.id}: {e}", exc_info=True)
