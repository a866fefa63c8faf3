import pytest
from pydantic import ValidationError

from fakes import messages_for, staff_login, start_conversation, types_for
from receptionist.errors import (
    CallClaimed,
    DuplicateConnection,
    InvalidRequest,
    NotOwner,
    UnknownConnection,
)
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
from receptionist.services.switchboard import Switchboard


def _start(switchboard, connection_id="visitor-1", **kwargs):
    outbound = handle_start_conversation(start_conversation(**kwargs), connection_id, switchboard)
    return messages_for(outbound, connection_id)[0]["callId"]


class TestSessionHandlers:

    def test_start_conversation_registers_and_queues(self, switchboard):
        handle_staff_login(staff_login("Sam"), "staff-1", switchboard)

        outbound = handle_start_conversation(start_conversation("Vera"), "visitor-1", switchboard)

        visitor_messages = messages_for(outbound, "visitor-1")
        assert len(visitor_messages) == 1
        started = visitor_messages[0]
        assert started["type"] == "conversation-started"
        assert started["sessionId"] == "visitor-1"
        assert started["purpose"] == "Support"
        assert switchboard.registry.lookup("visitor-1").role == "visitor"

        staff_messages = messages_for(outbound, "staff-1")
        assert [m["type"] for m in staff_messages] == ["new-call-request"]
        assert staff_messages[0]["callId"] == started["callId"]
        assert staff_messages[0]["clientName"] == "Vera"

    def test_start_conversation_requires_purpose(self, switchboard):
        with pytest.raises(ValidationError):
            handle_start_conversation({"type": "start-conversation", "name": "Vera"}, "visitor-1", switchboard)
        with pytest.raises(InvalidRequest):
            handle_start_conversation(start_conversation(purpose=" "), "visitor-1", switchboard)

    def test_failed_start_does_not_register_visitor(self, switchboard):
        with pytest.raises(InvalidRequest):
            handle_start_conversation(start_conversation(purpose=" "), "visitor-1", switchboard)

        assert not switchboard.registry.is_live("visitor-1")
        assert switchboard.registry.count("visitor") == 0

        _start(switchboard)
        assert switchboard.registry.lookup("visitor-1").identity.name == "Vera"

    def test_failed_restart_keeps_existing_visitor(self, switchboard):
        _start(switchboard)

        with pytest.raises(InvalidRequest):
            handle_start_conversation(start_conversation("Other", purpose="Billing"), "visitor-1", switchboard)

        assert switchboard.registry.lookup("visitor-1").identity.name == "Vera"
        assert switchboard.call_queue.active_call_for("visitor-1") is not None

    def test_second_conversation_while_active(self, switchboard):
        _start(switchboard)

        with pytest.raises(InvalidRequest):
            handle_start_conversation(start_conversation(purpose="Billing"), "visitor-1", switchboard)

    def test_staff_cannot_start_conversation(self, switchboard):
        handle_staff_login(staff_login(), "staff-1", switchboard)

        with pytest.raises(InvalidRequest):
            handle_start_conversation(start_conversation(), "staff-1", switchboard)

    def test_staff_login_reconciles_waiting_calls(self, switchboard):
        first = _start(switchboard, "visitor-1", name="Vera")
        second = _start(switchboard, "visitor-2", name="Victor")

        outbound = handle_staff_login(staff_login("Sam"), "staff-1", switchboard)

        assert types_for(outbound, "staff-1") == ["login-success", "waiting-calls"]
        login, waiting = messages_for(outbound, "staff-1")
        assert login["user"]["name"] == "Sam"
        assert login["user"]["department"] == "Front Desk"
        assert [c["callId"] for c in waiting["calls"]] == [first, second]

    def test_staff_login_twice(self, switchboard):
        handle_staff_login(staff_login(), "staff-1", switchboard)

        with pytest.raises(DuplicateConnection):
            handle_staff_login(staff_login(), "staff-1", switchboard)

    def test_staff_login_with_access_key(self, clock):
        switchboard = Switchboard(clock=clock, staff_access_key="s3cret")

        refused = handle_staff_login(staff_login(accessKey="wrong"), "staff-1", switchboard)
        assert types_for(refused, "staff-1") == ["login-error"]
        assert not switchboard.registry.is_live("staff-1")

        allowed = handle_staff_login(staff_login(accessKey="s3cret"), "staff-1", switchboard)
        assert types_for(allowed, "staff-1") == ["login-success", "waiting-calls"]

    def test_list_waiting(self, switchboard):
        handle_staff_login(staff_login(), "staff-1", switchboard)
        call_id = _start(switchboard)

        outbound = handle_list_waiting({"type": "list-waiting"}, "staff-1", switchboard)

        assert [c["callId"] for c in messages_for(outbound, "staff-1")[0]["calls"]] == [call_id]

    def test_list_waiting_requires_staff(self, switchboard):
        with pytest.raises(UnknownConnection):
            handle_list_waiting({"type": "list-waiting"}, "nobody", switchboard)
        _start(switchboard)
        with pytest.raises(InvalidRequest):
            handle_list_waiting({"type": "list-waiting"}, "visitor-1", switchboard)


class TestCallHandlers:

    @pytest.fixture
    def call_id(self, switchboard):
        handle_staff_login(staff_login("Sam", "Front Desk"), "staff-1", switchboard)
        handle_staff_login(staff_login("Sue", "Sales"), "staff-2", switchboard)
        return _start(switchboard)

    def test_accept_call(self, switchboard, call_id):
        outbound = handle_accept_call({"type": "accept-call", "callId": call_id}, "staff-1", switchboard)

        started = messages_for(outbound, "staff-1")
        assert started == [{
            "type": "call-started",
            "callId": call_id,
            "clientId": "visitor-1",
            "clientName": "Vera",
            "purpose": "Support",
        }]
        accepted = messages_for(outbound, "visitor-1")
        assert accepted == [{
            "type": "call-accepted",
            "callId": call_id,
            "staffId": "staff-1",
            "staffName": "Sam",
            "staffDepartment": "Front Desk",
        }]
        assert types_for(outbound, "staff-2") == ["call-claimed"]

    def test_accept_call_lost_race(self, switchboard, call_id):
        handle_accept_call({"type": "accept-call", "callId": call_id}, "staff-1", switchboard)

        with pytest.raises(CallClaimed):
            handle_accept_call({"type": "accept-call", "callId": call_id}, "staff-2", switchboard)

    def test_call_decision(self, switchboard, call_id):
        handle_accept_call({"type": "accept-call", "callId": call_id}, "staff-1", switchboard)

        outbound = handle_call_decision(
            {"type": "call-decision", "callId": call_id, "decision": "rejected", "notes": "not eligible"},
            "staff-1",
            switchboard,
        )

        assert messages_for(outbound, "visitor-1") == [
            {"type": "call-completed", "callId": call_id, "decision": "rejected", "notes": "not eligible"}
        ]
        assert messages_for(outbound, "staff-1") == [
            {"type": "decision-saved", "callId": call_id, "decision": "rejected"}
        ]

    def test_call_decision_rejects_unknown_decision(self, switchboard, call_id):
        handle_accept_call({"type": "accept-call", "callId": call_id}, "staff-1", switchboard)

        with pytest.raises(ValidationError):
            handle_call_decision(
                {"type": "call-decision", "callId": call_id, "decision": "maybe"}, "staff-1", switchboard
            )

    def test_call_decision_not_owner(self, switchboard, call_id):
        handle_accept_call({"type": "accept-call", "callId": call_id}, "staff-1", switchboard)

        with pytest.raises(NotOwner):
            handle_call_decision(
                {"type": "call-decision", "callId": call_id, "decision": "accepted"}, "staff-2", switchboard
            )

    def test_end_call_by_visitor_tells_staff(self, switchboard, call_id):
        handle_accept_call({"type": "accept-call", "callId": call_id}, "staff-1", switchboard)

        outbound = handle_end_call({"type": "end-call", "callId": call_id}, "visitor-1", switchboard)

        assert messages_for(outbound, "staff-1") == [
            {"type": "call-ended", "callId": call_id, "reason": "hung up"}
        ]
        assert messages_for(outbound, "visitor-1") == []
        assert switchboard.call_queue.get_call(call_id).status == "rejected"

    def test_signaling_between_parties(self, switchboard, call_id):
        handle_accept_call({"type": "accept-call", "callId": call_id}, "staff-1", switchboard)

        outbound = handle_signaling(
            {"type": "answer", "target": "visitor-1", "answer": {"type": "answer", "sdp": "v=0"}},
            "staff-1",
            switchboard,
        )

        assert messages_for(outbound, "visitor-1") == [
            {"type": "answer", "target": "visitor-1", "answer": {"type": "answer", "sdp": "v=0"}, "from": "staff-1"}
        ]

    def test_signaling_requires_target(self, switchboard, call_id):
        with pytest.raises(ValidationError):
            handle_signaling({"type": "offer", "offer": {}}, "visitor-1", switchboard)
