import pytest
from pydantic import ValidationError

from receptionist.models.message_schemas import (
    AcceptCallMessage,
    CallDecisionMessage,
    NewCallRequestEvent,
    Outbound,
    SignalingMessage,
    StaffLoginMessage,
    StartConversationMessage,
)


class TestInboundMessages:

    def test_start_conversation_defaults(self):
        message = StartConversationMessage(type="start-conversation", name="  Vera ", purpose="Support")

        assert message.name == "Vera"
        assert message.callType == "video"
        assert message.email is None

    def test_start_conversation_blank_name(self):
        with pytest.raises(ValidationError):
            StartConversationMessage(type="start-conversation", name="  ", purpose="Support")

    def test_start_conversation_wrong_type(self):
        with pytest.raises(ValidationError):
            StartConversationMessage(type="staff-login", name="Vera", purpose="Support")

    def test_start_conversation_call_type(self):
        with pytest.raises(ValidationError):
            StartConversationMessage(type="start-conversation", name="Vera", purpose="Support", callType="fax")

    def test_staff_login(self):
        message = StaffLoginMessage(type="staff-login", name="Sam", department="Sales")

        assert message.accessKey is None
        assert message.department == "Sales"

    def test_accept_call_requires_call_id(self):
        with pytest.raises(ValidationError):
            AcceptCallMessage(type="accept-call")

    @pytest.mark.parametrize("decision", ["accepted", "rejected"])
    def test_call_decision(self, decision):
        message = CallDecisionMessage(type="call-decision", callId="c1", decision=decision)
        assert message.notes is None

    def test_call_decision_pending_not_allowed(self):
        with pytest.raises(ValidationError):
            CallDecisionMessage(type="call-decision", callId="c1", decision="pending")


class TestSignalingMessage:

    def test_payload_kept_as_extra_field(self):
        payload = {"candidate": "candidate:1 1 udp 1 10.0.0.1 5000 typ host", "sdpMLineIndex": 0}

        message = SignalingMessage(type="ice-candidate", target="peer", candidate=payload)

        assert message.model_dump()["candidate"] == payload

    def test_empty_target(self):
        with pytest.raises(ValidationError):
            SignalingMessage(type="offer", target="", offer={})

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            SignalingMessage(type="renegotiate", target="peer")


class TestOutbound:

    def test_model_message(self):
        event = NewCallRequestEvent(callId="c1", clientName="Vera", purpose="Support", timestamp="2024-01-01T09:00:00+00:00")

        assert Outbound("staff-1", event).to_dict() == {
            "type": "new-call-request",
            "callId": "c1",
            "clientName": "Vera",
            "purpose": "Support",
            "callType": "video",
            "timestamp": "2024-01-01T09:00:00+00:00",
        }

    def test_dict_message_is_copied(self):
        frame = {"type": "offer", "from": "a"}
        result = Outbound("b", frame).to_dict()

        result["extra"] = True
        assert "extra" not in frame
