import unittest

from fakes import FakeClock
from receptionist.models.call import Identity
from receptionist.models.call_queue import CallQueue
from receptionist.models.message_schemas import CallCompletedEvent, CallEndedEvent
from receptionist.models.session_registry import SessionRegistry
from receptionist.services.notifications import NotificationFanout

class TestNotificationFanout(unittest.TestCase):

    def setUp(self):
        self.registry = SessionRegistry()
        self.queue = CallQueue(self.registry, clock=FakeClock())
        self.fanout = NotificationFanout(self.registry)
        self.registry.register("visitor-1", "visitor", Identity(name="Vera"))
        self.registry.register("staff-1", "staff", Identity(name="Sam"))
        self.registry.register("staff-2", "staff", Identity(name="Sue"))
        self.call = self.queue.create_call("visitor-1", "Support")

    def test_broadcast_new_call_reaches_every_staff(self):
        outbound = self.fanout.broadcast_new_call(self.call)

        self.assertEqual(sorted(o.connection_id for o in outbound), ["staff-1", "staff-2"])
        payload = outbound[0].to_dict()
        self.assertEqual(payload["type"], "new-call-request")
        self.assertEqual(payload["callId"], self.call.id)
        self.assertEqual(payload["clientName"], "Vera")
        self.assertEqual(payload["purpose"], "Support")
        self.assertEqual(payload["timestamp"], self.call.created_at.isoformat())

    def test_broadcast_skips_staff_who_join_later(self):
        outbound = self.fanout.broadcast_new_call(self.call)
        self.registry.register("staff-3", "staff", Identity(name="Stan"))

        self.assertNotIn("staff-3", [o.connection_id for o in outbound])

    def test_broadcast_without_staff(self):
        self.registry.unregister("staff-1")
        self.registry.unregister("staff-2")

        self.assertEqual(self.fanout.broadcast_new_call(self.call), [])

    def test_call_claimed_excludes_winner(self):
        accepted = self.queue.accept_call(self.call.id, "staff-1")

        outbound = self.fanout.broadcast_call_claimed(accepted)

        self.assertEqual([o.connection_id for o in outbound], ["staff-2"])
        self.assertEqual(outbound[0].to_dict(), {"type": "call-claimed", "callId": self.call.id})

    def test_call_withdrawn(self):
        outbound = self.fanout.broadcast_call_withdrawn(self.call)

        self.assertEqual(len(outbound), 2)
        self.assertTrue(all(o.to_dict()["type"] == "call-withdrawn" for o in outbound))

    def test_notify_visitor(self):
        event = CallCompletedEvent(callId=self.call.id, decision="accepted", notes="ok")

        outbound = self.fanout.notify_visitor(self.call, event)

        self.assertEqual(len(outbound), 1)
        self.assertEqual(outbound[0].connection_id, "visitor-1")
        self.assertEqual(outbound[0].to_dict()["notes"], "ok")

    def test_notify_visitor_after_disconnect_is_noop(self):
        self.registry.unregister("visitor-1")
        event = CallCompletedEvent(callId=self.call.id, decision="accepted")

        self.assertEqual(self.fanout.notify_visitor(self.call, event), [])

    def test_notify_staff_before_claim_is_noop(self):
        event = CallEndedEvent(callId=self.call.id, reason="hung up")

        self.assertEqual(self.fanout.notify_staff(self.call, event), [])

    def test_notify_staff(self):
        accepted = self.queue.accept_call(self.call.id, "staff-2")
        event = CallEndedEvent(callId=self.call.id, reason="hung up")

        outbound = self.fanout.notify_staff(accepted, event)

        self.assertEqual([o.connection_id for o in outbound], ["staff-2"])
