"""
Services module for the reception relay.

Key components:
- switchboard: Switchboard, which owns the registry, queue, relay and fan-out
  and wires disconnect cleanup between them.
- signaling_relay: SignalingRelay, forwarding offer/answer/ICE messages
  between the parties of an in-progress call.
- notifications: NotificationFanout, building new-call broadcasts and
  visitor/staff notices.
- call_archive: CallArchive, an optional JSON-lines record of finished calls.
"""
