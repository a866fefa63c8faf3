"""
Handlers module for the visitor/staff WebSocket protocol.

Key components:
- session_handlers: visitor sign-on (start-conversation), staff sign-on
  (staff-login) and waiting-queue reconciliation (list-waiting).
- call_handlers: accept-call, call-decision and end-call.
- signaling_handlers: offer, answer and ice-candidate relaying.

Every handler takes ``(message, connection_id, switchboard)`` and returns the
list of Outbound messages to deliver. Handlers raise RelayError subclasses or
pydantic's ValidationError on failure; the WebSocketManager turns those into
``error`` events.
"""

# Handlers module initialization
