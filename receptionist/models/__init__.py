"""
Models module for connection and call state in the reception relay.

Key components:
- call: Pydantic models for Connection, Identity and Call.
- session_registry: SessionRegistry, the map of live connections and their roles.
- call_queue: CallQueue, the call lifecycle state machine and waiting queue.
- message_schemas: Pydantic models for every inbound and outbound WebSocket event.

Usage examples:
```python
from receptionist.models.call import Identity
from receptionist.models.call_queue import CallQueue
from receptionist.models.session_registry import SessionRegistry

registry = SessionRegistry()
queue = CallQueue(registry)

registry.register("visitor-1", "visitor", Identity(name="Ada"))
call = queue.create_call("visitor-1", "Support")

registry.register("staff-1", "staff", Identity(name="Sam", department="Sales"))
queue.accept_call(call.id, "staff-1")
```
"""
