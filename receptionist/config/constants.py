"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the application,
providing a centralized location for event names, roles and call states so the
transport, the handlers and the tests all agree on the same spelling.
"""

# Logger name used throughout the application
LOGGER_NAME = "reception_relay"

# Connection roles
ROLE_VISITOR = "visitor"
ROLE_STAFF = "staff"

# Call statuses
CALL_STATUS_WAITING = "waiting"
CALL_STATUS_IN_PROGRESS = "in-progress"
CALL_STATUS_COMPLETED = "completed"
CALL_STATUS_REJECTED = "rejected"

# Call decisions
DECISION_PENDING = "pending"

# Call types
CALL_TYPE_VIDEO = "video"

# Inbound event types
EVENT_START_CONVERSATION = "start-conversation"
EVENT_STAFF_LOGIN = "staff-login"
EVENT_LIST_WAITING = "list-waiting"
EVENT_ACCEPT_CALL = "accept-call"
EVENT_OFFER = "offer"
EVENT_ANSWER = "answer"
EVENT_ICE_CANDIDATE = "ice-candidate"
EVENT_END_CALL = "end-call"
EVENT_CALL_DECISION = "call-decision"

# Messages shown to visitors on any server-side failure
VISITOR_START_FAILED = "Failed to start conversation"
VISITOR_CONTINUE_FAILED = "Failed to continue conversation"
