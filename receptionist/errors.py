"""
Exception taxonomy for the call-routing and signaling core.

Every error raised by the registry, the call queue or the signaling relay is a
RelayError. They are all recoverable: the switchboard reports them back to the
originating connection as an ``error`` event and carries on.
"""


class RelayError(Exception):
    """Base class for recoverable call-routing errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(RelayError):
    """A connection or call id is not known."""


class UnknownConnection(NotFound):
    """The connection id is not registered (or has already disconnected)."""


class UnknownCall(NotFound):
    """No call exists with the given id."""


class DuplicateConnection(RelayError):
    """The connection id is already registered."""


class InvalidRequest(RelayError):
    """The request is malformed or not allowed for this connection."""


class CallClaimed(RelayError):
    """Another staff connection accepted the call first."""


class InvalidState(RelayError):
    """The call is not in the state the operation requires."""


class InvalidTransition(InvalidState):
    """The call is in a terminal state and can no longer change."""


class NotOwner(RelayError):
    """The connection is not a party to the call it tried to act on."""


class TargetUnreachable(RelayError):
    """The signaling target is not a live connection."""
