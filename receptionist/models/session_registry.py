"""
Session registry for live visitor and staff connections.

This module provides the SessionRegistry class which tracks which opaque
connection identifiers are currently live, and what role and identity each one
represents. It is the foundation every other component queries: the call queue
checks roles through it, the signaling relay checks liveness through it, and the
notification fan-out enumerates staff through it.
"""

import logging
import threading
from datetime import UTC, datetime
from typing import Any, Callable, Dict, List, Optional

from receptionist.config.constants import LOGGER_NAME
from receptionist.errors import DuplicateConnection, UnknownConnection
from receptionist.models.call import Connection, Identity, Role

logger = logging.getLogger(LOGGER_NAME)

DisconnectHook = Callable[[Connection], Any]


class SessionRegistry:
    """
    Registry of live connections keyed by connection id.

    The registry never contacts the network. When a connection is unregistered
    it hands the removed Connection to the disconnect hook, which the switchboard
    wires to the call queue's cleanup. The map is guarded by a lock so handlers
    may run on worker threads; the hook runs after the lock is released.
    """

    def __init__(self, on_disconnect: Optional[DisconnectHook] = None):
        """Initialize an empty registry with an optional disconnect hook."""
        self._connections: Dict[str, Connection] = {}
        self._lock = threading.RLock()
        self.on_disconnect = on_disconnect

    def register(self, connection_id: str, role: Role, identity: Identity) -> Connection:
        """
        Add a live connection to the registry.

        Args:
            connection_id: Opaque identifier assigned by the transport
            role: "visitor" or "staff"
            identity: Name/email (and department for staff) of the peer

        Returns:
            The registered Connection

        Raises:
            DuplicateConnection: If the id is already registered
        """
        with self._lock:
            if connection_id in self._connections:
                raise DuplicateConnection(f"Connection {connection_id} is already registered")

            connection = Connection(
                connection_id=connection_id,
                role=role,
                identity=identity,
                connected_at=datetime.now(UTC),
            )
            self._connections[connection_id] = connection
        logger.info(f"Registered {role} connection {connection_id} ({identity.name})")
        return connection

    def lookup(self, connection_id: str) -> Connection:
        """
        Get a live connection by its id.

        Raises:
            UnknownConnection: If the id is not registered
        """
        with self._lock:
            connection = self._connections.get(connection_id)
        if connection is None:
            raise UnknownConnection(f"Connection {connection_id} is not registered")
        return connection

    def is_live(self, connection_id: str) -> bool:
        with self._lock:
            return connection_id in self._connections

    def list_by_role(self, role: Role) -> List[Connection]:
        """Return a snapshot of the live connections with the given role."""
        with self._lock:
            return [c for c in self._connections.values() if c.role == role]

    def unregister(self, connection_id: str) -> Any:
        """
        Remove a connection and run the disconnect hook for it.

        Args:
            connection_id: Identifier of the connection that went away

        Returns:
            Whatever the disconnect hook returns, or None without a hook

        Raises:
            UnknownConnection: If the id is not registered, so a second
                unregister for the same disconnect never re-runs cleanup
        """
        with self._lock:
            connection = self._connections.pop(connection_id, None)
        if connection is None:
            raise UnknownConnection(f"Connection {connection_id} is not registered")

        logger.info(f"Unregistered {connection.role} connection {connection_id}")
        if self.on_disconnect is not None:
            return self.on_disconnect(connection)
        return None

    def count(self, role: Optional[Role] = None) -> int:
        if role is None:
            with self._lock:
                return len(self._connections)
        return len(self.list_by_role(role))
