"""
Configuration module for the reception relay server.

Key components:
- constants: event names, connection roles, call statuses and decisions shared
  by the transport, the handlers and the state machine.
- settings: environment-based server settings (host, port, staff access key,
  call archive path), with optional ``.env`` loading.
- logging_config: console and rotating-file logging for the named application logger.

Usage examples:
```python
from receptionist.config.constants import LOGGER_NAME, EVENT_ACCEPT_CALL
from receptionist.config.logging_config import configure_logging

logger = configure_logging()
logger.info("Application started")
```
"""

# Config module initialization
