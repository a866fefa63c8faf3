"""
JSON-lines archive of finished calls.

Registered as a CallQueue transition listener, so each record is taken after
the in-memory transition has been committed and outside the queue's lock. The
file write itself happens on a single background thread, which keeps disk I/O
off the event loop and keeps records in the order the calls finished.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from receptionist.config.constants import LOGGER_NAME
from receptionist.models.call import Call

logger = logging.getLogger(LOGGER_NAME)


class CallArchive:
    """Appends every call that reaches a terminal state to a JSON-lines file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="call-archive")

    def __call__(self, call: Call, previous_status: str) -> Optional[Future]:
        if not call.is_terminal:
            return None
        return self._executor.submit(self._write, call.id, call.model_dump_json())

    def _write(self, call_id: str, record: str) -> None:
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(record + "\n")
        except OSError as e:
            logger.error(f"Failed to archive call {call_id} to {self.path}: {e}", exc_info=True)
            return
        logger.debug(f"Archived call {call_id} to {self.path}")

    def close(self) -> None:
        """Wait for pending writes and stop the writer thread."""
        self._executor.shutdown(wait=True)
