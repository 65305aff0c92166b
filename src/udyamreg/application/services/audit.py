from __future__ import annotations

import asyncio
import logging
from typing import Set

from udyamreg.application.ports.audit_log_port import AuditLogPort
from udyamreg.domain.audit import SubmissionLogEntry

logger = logging.getLogger(__name__)


class AuditLogger:
    """
    Fire-and-forget front for an audit sink.

    ``emit`` hands the write to a worker thread and returns at once; sink
    failures are logged and dropped. Outside an event loop the write happens
    inline (CLI, sync tests).
    """

    def __init__(self, sink: AuditLogPort):
        self._sink = sink
        self._pending: Set["asyncio.Future[None]"] = set()

    @property
    def sink(self) -> AuditLogPort:
        return self._sink

    def emit(self, entry: SubmissionLogEntry) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._write(entry)
            return

        task = loop.create_task(asyncio.to_thread(self._write, entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _write(self, entry: SubmissionLogEntry) -> None:
        try:
            self._sink.append(entry)
        except Exception as e:
            logger.warning(f"Audit write failed for {entry.method} {entry.endpoint}: {e}")

    async def drain(self) -> None:
        """Wait for every write scheduled so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def close(self) -> None:
        try:
            self._sink.close()
        except Exception as e:
            logger.debug(f"Audit sink close failed: {e}")
