"""
Liveness sweep for inactive participants.

``InactivitySweeper`` periodically removes participants whose last
heartbeat is older than the inactivity timeout and announces each
departure to the room.  It owns a single asyncio task created by
``start()`` and cancelled by ``stop()``; nothing is scheduled on
import.

Failure handling:

- if the staleness query itself fails the whole cycle is abandoned
  and retried on the next tick;
- if evicting one participant fails, the error is logged and the
  remaining participants are still processed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional

from chat_room_api.app.core.db import ChatStore, StoreError
from chat_room_api.app.services.message_service import LEAVE_TEXT, MessageService
from chat_room_api.app.services.participant_service import to_millis

log = logging.getLogger(__name__)


class InactivitySweeper:
    """Evicts participants that stopped sending heartbeats."""

    def __init__(
        self,
        store: ChatStore,
        messages: MessageService,
        *,
        interval: float = 15.0,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._messages = messages
        self.interval = interval
        self.timeout = timeout
        self._clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    # --------------------------------------------------
    # Lifecycle
    # --------------------------------------------------

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            log.warning("Inactivity sweeper already running")
            return
        self._task = asyncio.create_task(self._loop())
        log.info(
            "Inactivity sweeper started (interval=%ss, timeout=%ss)",
            self.interval,
            self.timeout,
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        log.info("Inactivity sweeper stopped")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                # Keep sweeping on the next tick whatever happened here.
                log.exception("Unexpected error during inactivity sweep")

    # --------------------------------------------------
    # Sweep cycle
    # --------------------------------------------------

    async def run_once(self) -> List[str]:
        """Run one sweep cycle and return the names of evicted participants."""
        cutoff = to_millis(self._clock() - self.timeout)
        try:
            inactive = self._store.find_inactive_participants(cutoff)
        except StoreError as exc:
            log.error("Inactivity sweep abandoned: %s", exc)
            return []

        evicted: List[str] = []
        for participant in inactive:
            name = participant["name"]
            try:
                self._store.delete_participant(participant["id"])
            except StoreError as exc:
                log.error("Failed to evict participant %s: %s", name, exc)
                continue
            evicted.append(name)
            try:
                await self._messages.announce(name, LEAVE_TEXT)
            except StoreError as exc:
                log.error("Participant %s evicted without departure message: %s", name, exc)

        if evicted:
            log.info("Evicted %d inactive participant(s): %s", len(evicted), ", ".join(evicted))
        return evicted
