# app/services/gate_controller.py
"""
Gate controller - open/close state transitions with timed auto-close.

  closed --open()--> open (+ auto-close timer) --timer fires | close()--> closed

Every committed transition bumps the gate's epoch and cancels whatever timer
was pending for that gate. A timer only closes the gate if the epoch it was
scheduled under is still current, so a stale timer can never close a gate
that a later operation re-opened.

Timers are asyncio tasks on the running loop; the auto-close writes through
its own session because the request that scheduled it is long gone.
"""

import asyncio
import threading
from typing import Callable, Optional

from app.config import settings
from app.exceptions import GateNotFound, GateUnavailable
from app.models.gate import Gate
from app.services.repository import EntityRepository
from app.utils.logger import get_logger

logger = get_logger(__name__)


class GateController:
    def __init__(self, session_factory: Callable, auto_close_seconds: Optional[float] = None):
        self.session_factory = session_factory
        self.auto_close_seconds = (
            settings.GATE_AUTO_CLOSE_SECONDS if auto_close_seconds is None else auto_close_seconds
        )
        self._lock = threading.Lock()
        self._epochs: dict = {}
        self._timers: dict = {}

    def open(self, repo: EntityRepository, gate_id: str, auto_close: bool = True) -> Gate:
        """Open an online gate. Refuses offline / maintenance gates."""
        gate = repo.get("gate", gate_id)
        if gate is None:
            raise GateNotFound(gate_id)
        if gate.status != "online":
            raise GateUnavailable(gate_id, gate.status)

        with repo.transaction():
            repo.update("gate", gate_id, {"is_open": True})
            repo.on_commit(lambda: self._transition(gate_id, schedule_close=auto_close))

        logger.info(f"[GATE] {gate.name} OPENED" + (
            f" (auto-close in {self.auto_close_seconds}s)" if auto_close else " (held open)"))
        return gate

    def close(self, repo: EntityRepository, gate_id: str) -> Gate:
        gate = repo.get("gate", gate_id)
        if gate is None:
            raise GateNotFound(gate_id)

        with repo.transaction():
            repo.update("gate", gate_id, {"is_open": False})
            repo.on_commit(lambda: self._transition(gate_id, schedule_close=False))

        logger.info(f"[GATE] {gate.name} CLOSED")
        return gate

    def pending(self, gate_id: str) -> bool:
        with self._lock:
            task = self._timers.get(gate_id)
            return task is not None and not task.done()

    def pending_count(self) -> int:
        with self._lock:
            return sum(1 for task in self._timers.values() if not task.done())

    def shutdown(self):
        """Cancel every pending auto-close. Called once at application shutdown."""
        with self._lock:
            for task in self._timers.values():
                if not task.done():
                    task.cancel()
            self._timers.clear()

    def _transition(self, gate_id: str, schedule_close: bool):
        with self._lock:
            epoch = self._epochs.get(gate_id, 0) + 1
            self._epochs[gate_id] = epoch

            pending = self._timers.pop(gate_id, None)
            if pending is not None:
                pending.cancel()

            if not schedule_close:
                return
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning(f"[GATE] No running event loop - auto-close for {gate_id} not scheduled")
                return
            self._timers[gate_id] = loop.create_task(
                self._auto_close(gate_id, epoch), name=f"auto-close-{gate_id}"
            )

    async def _auto_close(self, gate_id: str, epoch: int):
        await asyncio.sleep(self.auto_close_seconds)

        with self._lock:
            if self._epochs.get(gate_id) != epoch:
                logger.debug(f"[GATE] Stale auto-close for {gate_id} (epoch {epoch}) ignored")
                return
            self._timers.pop(gate_id, None)

            db = self.session_factory()
            try:
                repo = EntityRepository(db)
                gate = repo.update("gate", gate_id, {"is_open": False})
                if gate is not None:
                    logger.info(f"[GATE] {gate.name} auto-closed")
            except Exception as e:
                logger.error(f"[GATE] Auto-close failed for {gate_id}: {e}", exc_info=True)
            finally:
                db.close()
