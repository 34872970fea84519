"""Client-side state machine for the waiter call of one table.

Phases move idle -> calling -> attended -> idle. Whether an update with
``needs_attention=False`` means "a waiter just came" (attended) or "nothing
was pending" (idle) depends on the previous value of the flag, so the engine
keeps that bit itself and reads it on every event.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional, Protocol

from schemas.dining_tables import DiningTableResponse
from table_sync.config import FetchFailurePolicy, client_settings
from table_sync.errors import InvalidIdentifier, TableSyncError

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    IDLE = "idle"
    CALLING = "calling"
    ATTENDED = "attended"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]
Listener = Callable[["ReconciliationEngine"], None]


def _loop_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class ReconciliationEngine:
    """Holds the last known table record and derives the page phase from it.

    Every method runs to completion without awaiting, so on one event loop
    no event can observe a half applied transition.
    """

    def __init__(
        self,
        has_identifier: bool = True,
        reset_delay: Optional[float] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.phase = Phase.LOADING if has_identifier else Phase.IDLE
        self.table: Optional[DiningTableResponse] = None
        self.error: Optional[str] = None
        self.reset_delay = client_settings.AUTO_RESET_SECONDS if reset_delay is None else reset_delay
        self._scheduler = scheduler or _loop_scheduler
        self._needs_attention = False
        # Bumped for every record taken in, lets callers tell whether newer
        # state arrived while they were awaiting
        self.revision = 0
        self._reset_timer: Optional[TimerHandle] = None
        self._listeners: list[Listener] = []
        self._disposed = False

    @property
    def needs_attention(self) -> bool:
        """The flag of the most recently applied record."""
        return self._needs_attention

    @property
    def reset_pending(self) -> bool:
        return self._reset_timer is not None

    @property
    def can_call_waiter(self) -> bool:
        return self.table is not None and self.phase in (Phase.IDLE, Phase.ATTENDED)

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _set_phase(self, phase: Phase) -> None:
        if phase == self.phase:
            return
        logger.info(f"[Engine] {self.phase.value} -> {phase.value}")
        self.phase = phase
        for listener in list(self._listeners):
            listener(self)

    def _remember(self, record: DiningTableResponse) -> bool:
        """Store the record and return the flag it replaces."""
        previous = self._needs_attention
        self.revision += 1
        self.table = record
        self._needs_attention = record.needs_attention
        return previous

    # Incoming records

    def apply_snapshot(self, record: DiningTableResponse) -> None:
        """Apply a fetch result, either the first load or a later refresh."""
        if self.phase != Phase.LOADING:
            self.apply_update(record)
            return

        self._remember(record)
        self._set_phase(Phase.CALLING if record.needs_attention else Phase.IDLE)

    def apply_update(self, record: DiningTableResponse) -> None:
        """Apply a pushed record or a write acknowledgement."""
        if self._disposed or self.phase in (Phase.LOADING, Phase.ERROR):
            logger.debug(f"[Engine] Ignoring update while {self.phase.value}")
            return
        if self.table is not None and record.id != self.table.id:
            logger.warning(f"[Engine] Ignoring update for table {record.id}, tracking {self.table.id}")
            return

        was_pending = self._remember(record)

        if record.needs_attention:
            if self.phase != Phase.CALLING:
                self._cancel_reset()
                self._set_phase(Phase.CALLING)
        elif was_pending:
            self._enter_attended()
        # false -> false: nothing was resolved. A pending optimistic call stays
        # as is until its write settles.

    def apply_fetch_failure(
        self,
        error: TableSyncError,
        policy: FetchFailurePolicy = FetchFailurePolicy.STRICT
    ) -> None:
        """Settle a failed first load."""
        if policy == FetchFailurePolicy.LENIENT and not isinstance(error, InvalidIdentifier):
            logger.warning(f"[Engine] Load failed ({error.message}), showing the plain menu")
            self.table = None
            self.error = None
            self._set_phase(Phase.IDLE)
            return

        self.error = error.message
        self._set_phase(Phase.ERROR)

    # Local actions

    def begin_call(self) -> Optional[Phase]:
        """Optimistically enter calling. Returns the phase to revert to, or None
        when a call is not possible right now."""
        if not self.can_call_waiter:
            return None

        previous = self.phase
        self.error = None
        self._cancel_reset()
        self._set_phase(Phase.CALLING)
        return previous

    def revert_call(self, previous: Phase, error: TableSyncError) -> None:
        """Undo an optimistic call whose write failed."""
        self.error = error.message
        if self.phase != Phase.CALLING or self._needs_attention:
            # A pushed record already settled the phase
            return
        self._set_phase(Phase.IDLE if previous == Phase.ATTENDED else previous)

    def back_to_menu(self) -> None:
        if self.phase == Phase.CALLING:
            self._set_phase(Phase.IDLE)

    def dispose(self) -> None:
        self._disposed = True
        self._cancel_reset()

    # Auto reset

    def _enter_attended(self) -> None:
        self._cancel_reset()
        self._set_phase(Phase.ATTENDED)
        self._reset_timer = self._scheduler(self.reset_delay, self._on_reset_timer)

    def _cancel_reset(self) -> None:
        if self._reset_timer is not None:
            self._reset_timer.cancel()
            self._reset_timer = None

    def _on_reset_timer(self) -> None:
        self._reset_timer = None
        if self.phase == Phase.ATTENDED:
            self._set_phase(Phase.IDLE)
