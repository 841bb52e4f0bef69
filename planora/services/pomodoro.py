"""Single-timer pomodoro controller.

The controller owns one countdown and at most one open session row. Every
state change (start, toggle, tick, complete, reset) runs under one
asyncio.Lock, so a tick reaching zero can never interleave with a toggle or
a manual completion.

States:

    idle     no open session, not ticking
    running  open session, ticking
    paused   open session, not ticking (not persisted; resuming keeps the row)
"""
import asyncio
import logging
from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from planora.config import POMODORO_BREAK_MINUTES, POMODORO_FOCUS_MINUTES
from planora.database import SessionLocal, utcnow
from planora.services import sessions as session_rows

logger = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"
PAUSED = "paused"

TOGGLE_KEYS = {" ", "space"}
RESET_KEYS = {"r", "keyr"}


class PersistenceError(Exception):
    """A session write did not reach the database."""


class SessionStore(Protocol):
    async def create_session(self, duration: int, started_at: datetime) -> str: ...

    async def complete_session(self, session_id: str, completed_at: datetime) -> None: ...


class SqlSessionStore:
    """Session writes for one user, each in its own short-lived db session."""

    def __init__(self, user_id: str, session_factory=SessionLocal, task_id: Optional[str] = None):
        self.user_id = user_id
        self.session_factory = session_factory
        self.task_id = task_id

    # the blocking ORM round-trips run in a worker thread so the ticker keeps going

    async def create_session(self, duration: int, started_at: datetime) -> str:
        return await asyncio.to_thread(self._create, duration, started_at)

    async def complete_session(self, session_id: str, completed_at: datetime) -> None:
        await asyncio.to_thread(self._complete, session_id, completed_at)

    def _create(self, duration: int, started_at: datetime) -> str:
        db = self.session_factory()
        try:
            row = session_rows.create_session(
                db, self.user_id, duration, task_id=self.task_id, started_at=started_at
            )
            return row.id
        except (SQLAlchemyError, session_rows.SessionNotFound) as exc:
            db.rollback()
            raise PersistenceError(str(exc)) from exc
        finally:
            db.close()

    def _complete(self, session_id: str, completed_at: datetime) -> None:
        db = self.session_factory()
        try:
            session_rows.complete_session(db, self.user_id, session_id, completed_at)
        except SQLAlchemyError as exc:
            db.rollback()
            raise PersistenceError(str(exc)) from exc
        finally:
            db.close()


class PomodoroController:
    def __init__(
        self,
        store: SessionStore,
        duration_minutes: int = POMODORO_FOCUS_MINUTES,
        break_minutes: int = POMODORO_BREAK_MINUTES,
        tick_interval: float = 1.0,
        clock=utcnow,
    ):
        if duration_minutes < 1:
            raise ValueError("duration_minutes must be at least 1")
        self.store = store
        self.duration_minutes = duration_minutes
        self.break_minutes = break_minutes
        self.tick_interval = tick_interval
        self.clock = clock
        self.remaining = self.full_duration
        self.session_id: Optional[str] = None
        self.last_error: Optional[Exception] = None
        self._ticking = False
        self._ticker: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def full_duration(self) -> int:
        return self.duration_minutes * 60

    @property
    def state(self) -> str:
        if self._ticking:
            return RUNNING
        if self.session_id is not None:
            return PAUSED
        return IDLE

    @property
    def display(self) -> str:
        return f"{self.remaining // 60:02d}:{self.remaining % 60:02d}"

    @property
    def progress(self) -> float:
        return (self.full_duration - self.remaining) / self.full_duration

    # --- operations ---

    async def start(self) -> bool:
        async with self._lock:
            return await self._start()

    async def toggle(self) -> str:
        async with self._lock:
            if self._ticking:
                self._stop_ticking()
            elif self.session_id is not None and self.remaining == 0:
                # the countdown ran out but its completion write failed; retry it
                await self._complete()
            elif self.session_id is not None:
                self._start_ticking()
            elif await self._start():
                self._start_ticking()
            return self.state

    async def tick(self) -> None:
        async with self._lock:
            if self.remaining <= 0:
                return
            self.remaining -= 1
            if self.remaining == 0:
                self._stop_ticking()
                await self._complete()

    async def complete_session(self) -> bool:
        async with self._lock:
            return await self._complete()

    async def reset(self) -> None:
        """Abandon the open session; its row stays incomplete."""
        async with self._lock:
            self._stop_ticking()
            if self.session_id is not None:
                logger.info("abandoning pomodoro session %s", self.session_id)
            self.remaining = self.full_duration
            self.session_id = None

    async def handle_key(self, key: str) -> bool:
        key = key.lower()
        if key in TOGGLE_KEYS:
            await self.toggle()
            return True
        if key in RESET_KEYS:
            await self.reset()
            return True
        return False

    async def close(self) -> None:
        self._stop_ticking()

    # --- internals (caller holds the lock) ---

    async def _start(self) -> bool:
        if self.session_id is not None:
            return False
        try:
            session_id = await self.store.create_session(self.duration_minutes, self.clock())
        except PersistenceError as exc:
            self.last_error = exc
            logger.error("could not start pomodoro session: %s", exc)
            return False
        self.last_error = None
        self.session_id = session_id
        self.remaining = self.full_duration
        logger.info("pomodoro session %s started (%d min)", session_id, self.duration_minutes)
        return True

    async def _complete(self) -> bool:
        if self.session_id is None:
            return False
        try:
            await self.store.complete_session(self.session_id, self.clock())
        except (PersistenceError, session_rows.SessionNotFound, session_rows.SessionAlreadyCompleted) as exc:
            self.last_error = exc
            logger.error("could not complete pomodoro session %s: %s", self.session_id, exc)
            return False
        logger.info("pomodoro session %s completed, take a %d-minute break", self.session_id, self.break_minutes)
        self.last_error = None
        self.remaining = self.full_duration
        self.session_id = None
        return True

    def _start_ticking(self) -> None:
        self._ticking = True
        if self._ticker is None or self._ticker.done():
            self._ticker = asyncio.get_running_loop().create_task(self._run())

    def _stop_ticking(self) -> None:
        self._ticking = False
        ticker, self._ticker = self._ticker, None
        # the ticker stops itself at zero; it must not cancel its own tick
        if ticker is not None and ticker is not asyncio.current_task():
            ticker.cancel()

    async def _run(self) -> None:
        while self._ticking:
            await asyncio.sleep(self.tick_interval)
            if not self._ticking:
                break
            await self.tick()
