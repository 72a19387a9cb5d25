# Advisory client-side rate limiter with minute, hour and day windows
# explorer/services/rate_limiter.py
import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Protocol

from sqlalchemy.future import select

from explorer.models.rate_limit import RateLimitSlot
from explorer.utils.config import Settings
from explorer.utils.logger import logger


@dataclass
class Window:
    name: str
    duration: float  # seconds
    limit: int
    count: int = 0
    start: float = 0.0

    @property
    def count_key(self) -> str:
        return f"{self.name}_requests"

    @property
    def start_key(self) -> str:
        return f"last_{self.name}"


class SlotStore(Protocol):
    async def load(self) -> Dict[str, float]: ...

    async def save(self, slots: Dict[str, float]) -> None: ...


class InMemorySlotStore:
    """Keeps the slots in a plain dict; state lives as long as the object."""

    def __init__(self, initial: Dict[str, float] | None = None):
        self.slots: Dict[str, float] = dict(initial or {})
        self.save_count = 0

    async def load(self) -> Dict[str, float]:
        return dict(self.slots)

    async def save(self, slots: Dict[str, float]) -> None:
        self.slots = dict(slots)
        self.save_count += 1


class SqlSlotStore:
    """Persists the slots as rows of the rate_limit_slots table."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def load(self) -> Dict[str, float]:
        async with self.session_factory() as session:
            result = await session.execute(select(RateLimitSlot))
            return {slot.key: slot.value for slot in result.scalars().all()}

    async def save(self, slots: Dict[str, float]) -> None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(RateLimitSlot).where(RateLimitSlot.key.in_(list(slots)))
            )
            existing = {slot.key: slot for slot in result.scalars().all()}
            for key, value in slots.items():
                if key in existing:
                    existing[key].value = value
                else:
                    session.add(RateLimitSlot(key=key, value=value))
            await session.commit()


class RateLimiter:
    def __init__(self, store: SlotStore, config: Settings, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock
        self.windows: List[Window] = [
            Window("minute", 60, config.rate_limit_per_minute),
            Window("hour", 3600, config.rate_limit_per_hour),
            Window("day", 86400, config.rate_limit_per_day),
        ]
        self._loaded = False
        self._lock = asyncio.Lock()
        logger.info(
            "RateLimiter initialized with limits: "
            + ", ".join(f"{w.name}={w.limit}" for w in self.windows)
        )

    async def _load(self) -> None:
        """Restores counters from the store; absent slots start fresh at the current time."""
        slots = await self.store.load()
        now = self.clock()
        for window in self.windows:
            window.count = int(slots.get(window.count_key, 0))
            window.start = float(slots.get(window.start_key, now))
        self._loaded = True
        logger.debug(f"Rate limiter state loaded: {self.snapshot()}")

    def snapshot(self) -> Dict[str, float]:
        slots: Dict[str, float] = {}
        for window in self.windows:
            slots[window.count_key] = window.count
            slots[window.start_key] = window.start
        return slots

    async def check_limit(self) -> bool:
        """
        Admits or rejects one request. An admitted request counts against
        every window and the new state is persisted before returning.
        """
        async with self._lock:
            if not self._loaded:
                await self._load()

            now = self.clock()
            for window in self.windows:
                if now - window.start > window.duration:
                    window.count = 0
                    window.start = now

            saturated = [w.name for w in self.windows if w.count >= w.limit]
            if saturated:
                logger.warning(f"Rate limit reached for window(s): {', '.join(saturated)}")
                return False

            for window in self.windows:
                window.count += 1

            await self.store.save(self.snapshot())
            return True
