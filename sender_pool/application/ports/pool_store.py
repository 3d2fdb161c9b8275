"""Port interface for the shared key-value store holding pool state."""

from abc import ABC, abstractmethod


class PoolStore(ABC):
    """Atomic primitives the coordinator builds on.

    Every method is a single atomic store call. Adapters raise
    ``StoreError`` for any I/O failure.
    """

    # ─── Ordered sets ───────────────────────────────────────────────

    @abstractmethod
    async def insert_if_absent(self, set_key: str, member: str, score: float) -> bool:
        """Add *member* with *score* unless present. Returns True if inserted."""
        ...

    @abstractmethod
    async def max_score(self, set_key: str) -> float | None:
        ...

    @abstractmethod
    async def range_by_score(
        self,
        set_key: str,
        min_score: float = float("-inf"),
        max_score: float = float("inf"),
        *,
        min_exclusive: bool = False,
    ) -> list[tuple[str, float]]:
        """Return (member, score) pairs within the bounds, ascending by score."""
        ...

    @abstractmethod
    async def score(self, set_key: str, member: str) -> float | None:
        ...

    @abstractmethod
    async def cardinality(self, set_key: str) -> int:
        ...

    # ─── Scalars ────────────────────────────────────────────────────

    @abstractmethod
    async def set_if_absent(self, key: str, value: str = "1", ttl: float | None = None) -> bool:
        """Conditional set with optional expiry in seconds. Returns True if written."""
        ...

    @abstractmethod
    async def release(self, key: str) -> None:
        """Delete *key* regardless of its kind or owner."""
        ...

    @abstractmethod
    async def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl: float | None = None) -> None:
        ...

    @abstractmethod
    async def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    async def increment(self, key: str) -> int:
        """Atomically add 1 (creating the counter at 0) and return the new value."""
        ...

    # ─── Lifecycle ──────────────────────────────────────────────────

    @abstractmethod
    async def ping(self) -> bool:
        ...

    async def close(self) -> None:
        return None
