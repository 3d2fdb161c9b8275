"""Resource entity — one interchangeable identity in the rotation pool."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Resource:
    id: str
    rank: int

    @classmethod
    def from_score(cls, member: str, score: float) -> "Resource":
        """Build from an ordered-set (member, score) pair."""
        return cls(id=member, rank=int(score))


@dataclass(frozen=True)
class UsageEntry:
    """One row of the usage report."""

    resource: Resource
    selections: int | None
    leased: bool

    @property
    def count(self) -> int:
        return self.selections or 0


@dataclass(frozen=True)
class PoolSnapshot:
    entries: list[UsageEntry]
    cursor: int | None

    @property
    def total_selections(self) -> int:
        return sum(e.count for e in self.entries)
