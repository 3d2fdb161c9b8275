"""RoundRobinPolicy — rotate-skip-wrap ordering over ranked resources."""

from __future__ import annotations

from sender_pool.domain.entities.resource import Resource


def next_rank(max_rank: float | None) -> int:
    """Rank for the next inserted resource: max + 1, or 0 for an empty pool."""
    if max_rank is None:
        return 0
    return int(max_rank) + 1


def parse_cursor(raw: str | None) -> int | None:
    """Decode the persisted cursor. None means "before every rank"."""
    if raw is None or raw == "":
        return None
    return int(float(raw))


def format_cursor(rank: int) -> str:
    return str(rank)


def needs_wraparound(candidates: list[Resource]) -> bool:
    """True when the after-cursor query is too short to rotate from."""
    return len(candidates) <= 1


def rotation_order(candidates: list[Resource], cursor: int | None) -> list[Resource]:
    """Order in which candidates are checked for a lease.

    1. First pass: candidates ranked strictly after *cursor*, ascending.
    2. Second pass: the rest of the set, ascending, so a full wrap re-selects
       the lowest-ranked free resource.

    Entries already checked in the first pass are not repeated.

    Args:
        candidates: resources from a range query (any order).
        cursor: rank of the last selected resource, or None.

    Returns:
        The check order; the first unleased entry is the pick.
    """
    ordered = sorted(candidates, key=lambda r: r.rank)
    if cursor is None:
        return ordered

    after = [r for r in ordered if r.rank > cursor]
    rest = [r for r in ordered if r.rank <= cursor]
    return after + rest
