"""PoolKeys value object — the store key layout for one pool namespace."""

from dataclasses import dataclass

DEFAULT_NAMESPACE = "message_gateway"


@dataclass(frozen=True)
class PoolKeys:
    namespace: str = DEFAULT_NAMESPACE

    @property
    def resources(self) -> str:
        """Ordered set: resource id → rank."""
        return f"{self.namespace}:resources"

    @property
    def lock(self) -> str:
        return f"{self.namespace}:lock"

    @property
    def cursor(self) -> str:
        """Rank of the last selected resource."""
        return f"{self.namespace}:last_used_index"

    @property
    def rank_sequence(self) -> str:
        return f"{self.namespace}:rank_seq"

    def counter(self, resource_id: str) -> str:
        return f"{self.namespace}:counter:{resource_id}"

    def lease(self, resource_id: str) -> str:
        return f"{self.namespace}:resource_lease:{resource_id}"
