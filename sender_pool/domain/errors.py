"""Domain error taxonomy — pure Python, no external dependencies."""


class PoolError(Exception):
    """Base class for every pool operation failure."""


class AlreadyExists(PoolError):
    def __init__(self, resource_id: str):
        super().__init__(f"Resource already exists: {resource_id}")
        self.resource_id = resource_id


class NotFound(PoolError):
    def __init__(self, resource_id: str):
        super().__init__(f"Resource does not exist: {resource_id}")
        self.resource_id = resource_id


class NoResourcesAvailable(PoolError):
    def __init__(self):
        super().__init__("No resources available: the pool is empty")


class AllResourcesLeased(PoolError):
    def __init__(self):
        super().__init__("No available resources: all are leased")


class LockTimeout(PoolError):
    def __init__(self, attempts: int):
        super().__init__(f"Failed to acquire pool lock after {attempts} attempts")
        self.attempts = attempts


class StoreError(PoolError):
    """Wraps any I/O failure raised by a store adapter."""
