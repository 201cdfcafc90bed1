"""Kernel error taxonomy. Callers map these to distinguishable user messages."""


class KernelError(Exception):
    """Base class for all simulation kernel errors."""
    pass


class NotFoundError(KernelError):
    """Raised when a branch or event id does not resolve in the store."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class InvalidOperationError(KernelError):
    """Raised when an operation is not valid for the record's current state."""
    pass


class PersistenceError(KernelError):
    """Raised when the backing store rejects a read or write."""
    pass
