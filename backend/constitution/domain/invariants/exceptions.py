class InvariantViolation(Exception):
    """Raised when a write would break a document model invariant."""


class StructuralIntegrityError(Exception):
    """Raised when the stored hierarchy itself is malformed (e.g. a parent cycle)."""

    def __init__(self, message, section_ids=None):
        super().__init__(message)
        self.section_ids = list(section_ids or [])


class MoveRejected(Exception):
    """Raised when a move or relocation is not legal. Nothing is mutated."""


class ConcurrencyConflict(Exception):
    """Raised when a concurrent writer changed a row we were about to overwrite."""
