"""
Exceptions raised by the reorder engine.

All of them are caller-input errors: the engine validates eagerly and raises
before computing anything, so no partial result is ever returned.
"""
from typing import Iterable


class ReorderError(ValueError):
    """Base class for every error raised by the reorder package."""


class EmptyCollectionError(ReorderError):
    def __init__(self):
        super().__init__("Entities list cannot be empty")


class MissingMoveIdError(ReorderError):
    def __init__(self):
        super().__init__("move_id is required")


class TargetIndexOutOfRangeError(ReorderError):
    def __init__(self, target_index: int, length: int):
        self.target_index = target_index
        self.length = length
        super().__init__(
            f"target_index {target_index} is out of bounds for collection of length {length}"
        )


class EntityNotFoundError(ReorderError):
    def __init__(self, entity_id):
        self.entity_id = entity_id
        super().__init__(f"Entity with id {entity_id} not found")


class DuplicateEntityIdError(ReorderError):
    def __init__(self, entity_ids: Iterable):
        self.entity_ids = list(entity_ids)
        joined = ", ".join(str(i) for i in self.entity_ids)
        super().__init__(f"Duplicate entity ids: {joined}")


class InvalidConfigError(ReorderError):
    """Raised when a configuration value (or its environment variable) is unusable."""
