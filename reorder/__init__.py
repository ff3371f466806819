"""
Reorder engine: move one entity within an ordered collection and compute the
minimal set of position updates, repairing invalid positions by renumbering.
"""

from reorder.config import ReorderConfig, get_config
from reorder.engine import (
    sort_by_position,
    compute_candidate,
    has_invalid_positions,
    needs_renumber,
    renumber_all,
    compute_reorder,
)
from reorder.errors import (
    ReorderError,
    EmptyCollectionError,
    MissingMoveIdError,
    TargetIndexOutOfRangeError,
    EntityNotFoundError,
    DuplicateEntityIdError,
    InvalidConfigError,
)
from reorder.integrity import check_integrity
from reorder.models import (
    OrderableEntity,
    ChangeRecord,
    ReorderResult,
    MoveRequest,
    IntegrityReport,
)

__all__ = [
    'ReorderConfig',
    'get_config',
    'sort_by_position',
    'compute_candidate',
    'has_invalid_positions',
    'needs_renumber',
    'renumber_all',
    'compute_reorder',
    'check_integrity',
    'ReorderError',
    'EmptyCollectionError',
    'MissingMoveIdError',
    'TargetIndexOutOfRangeError',
    'EntityNotFoundError',
    'DuplicateEntityIdError',
    'InvalidConfigError',
    'OrderableEntity',
    'ChangeRecord',
    'ReorderResult',
    'MoveRequest',
    'IntegrityReport',
]
