"""
Integrity report for a stored collection.

Lets callers inspect a collection before (or instead of) moving anything,
e.g. to surface data drift in an admin view. It uses the same rules the
engine applies when it decides to renumber.
"""
from collections import Counter
from typing import Optional, Sequence

from reorder.config import ReorderConfig
from reorder.models import IntegrityReport, OrderableEntity


def check_integrity(
    entities: Sequence[OrderableEntity],
    config: Optional[ReorderConfig] = None,
) -> IntegrityReport:
    """
    Inspect positions for values below the floor and for duplicates.

    Entities without a position are listed in ``unpositioned_ids`` but do not
    make the collection invalid.

    Args:
        entities: Entities in any order
        config: Thresholds; defaults to ReorderConfig()

    Returns:
        IntegrityReport
    """
    config = config or ReorderConfig()
    issues = []

    invalid_ids = [
        e.id for e in entities
        if e.position is not None and e.position < config.min_position_value
    ]
    if invalid_ids:
        issues.append(
            f"{len(invalid_ids)} entities have position below {config.min_position_value}"
        )

    counts = Counter(e.position for e in entities if e.position is not None)
    duplicate_positions = sorted(position for position, count in counts.items() if count > 1)
    if duplicate_positions:
        extra = sum(counts[position] - 1 for position in duplicate_positions)
        issues.append(f"{extra} duplicate position values detected")

    unpositioned_ids = [e.id for e in entities if e.position is None]

    return IntegrityReport(
        is_valid=not issues,
        issues=issues,
        invalid_ids=invalid_ids,
        duplicate_positions=duplicate_positions,
        unpositioned_ids=unpositioned_ids,
    )
