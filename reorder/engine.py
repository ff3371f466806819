"""
Pure ordering engine.

Moves one entity inside an ordered collection by giving it a position between
its new neighbours (midpoint insertion). When the collection holds invalid
positions, or the new position would sit too close to a neighbour, every
entity is renumbered with even spacing instead.

Contains no database dependencies - works with plain data structures and
never mutates its inputs.
"""
from collections import Counter
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from reorder.config import ReorderConfig
from reorder.errors import (
    DuplicateEntityIdError,
    EmptyCollectionError,
    EntityNotFoundError,
    MissingMoveIdError,
    TargetIndexOutOfRangeError,
)
from reorder.logging_config import get_logger
from reorder.models import ChangeRecord, OrderableEntity, ReorderResult

logger = get_logger(__name__)


def _position_key(entity: OrderableEntity) -> Tuple[bool, float]:
    # Unpositioned entities compare greater than any positioned one
    if entity.position is None:
        return (True, 0.0)
    return (False, entity.position)


def sort_by_position(entities: Sequence[OrderableEntity]) -> List[OrderableEntity]:
    """
    Sort entities by ascending position.

    Entities without a position go last. The sort is stable, so ties and
    unpositioned entities keep their input order.

    Args:
        entities: Entities in any order

    Returns:
        New list in display order
    """
    return sorted(entities, key=_position_key)


def compute_candidate(
    config: ReorderConfig,
    prev_position: Optional[float] = None,
    next_position: Optional[float] = None,
) -> float:
    """
    Calculate the position for an entity placed between two neighbours.

    - No neighbours: min_position_value
    - Only next: one before it, never below min_position_value
    - Only previous: one after it
    - Both: midpoint, never below min_position_value

    The clamp can produce a value equal to a neighbour; the integrity check
    catches that and renumbers.
    """
    floor = config.min_position_value

    if prev_position is None and next_position is None:
        return floor

    if prev_position is None:
        return max(floor, next_position - 1)

    if next_position is None:
        return prev_position + 1

    return max(floor, (prev_position + next_position) / 2)


def _neighbours(
    remaining: Sequence[OrderableEntity], target_index: int
) -> Tuple[Optional[OrderableEntity], Optional[OrderableEntity]]:
    prev_entity = remaining[target_index - 1] if target_index > 0 else None
    next_entity = remaining[target_index] if target_index < len(remaining) else None
    return prev_entity, next_entity


def has_invalid_positions(
    entities: Sequence[OrderableEntity], config: ReorderConfig
) -> bool:
    """True when any defined position is below the floor or shared by two entities."""
    positions = [e.position for e in entities if e.position is not None]

    if any(position < config.min_position_value for position in positions):
        return True

    return len(set(positions)) != len(positions)


def _renumber_reason(
    entities: Sequence[OrderableEntity],
    target_index: int,
    candidate: float,
    move_id,
    config: ReorderConfig,
) -> Optional[str]:
    if len(entities) == 1:
        return None

    if candidate < config.min_position_value:
        return "candidate_below_minimum"

    if has_invalid_positions(entities, config):
        return "invalid_existing_positions"

    remaining = sort_by_position([e for e in entities if e.id != move_id])
    prev_entity, next_entity = _neighbours(remaining, target_index)

    if (
        prev_entity is not None
        and prev_entity.position is not None
        and abs(candidate - prev_entity.position) < config.min_position_gap
    ):
        return "gap_too_small_previous"

    if (
        next_entity is not None
        and next_entity.position is not None
        and abs(candidate - next_entity.position) < config.min_position_gap
    ):
        return "gap_too_small_next"

    return None


def needs_renumber(
    entities: Sequence[OrderableEntity],
    target_index: int,
    candidate: float,
    move_id,
    config: ReorderConfig,
) -> bool:
    """
    Decide whether a move must fall back to renumbering the whole collection.

    Invalid or duplicate positions are looked for across the original,
    unmodified set, so corruption anywhere forces a repair. Spacing is checked
    against the neighbours of target_index once the moved entity is removed.
    A single entity never needs renumbering.

    Args:
        entities: Original entities as supplied by the caller
        target_index: Index the entity moves to
        candidate: Position computed for the moved entity
        move_id: Id of the moved entity
        config: Thresholds

    Returns:
        bool
    """
    return _renumber_reason(entities, target_index, candidate, move_id, config) is not None


def renumber_all(
    ordered_entities: Sequence[OrderableEntity], config: ReorderConfig
) -> List[OrderableEntity]:
    """Assign evenly spaced positions (spacing, 2*spacing, ...) in the given order."""
    return [
        replace(entity, position=(index + 1) * config.renumber_spacing)
        for index, entity in enumerate(ordered_entities)
    ]


def _validate(entities: Sequence[OrderableEntity], move_id, target_index: int) -> OrderableEntity:
    if not entities:
        raise EmptyCollectionError()

    if move_id is None or move_id == "":
        raise MissingMoveIdError()

    if target_index < 0 or target_index >= len(entities):
        raise TargetIndexOutOfRangeError(target_index, len(entities))

    move_entity = next((e for e in entities if e.id == move_id), None)
    if move_entity is None:
        raise EntityNotFoundError(move_id)

    duplicates = [entity_id for entity_id, count in Counter(e.id for e in entities).items() if count > 1]
    if duplicates:
        raise DuplicateEntityIdError(duplicates)

    return move_entity


def compute_reorder(
    entities: Sequence[OrderableEntity],
    move_id,
    target_index: int,
    config: Optional[ReorderConfig] = None,
) -> ReorderResult:
    """
    Move one entity to target_index and work out which positions must change.

    Args:
        entities: Every entity of the collection, in any order
        move_id: Id of the entity to move
        target_index: Index in display order the entity should end up at
        config: Thresholds; defaults to ReorderConfig()

    Returns:
        ReorderResult with the changes to persist and the final display order

    Raises:
        EmptyCollectionError, MissingMoveIdError, TargetIndexOutOfRangeError,
        EntityNotFoundError, DuplicateEntityIdError
    """
    config = config or ReorderConfig()
    move_entity = _validate(entities, move_id, target_index)

    remaining = [e for e in sort_by_position(entities) if e.id != move_id]
    prev_entity, next_entity = _neighbours(remaining, target_index)

    candidate = compute_candidate(
        config,
        prev_entity.position if prev_entity is not None else None,
        next_entity.position if next_entity is not None else None,
    )
    logger.debug(
        "Candidate position computed",
        move_id=move_id,
        target_index=target_index,
        candidate=candidate,
    )

    tentative = list(remaining)
    tentative.insert(target_index, replace(move_entity, position=candidate))

    reason = _renumber_reason(entities, target_index, candidate, move_id, config)
    if reason is None:
        return ReorderResult(
            changes=[ChangeRecord(id=move_id, position=candidate)],
            ordered_entities=tentative,
        )

    logger.debug(
        "Renumbering collection",
        move_id=move_id,
        reason=reason,
        entity_count=len(tentative),
    )
    renumbered = renumber_all(tentative, config)
    changes = [
        ChangeRecord(id=entity.id, position=entity.position)
        for entity in renumbered
        if entity.position is not None
    ]
    return ReorderResult(changes=changes, ordered_entities=renumbered, renumbered=True)
