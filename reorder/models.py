"""
Value objects passed into and returned from the reorder engine.
"""
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional


def safe_position(value) -> Optional[float]:
    """Convert a stored position to float, handling None, blank and string values."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


@dataclass(frozen=True)
class OrderableEntity:
    """
    An item that can be placed in an ordered collection.

    ``position`` is None when the item has never been ordered; such items sort
    after every positioned item. Subclasses may add fields of their own, the
    engine only ever copies entities with ``dataclasses.replace``.
    """
    id: Any
    position: Optional[float] = None

    @classmethod
    def from_mapping(
        cls,
        row: Mapping[str, Any],
        id_key: str = "id",
        position_key: str = "position",
    ) -> "OrderableEntity":
        """
        Build an entity from a dict-like row (e.g. a database result).

        Args:
            row: Mapping holding at least the id key
            id_key: Key of the identifier
            position_key: Key of the position value; missing or unparsable
                values become None

        Returns:
            OrderableEntity
        """
        return cls(id=row[id_key], position=safe_position(row.get(position_key)))


@dataclass(frozen=True)
class ChangeRecord:
    """A single position update the persistence layer must apply."""
    id: Any
    position: float

    def to_dict(self) -> dict:
        return {"id": self.id, "position": self.position}


@dataclass
class ReorderResult:
    changes: List[ChangeRecord]
    ordered_entities: List[OrderableEntity]
    renumbered: bool = False

    def to_dict(self) -> dict:
        """Serialize for JSON response"""
        return {
            "changes": [change.to_dict() for change in self.changes],
            "ordered_entities": [
                {"id": entity.id, "position": entity.position}
                for entity in self.ordered_entities
            ],
            "renumbered": self.renumbered,
        }


@dataclass(frozen=True)
class MoveRequest:
    """Which entity moved and the index it moved to."""
    move_id: Any
    target_index: int


@dataclass
class IntegrityReport:
    is_valid: bool
    issues: List[str] = field(default_factory=list)
    invalid_ids: List[Any] = field(default_factory=list)
    duplicate_positions: List[float] = field(default_factory=list)
    unpositioned_ids: List[Any] = field(default_factory=list)
