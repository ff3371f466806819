"""
Service layer around the reorder engine.

The engine itself is pure; this module fetches the current state of a
collection from a repository, runs the engine and writes the changes back as
point updates keyed by id.
"""
from typing import Any, Iterable, List, Optional, Protocol, Sequence

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from reorder.config import ReorderConfig, get_config
from reorder.engine import compute_reorder, renumber_all, sort_by_position
from reorder.errors import EntityNotFoundError, ReorderError
from reorder.logging_config import ReorderContext, get_logger
from reorder.models import ChangeRecord, MoveRequest, OrderableEntity, ReorderResult, safe_position

logger = get_logger(__name__)


def detect_move(
    entities: Sequence[OrderableEntity], target_ids: Sequence[Any]
) -> Optional[MoveRequest]:
    """
    Work out which entity moved by diffing a requested order against the stored one.

    Handles a single drag in either direction. For an adjacent swap, or when the
    requested order differs by more than one move, the entity at the first
    differing slot is moved there.

    Args:
        entities: Current entities of the collection
        target_ids: Every entity id in the order the caller wants

    Returns:
        MoveRequest, or None when the requested order is already the stored order

    Raises:
        EntityNotFoundError: If target_ids names an unknown entity
        ReorderError: If target_ids does not list every entity exactly once
    """
    current_ids = [e.id for e in sort_by_position(entities)]
    known = set(current_ids)

    for entity_id in target_ids:
        if entity_id not in known:
            raise EntityNotFoundError(entity_id)

    if len(target_ids) != len(current_ids) or len(set(target_ids)) != len(target_ids):
        raise ReorderError("target order must list every entity exactly once")

    differing = [i for i, (cur, tgt) in enumerate(zip(current_ids, target_ids)) if cur != tgt]
    if not differing:
        return None

    start, end = differing[0], differing[-1]
    current_window = current_ids[start:end + 1]
    target_window = list(target_ids[start:end + 1])

    # Entity dragged down over two or more others: everything between slides up by one
    if end - start > 1 and target_window == current_window[1:] + current_window[:1]:
        return MoveRequest(move_id=current_window[0], target_index=end)

    return MoveRequest(move_id=target_ids[start], target_index=start)


class OrderRepository(Protocol):
    """Data access the service needs for one kind of ordered collection."""

    def fetch_entities(self, collection_id) -> List[OrderableEntity]:
        ...

    def apply_changes(self, collection_id, changes: Iterable[ChangeRecord]) -> None:
        ...


class SqlAlchemyOrderRepository:
    """
    OrderRepository over a mapped SQLAlchemy model.

    Args:
        session: Session used for reads and writes
        model: Mapped class holding the ordered rows
        collection_column: Attribute that groups rows into a collection
        id_column: Attribute holding the entity id
        position_column: Attribute holding the (nullable) position
        commit: Commit after applying changes; when False the caller owns the transaction
    """

    def __init__(
        self,
        session: Session,
        model,
        collection_column: str,
        id_column: str = "id",
        position_column: str = "position",
        commit: bool = True,
    ):
        self.session = session
        self.model = model
        self.collection_column = collection_column
        self.id_column = id_column
        self.position_column = position_column
        self.commit = commit

    def _column(self, name: str):
        return getattr(self.model, name)

    def fetch_entities(self, collection_id) -> List[OrderableEntity]:
        id_col = self._column(self.id_column)
        position_col = self._column(self.position_column)
        stmt = (
            select(id_col, position_col)
            .where(self._column(self.collection_column) == collection_id)
            .order_by(id_col)
        )
        rows = self.session.execute(stmt).all()
        return [OrderableEntity(id=row[0], position=safe_position(row[1])) for row in rows]

    def apply_changes(self, collection_id, changes: Iterable[ChangeRecord]) -> None:
        try:
            for change in changes:
                stmt = (
                    update(self.model)
                    .where(self._column(self.collection_column) == collection_id)
                    .where(self._column(self.id_column) == change.id)
                    .values({self.position_column: change.position})
                )
                self.session.execute(stmt)
            if self.commit:
                self.session.commit()
            else:
                self.session.flush()
        except Exception:
            logger.error(
                "Failed to apply position changes",
                collection_id=collection_id,
                exc_info=True,
            )
            self.session.rollback()
            raise


class ReorderService:
    """Fetches a collection, runs the engine and persists the resulting changes."""

    def __init__(self, repository: OrderRepository, config: Optional[ReorderConfig] = None):
        self.repository = repository
        self.config = config or get_config()

    def move(self, collection_id, move_id, target_index: int) -> ReorderResult:
        """
        Move an entity to target_index within its collection.

        Raises:
            ReorderError: For invalid input (see reorder.errors)
        """
        with ReorderContext(collection_id, move_id=move_id):
            entities = self.repository.fetch_entities(collection_id)
            return self._execute(collection_id, entities, MoveRequest(move_id, target_index))

    def apply_order(self, collection_id, target_ids: Sequence[Any]) -> Optional[ReorderResult]:
        """
        Persist a full requested order (e.g. the ids a UI list ended up with).

        Returns:
            ReorderResult, or None when the order did not change
        """
        with ReorderContext(collection_id):
            entities = self.repository.fetch_entities(collection_id)
            move = detect_move(entities, target_ids)
            if move is None:
                logger.info("No changes needed - order unchanged", collection_id=collection_id)
                return None
            return self._execute(collection_id, entities, move)

    def _execute(self, collection_id, entities, move: MoveRequest) -> ReorderResult:
        result = compute_reorder(entities, move.move_id, move.target_index, self.config)

        # A positioned entity placed after unpositioned ones would read back in the old order
        stored_order = [e.id for e in sort_by_position(result.ordered_entities)]
        if stored_order != [e.id for e in result.ordered_entities]:
            renumbered = renumber_all(result.ordered_entities, self.config)
            result = ReorderResult(
                changes=[ChangeRecord(id=e.id, position=e.position) for e in renumbered],
                ordered_entities=renumbered,
                renumbered=True,
            )

        if result.renumbered:
            logger.warning(
                "Renumbering triggered - invalid or tight positions repaired",
                collection_id=collection_id,
                change_count=len(result.changes),
            )

        self.repository.apply_changes(collection_id, result.changes)
        logger.info(
            "Positions updated",
            collection_id=collection_id,
            move_id=move.move_id,
            target_index=move.target_index,
            change_count=len(result.changes),
            renumbered=result.renumbered,
        )
        return result
