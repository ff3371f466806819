"""
Tests for the collection integrity report.
"""
from reorder.config import ReorderConfig
from reorder.integrity import check_integrity
from reorder.models import OrderableEntity


def make_entities(*pairs):
    return [OrderableEntity(id=entity_id, position=position) for entity_id, position in pairs]


class TestCheckIntegrity:
    """Tests for check_integrity."""

    def test_valid_collection(self):
        report = check_integrity(make_entities(("A", 10), ("B", 20)))
        assert report.is_valid is True
        assert report.issues == []

    def test_reports_invalid_and_duplicate_positions(self):
        entities = make_entities(("A", 0), ("B", 1), ("C", 1), ("D", -1))
        report = check_integrity(entities)

        assert report.is_valid is False
        assert report.invalid_ids == ["A", "D"]
        assert report.duplicate_positions == [1]
        assert report.issues == [
            "2 entities have position below 1",
            "1 duplicate position values detected",
        ]

    def test_counts_every_extra_duplicate(self):
        entities = make_entities(("A", 1), ("B", 1), ("C", 1), ("D", 2), ("E", 2))
        report = check_integrity(entities)
        assert report.duplicate_positions == [1, 2]
        assert report.issues == ["3 duplicate position values detected"]

    def test_unpositioned_entities_do_not_invalidate(self):
        report = check_integrity(make_entities(("A", 10), ("B", None), ("C", None)))
        assert report.is_valid is True
        assert report.unpositioned_ids == ["B", "C"]

    def test_custom_minimum(self):
        config = ReorderConfig(min_position_value=10)
        report = check_integrity(make_entities(("A", 5), ("B", 15)), config)
        assert report.is_valid is False
        assert report.invalid_ids == ["A"]

    def test_empty_collection_is_valid(self):
        assert check_integrity([]).is_valid is True
