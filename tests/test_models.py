"""
Tests for the reorder value objects.
"""
from reorder.models import (
    safe_position,
    OrderableEntity,
    ChangeRecord,
    ReorderResult,
)


class TestSafePosition:
    """Tests for safe_position."""

    def test_integer(self):
        """Test that an integer is converted to float."""
        assert safe_position(12) == 12.0

    def test_string(self):
        """Test that a numeric string is converted to float."""
        assert safe_position('1.5') == 1.5

    def test_none(self):
        assert safe_position(None) is None

    def test_blank_string(self):
        assert safe_position('   ') is None

    def test_invalid(self):
        """Test that an unparsable value becomes None."""
        assert safe_position('INVALID') is None

    def test_zero_is_kept(self):
        """Test that 0 stays 0 and is not treated as missing."""
        assert safe_position(0) == 0.0


class TestOrderableEntity:
    """Tests for OrderableEntity."""

    def test_position_defaults_to_none(self):
        assert OrderableEntity(id="A").position is None

    def test_from_mapping(self):
        entity = OrderableEntity.from_mapping({"id": "A", "position": "3"})
        assert entity == OrderableEntity(id="A", position=3.0)

    def test_from_mapping_missing_position(self):
        entity = OrderableEntity.from_mapping({"id": "A"})
        assert entity.position is None

    def test_from_mapping_custom_keys(self):
        row = {"chapter_id": 7, "order": 2}
        entity = OrderableEntity.from_mapping(row, id_key="chapter_id", position_key="order")
        assert entity == OrderableEntity(id=7, position=2.0)


class TestReorderResult:
    """Tests for ReorderResult serialization."""

    def test_to_dict(self):
        result = ReorderResult(
            changes=[ChangeRecord(id="C", position=99)],
            ordered_entities=[
                OrderableEntity(id="C", position=99),
                OrderableEntity(id="A", position=100),
                OrderableEntity(id="B"),
            ],
        )

        assert result.to_dict() == {
            "changes": [{"id": "C", "position": 99}],
            "ordered_entities": [
                {"id": "C", "position": 99},
                {"id": "A", "position": 100},
                {"id": "B", "position": None},
            ],
            "renumbered": False,
        }
