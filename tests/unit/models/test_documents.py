"""Tests for field updates and document merging."""

from __future__ import annotations

import pytest

from mythcrafter.models.campaign import CampaignUpdate
from mythcrafter.models.documents import (
    FieldUpdate,
    UpdateKind,
    changed_fields,
    updates_from_model,
)


class TestFieldUpdate:
    """Tests for the three-state field update."""

    def test_resolve(self) -> None:
        """Test each kind applied to a stored value."""
        assert FieldUpdate.absent().resolve("old") == "old"
        assert FieldUpdate.set_null().resolve("old") is None
        assert FieldUpdate.set_value("new").resolve("old") == "new"

    def test_set_value_rejects_none(self) -> None:
        """Test clearing must be explicit."""
        with pytest.raises(ValueError):
            FieldUpdate.set_value(None)

    def test_falsy_values_are_values(self) -> None:
        """Test 0, empty string and empty map are real values."""
        for value in (0, "", {}, False):
            update = FieldUpdate.set_value(value)
            assert update.kind is UpdateKind.SET_VALUE
            assert update.resolve("old") == value


class TestChangedFields:
    """Tests for filtering written fields."""

    def test_changed_fields_drops_absent(self) -> None:
        """Test only written fields remain."""
        updates = {"a": FieldUpdate.absent(), "b": FieldUpdate.set_null()}

        assert list(changed_fields(updates)) == ["b"]


class TestUpdatesFromModel:
    """Tests for deriving updates from a patch model."""

    def test_campaign_patch(self) -> None:
        """Test a nested document is passed as one value."""
        data = {"npcs": [{"name": "Ilsa", "mood": None}], "flags": {"met_ilsa": True}}
        patch = CampaignUpdate.model_validate({"id": 4, "campaign_data": data, "current_scene": None})

        updates = updates_from_model(patch)

        assert updates["campaign_data"].value == data
        assert updates["current_scene"].kind is UpdateKind.SET_NULL
        assert updates["title"].is_absent
        assert updates["status"].is_absent

    def test_status_cannot_be_cleared(self) -> None:
        """Test status is required once set."""
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            CampaignUpdate.model_validate({"id": 4, "status": None})
