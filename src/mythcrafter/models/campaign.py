"""Pydantic V2 schemas for campaigns.

A campaign links one owner and one of that owner's characters to an
evolving narrative. ``campaign_data`` is an opaque nested document that is
stored and returned verbatim.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mythcrafter.core.constants import MAX_CAMPAIGN_TITLE_LENGTH
from mythcrafter.models.documents import Document, FieldUpdate, updates_from_model
from mythcrafter.models.enums import CampaignGenre, CampaignStatus


CampaignTitle = Annotated[str, Field(min_length=1, max_length=MAX_CAMPAIGN_TITLE_LENGTH)]


class Campaign(BaseModel):
    """A stored campaign.

    Attributes:
        id: Store-assigned identifier.
        user_id: Owning user's id.
        character_id: The owner's character playing this campaign.
        title: Campaign title.
        genre: Setting genre.
        status: Lifecycle status.
        description: Optional premise.
        current_scene: Optional text of the scene in progress.
        campaign_data: Opaque campaign state document.
        created_at: Creation time, never changes.
        updated_at: Time of the last successful update.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    user_id: int
    character_id: int
    title: str
    genre: CampaignGenre
    status: CampaignStatus = CampaignStatus.ACTIVE
    description: str | None = None
    current_scene: str | None = None
    campaign_data: Document | None = None
    created_at: datetime
    updated_at: datetime


class CampaignCreate(BaseModel):
    """Caller input for creating a campaign.

    There is no status field: new campaigns always start active, and a
    status (or any other unknown key) in the input is dropped.
    """

    model_config = ConfigDict(extra="ignore")

    user_id: int
    character_id: int
    title: CampaignTitle
    genre: CampaignGenre
    description: str | None = None
    current_scene: str | None = None
    campaign_data: Document | None = None


CAMPAIGN_NULLABLE_FIELDS = frozenset({"description", "current_scene", "campaign_data"})


class CampaignUpdate(BaseModel):
    """Caller input for a partial campaign update.

    Any status may be set regardless of the current one.
    """

    model_config = ConfigDict(extra="forbid")

    id: int
    title: CampaignTitle | None = None
    status: CampaignStatus | None = None
    description: str | None = None
    current_scene: str | None = None
    campaign_data: Document | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "CampaignUpdate":
        """Only optional fields may be cleared."""
        for name in self.model_fields_set - CAMPAIGN_NULLABLE_FIELDS - {"id"}:
            if getattr(self, name) is None:
                msg = f"Field '{name}' cannot be cleared"
                raise ValueError(msg)
        return self

    def field_updates(self) -> dict[str, FieldUpdate[Any]]:
        """Explicit per-field updates for this patch."""
        return updates_from_model(self)


__all__ = [
    "Campaign",
    "CampaignCreate",
    "CAMPAIGN_NULLABLE_FIELDS",
    "CampaignUpdate",
]
