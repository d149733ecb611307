"""Domain models for content items and their history."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ContentType(BaseModel):
    """A registered content type."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    machine_name: str = Field(
        ...,
        min_length=1,
        title="Machine Name",
        description="Identifier referenced by content items",
        examples=["page"],
    )
    label: str = Field(
        default="",
        title="Label",
        description="Human-readable name",
    )


class ContentDraft(BaseModel):
    """Fields accepted when creating a content item.

    Validation of ``title`` and ``content_type`` belongs to the store, which
    reports failures as ``ValidationError``.
    """

    title: str
    body: str = ""
    content_type: str = "page"
    published: bool = True
    promoted: bool = False
    owner_id: int = 0


class ContentItem(BaseModel):
    """A stored content item."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., title="ID", description="Store-assigned identifier")
    uuid: UUID = Field(..., title="UUID", description="Immutable global id")
    title: str = Field(..., min_length=1, title="Title")
    body: str = Field(default="", title="Body", description="HTML fragment")
    content_type: str = Field(..., title="Content Type")
    published: bool = Field(default=False, title="Published")
    promoted: bool = Field(default=False, title="Promoted")
    created_at: datetime = Field(..., title="Created At")
    changed_at: datetime = Field(..., title="Changed At")
    owner_id: int = Field(default=0, title="Owner ID")


class RevisionInfo(BaseModel):
    """Who, when and why for a revision-creating update."""

    editor_id: int
    timestamp: datetime
    log_message: str = ""


class Revision(BaseModel):
    """One entry in an item's append-only revision log."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    item_id: int
    editor_id: int
    timestamp: datetime
    log_message: str = ""
    title: str
    body: str = ""
