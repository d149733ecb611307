"""Request and response models for the bridge endpoints."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from starlette.status import HTTP_200_OK, HTTP_207_MULTI_STATUS, HTTP_400_BAD_REQUEST

from content_bridge.api.v1.utils import calculate_offset


class CamelModel(BaseModel):
    """Serializes with camelCase keys and accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SiteInfoResponse(CamelModel):
    """Site metadata."""

    site_name: str = Field(..., title="Site Name", examples=["Content Bridge"])
    slogan: str = Field(default="", title="Slogan")
    current_timestamp: datetime = Field(..., title="Current Timestamp")


class HomepageUpdateResponse(CamelModel):
    """Result of a homepage update."""

    message: str
    id: int
    changed_at: datetime


class PaginationRequest(BaseModel):
    """Normalized paging parameters."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)

    @property
    def offset(self) -> int:
        return calculate_offset(self.page, self.limit)


class PaginationMeta(CamelModel):
    """Paging metadata of an export page."""

    total: int = Field(..., ge=0, description="Published items across all pages")
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    pages: int = Field(..., ge=0, description="ceil(total / limit)")


class ExportedItem(CamelModel):
    """One content item in an export page."""

    id: int
    uuid: UUID
    title: str
    created_at: datetime
    changed_at: datetime
    published: bool
    type: str
    body: str
    canonical_url: str


class ExportPage(CamelModel):
    """A page of exported content."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "data": [],
                "pagination": {"total": 25, "page": 2, "limit": 10, "pages": 3},
            }
        },
    )

    data: list[ExportedItem]
    pagination: PaginationMeta


class ImportedItem(CamelModel):
    """An item created by a bulk import."""

    id: int
    uuid: UUID
    title: str


class ImportOutcome(str, Enum):
    """Aggregate outcome of a bulk import."""

    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    FAILURE = "failure"


class ImportResult(CamelModel):
    """Created items plus inline per-item errors."""

    created: list[ImportedItem] = Field(default_factory=list)
    count: int = 0
    errors: Optional[list[str]] = None
    error_count: Optional[int] = None

    @property
    def outcome(self) -> ImportOutcome:
        if not self.errors:
            return ImportOutcome.SUCCESS
        if self.created:
            return ImportOutcome.PARTIAL_FAILURE
        return ImportOutcome.FAILURE

    @property
    def status_code(self) -> int:
        return {
            ImportOutcome.SUCCESS: HTTP_200_OK,
            ImportOutcome.PARTIAL_FAILURE: HTTP_207_MULTI_STATUS,
            ImportOutcome.FAILURE: HTTP_400_BAD_REQUEST,
        }[self.outcome]
