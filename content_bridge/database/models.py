"""SQLAlchemy models for content items, types and revisions."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
)
from sqlalchemy.orm import relationship

from content_bridge.core.clock import utcnow

from .base import Base


class ContentTypeModel(Base):
    """Registered content type."""

    __tablename__ = "content_type"

    machine_name = Column(Text, primary_key=True, nullable=False)
    label = Column(Text, nullable=False, default="")


class ContentItemModel(Base):
    """Content item row."""

    __tablename__ = "content_item"
    __table_args__ = (
        Index("ix_content_item_status_created", "published", "promoted", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(
        Text,
        unique=True,
        nullable=False,
        default=lambda: str(uuid4()),
    )
    title = Column(Text, nullable=False)
    body = Column(Text, nullable=False, default="")
    content_type = Column(
        Text,
        ForeignKey("content_type.machine_name", ondelete="RESTRICT"),
        nullable=False,
    )
    published = Column(Boolean, nullable=False, default=False)
    promoted = Column(Boolean, nullable=False, default=False)
    owner_id = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    changed_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    revisions = relationship(
        "ContentRevisionModel",
        back_populates="item",
        order_by="ContentRevisionModel.id",
    )


class ContentRevisionModel(Base):
    """Append-only revision log entry."""

    __tablename__ = "content_revision"

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(
        Integer,
        ForeignKey("content_item.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    editor_id = Column(Integer, nullable=False, default=0)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    log_message = Column(Text, nullable=False, default="")

    # Snapshot after the update
    title = Column(Text, nullable=False)
    body = Column(Text, nullable=False, default="")

    item = relationship("ContentItemModel", back_populates="revisions")
