import uuid
from datetime import datetime

from sqlalchemy import Boolean, String, Text, DateTime, Uuid, func, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from draftpress.db.base import Base


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    show_source: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    # Pointers into project_versions; the versions point back at the project,
    # so both FKs are added after table creation.
    active_version_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("project_versions.id", use_alter=True, name="fk_project_active_version"),
        nullable=True,
    )
    draft_version_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("project_versions.id", use_alter=True, name="fk_project_draft_version"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
