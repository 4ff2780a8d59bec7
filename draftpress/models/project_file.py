import uuid
from datetime import datetime

from sqlalchemy import String, Text, DateTime, Uuid, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from draftpress.db.base import Base


class ProjectFile(Base):
    __tablename__ = "project_files"
    __table_args__ = (
        UniqueConstraint("version_id", "file_path", name="uq_project_file_path"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    version_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("project_versions.id", ondelete="CASCADE"), nullable=False
    )
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_type: Mapped[str] = mapped_column(String(100), nullable=False, default="text/plain")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def copy_to(self, version_id: uuid.UUID) -> "ProjectFile":
        return ProjectFile(
            version_id=version_id,
            file_path=self.file_path,
            content=self.content,
            content_type=self.content_type,
        )
