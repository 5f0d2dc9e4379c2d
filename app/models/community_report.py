import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Enum, DateTime, Text, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
import enum

from app.db.session import Base


class ReportPriority(str, enum.Enum):
    critical = "critical"
    high = "high"


class ReportStatus(str, enum.Enum):
    pending = "pending"


class CommunityReport(Base):
    __tablename__ = "community_reports"
    __table_args__ = (
        CheckConstraint(
            "(post_id IS NULL) <> (comment_id IS NULL)",
            name="ck_community_reports_single_target"
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    community_id = Column(String, nullable=False, index=True)
    reporter_id = Column(String, nullable=True)  # NULL = System/AI report
    accused_id = Column(String, nullable=False, index=True)
    post_id = Column(String, nullable=True)
    comment_id = Column(String, nullable=True)

    reason = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(Enum(ReportPriority), nullable=False)
    status = Column(Enum(ReportStatus), default=ReportStatus.pending, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
