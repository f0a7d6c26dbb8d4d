from datetime import datetime
from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy.orm import relationship

from regain.db.database import Base


class WeeklySessionRecord(Base):
    """Immutable archive of one completed generation run."""

    __tablename__ = "weekly_session_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    week_timestamp = Column(BigInteger, nullable=False)
    weekly_plan = Column(JSON, nullable=False)
    final_sessions = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="session_records")

    __table_args__ = (
        UniqueConstraint("user_id", "week_timestamp", name="uq_user_week_timestamp"),
    )
