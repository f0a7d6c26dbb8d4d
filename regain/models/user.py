from datetime import datetime
from sqlalchemy import Column, DateTime, JSON, String
from sqlalchemy.orm import relationship

from regain.db.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(128), primary_key=True)
    baseline_metrics = Column(JSON, nullable=True)
    discomforts = Column(JSON, nullable=False, default=list)
    objectives = Column(JSON, nullable=False, default=list)
    preferred_discipline = Column(String(64), nullable=True)
    # Rolling exclusion window: replaced wholesale after every completed generation run
    blacklisted_variation_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    session_records = relationship(
        "WeeklySessionRecord",
        back_populates="user",
        cascade="all, delete-orphan",
    )
