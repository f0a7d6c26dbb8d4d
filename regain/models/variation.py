from sqlalchemy import Column, Integer, JSON, String

from regain.db.database import Base


class Variation(Base):
    __tablename__ = "variations"

    # Surrogate key keeps catalog order stable (insertion order)
    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(128), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, default="")
    disciplines = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    phase = Column(String(16), nullable=True)
