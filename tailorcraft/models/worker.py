# tailorcraft/models/worker.py
# Мастера ателье. Учётная запись (users) необязательна.
from sqlalchemy import Column, String, Float, ForeignKey, Enum
from sqlalchemy.orm import relationship
from tailorcraft.db.base import Base
import enum

class WorkerSpecialty(str, enum.Enum):
    TAILOR = "TAILOR"
    CUTTER = "CUTTER"
    FINISHER = "FINISHER"
    PRESSER = "PRESSER"

class Worker(Base):
    __tablename__ = "workers"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=True)
    name = Column(String, nullable=False)
    specialty = Column(Enum(WorkerSpecialty), nullable=False)
    performance_rating = Column(Float, nullable=True)

    user = relationship("User")
