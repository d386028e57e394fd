from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.sql import func

from healthvault.core.database import Base


class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, autoincrement=True)

    medicine = Column(String(255), nullable=False, index=True)
    dosage = Column(String(100), nullable=False)
    duration = Column(String(100), nullable=False)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    condition = Column(String(255), index=True)

    # Set by the repository on insert and on every update
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), nullable=False)

    USER_FIELDS = ("medicine", "dosage", "duration", "start_date", "end_date", "condition")

    def to_dict(self):
        return {
            "id": self.id,
            "medicine": self.medicine,
            "dosage": self.dosage,
            "duration": self.duration,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "condition": self.condition,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<MedicalRecord id={self.id} medicine={self.medicine!r} start_date={self.start_date}>"
