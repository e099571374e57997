import uuid

from sqlalchemy import Column, Date, DateTime, String
from sqlalchemy.orm import relationship

from core.clock import utcnow
from database import Base


class Patient(Base):
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone_number = Column(String(20), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    appointments = relationship("Appointment", back_populates="patient")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
