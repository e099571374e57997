import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from core.clock import utcnow
from database import Base
from model.doctor_model import Doctor  # noqa: F401
from model.patient_model import Patient  # noqa: F401

REASON_MAX_LENGTH = 500


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(String(36), ForeignKey("doctors.id"), nullable=False, index=True)
    appointment_date = Column(DateTime, nullable=False, index=True)
    reason = Column(String(REASON_MAX_LENGTH), nullable=False)
    status = Column(
        Enum(AppointmentStatus, values_callable=lambda e: [m.value for m in e], length=20),
        default=AppointmentStatus.SCHEDULED,
        nullable=False,
    )
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_reminded_at = Column(DateTime, nullable=True)
    version = Column(Integer, nullable=False)

    patient = relationship("Patient", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")

    # every UPDATE is checked against the version that was loaded
    __mapper_args__ = {"version_id_col": version}
