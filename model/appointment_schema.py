from datetime import datetime
from typing import Annotated

from pydantic import AliasChoices, BaseModel, Field, StringConstraints

from model.appointment_model import REASON_MAX_LENGTH, AppointmentStatus


class AppointmentRequest(BaseModel):
    patient_id: str = Field(validation_alias=AliasChoices("patient_id", "patientId"))
    doctor_id: str = Field(validation_alias=AliasChoices("doctor_id", "doctorId"))
    appointment_date: datetime = Field(validation_alias=AliasChoices("appointment_date", "date"))
    reason: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=REASON_MAX_LENGTH)]


class AppointmentView(BaseModel):
    id: str
    patient_id: str
    doctor_id: str
    appointment_date: datetime
    reason: str
    status: AppointmentStatus
    created_at: datetime
    patient_name: str
    doctor_name: str
    doctor_specialization: str

    @classmethod
    def from_appointment(cls, appointment):
        return cls(
            id=appointment.id,
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            appointment_date=appointment.appointment_date,
            reason=appointment.reason,
            status=appointment.status,
            created_at=appointment.created_at,
            patient_name=appointment.patient.full_name,
            doctor_name=appointment.doctor.full_name,
            doctor_specialization=appointment.doctor.specialization,
        )
