import logging
from typing import List

from core.access_guard import Action, require
from core.appointment_lifecycle import Transition, next_status
from core.auth_utils import CallerIdentity
from core.clock import to_utc_naive, utcnow
from core.errors import NotFound, ValidationFailed
from core.unit_of_work import UnitOfWork
from model.appointment_model import Appointment, AppointmentStatus
from model.appointment_schema import AppointmentRequest, AppointmentView
from model.doctor_model import Doctor
from model.profile_schema import DoctorSummary

logger = logging.getLogger(__name__)


# ------------------------
# 0️⃣ Doctor directory
# ------------------------
def get_all_doctors(uow: UnitOfWork, caller: CallerIdentity) -> dict:
    require(caller, Action.BROWSE_DOCTORS)
    doctors = uow.doctors.all(order_by=Doctor.last_name)
    return {
        "doctors": [
            DoctorSummary(id=doctor.id, name=doctor.full_name, specialty=doctor.specialization)
            for doctor in doctors
        ]
    }


# ------------------------
# 1️⃣ Book a new appointment
# ------------------------
def book_appointment(uow: UnitOfWork, caller: CallerIdentity, request: AppointmentRequest) -> AppointmentView:
    require(caller, Action.CREATE_APPOINTMENT, request)

    appointment_date = to_utc_naive(request.appointment_date)
    if appointment_date <= utcnow():
        raise ValidationFailed("Appointment date must be in the future")

    patient = uow.patients.get(request.patient_id)
    if not patient:
        raise NotFound("Patient not found")

    doctor = uow.doctors.get(request.doctor_id)
    if not doctor:
        raise NotFound("Doctor not found")

    new_app = uow.appointments.add(
        Appointment(
            patient_id=patient.id,
            doctor_id=doctor.id,
            appointment_date=appointment_date,
            reason=request.reason,
            status=AppointmentStatus.SCHEDULED,
        )
    )
    uow.save()

    logger.info(f"New appointment created with ID: {new_app.id}")
    return AppointmentView.from_appointment(new_app)


# ------------------------
# 2️⃣ Read appointments
# ------------------------
def _load(uow: UnitOfWork, appointment_id: str) -> Appointment:
    appointment = uow.appointments.get(appointment_id)
    if not appointment:
        raise NotFound("Appointment not found")
    return appointment


def get_appointment(uow: UnitOfWork, caller: CallerIdentity, appointment_id: str) -> AppointmentView:
    appointment = _load(uow, appointment_id)
    require(caller, Action.READ_APPOINTMENT, appointment)
    return AppointmentView.from_appointment(appointment)


def get_patient_appointments(uow: UnitOfWork, caller: CallerIdentity, patient_id: str) -> List[AppointmentView]:
    require(caller, Action.LIST_PATIENT_APPOINTMENTS, patient_id)
    appointments = uow.appointments.find(
        Appointment.patient_id == patient_id, order_by=Appointment.appointment_date
    )
    return [AppointmentView.from_appointment(app) for app in appointments]


def get_doctor_appointments(uow: UnitOfWork, caller: CallerIdentity, doctor_id: str) -> List[AppointmentView]:
    require(caller, Action.LIST_DOCTOR_APPOINTMENTS, doctor_id)
    appointments = uow.appointments.find(
        Appointment.doctor_id == doctor_id, order_by=Appointment.appointment_date
    )
    return [AppointmentView.from_appointment(app) for app in appointments]


# ------------------------
# 3️⃣ Status transitions
# ------------------------
def _apply_transition(
    uow: UnitOfWork, caller: CallerIdentity, appointment_id: str, action: Action, transition: Transition
) -> Appointment:
    appointment = _load(uow, appointment_id)
    require(caller, action, appointment)
    new_status = next_status(appointment.status, transition)

    uow.begin()
    uow.appointments.update(appointment, status=new_status)
    uow.commit()
    return appointment


def cancel_appointment(uow: UnitOfWork, caller: CallerIdentity, appointment_id: str) -> None:
    _apply_transition(uow, caller, appointment_id, Action.CANCEL_APPOINTMENT, Transition.CANCEL)
    logger.info(f"Appointment cancelled with ID: {appointment_id} by {caller.role.value} {caller.id}")


def complete_appointment(uow: UnitOfWork, caller: CallerIdentity, appointment_id: str) -> None:
    _apply_transition(uow, caller, appointment_id, Action.COMPLETE_APPOINTMENT, Transition.COMPLETE)
    logger.info(f"Appointment completed with ID: {appointment_id}")
