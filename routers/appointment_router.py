from typing import List

from fastapi import APIRouter, Depends, Response, status

from Controller import appointment_controller
from core.auth_utils import CallerIdentity, get_current_identity
from core.unit_of_work import UnitOfWork, get_uow
from model.appointment_schema import AppointmentRequest, AppointmentView

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.post("", response_model=AppointmentView, status_code=status.HTTP_201_CREATED)
def create_appointment(
    request: AppointmentRequest,
    caller: CallerIdentity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    return appointment_controller.book_appointment(uow, caller, request)


@router.get("/patient/{patient_id}", response_model=List[AppointmentView])
def get_patient_appointments(
    patient_id: str,
    caller: CallerIdentity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    return appointment_controller.get_patient_appointments(uow, caller, patient_id)


@router.get("/doctor/{doctor_id}", response_model=List[AppointmentView])
def get_doctor_appointments(
    doctor_id: str,
    caller: CallerIdentity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    return appointment_controller.get_doctor_appointments(uow, caller, doctor_id)


@router.get("/{appointment_id}", response_model=AppointmentView)
def get_appointment(
    appointment_id: str,
    caller: CallerIdentity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    return appointment_controller.get_appointment(uow, caller, appointment_id)


@router.put("/{appointment_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
def cancel_appointment(
    appointment_id: str,
    caller: CallerIdentity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    appointment_controller.cancel_appointment(uow, caller, appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{appointment_id}/complete", status_code=status.HTTP_204_NO_CONTENT)
def complete_appointment(
    appointment_id: str,
    caller: CallerIdentity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    appointment_controller.complete_appointment(uow, caller, appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
