from fastapi import APIRouter, Depends, status

from Controller import appointment_controller, doctor_controller
from core.auth_utils import CallerIdentity, get_current_identity
from core.unit_of_work import UnitOfWork, get_uow
from model.profile_schema import (
    CreateDoctorRequest,
    DoctorView,
    LoginRequest,
    TokenResponse,
    UpdateDoctorRequest,
)

router = APIRouter(prefix="/providers", tags=["Doctors"])


# جلب كل الدكاترة
@router.get("")
def get_all_doctors(caller: CallerIdentity = Depends(get_current_identity), uow: UnitOfWork = Depends(get_uow)):
    return appointment_controller.get_all_doctors(uow, caller)


@router.post("/register", response_model=DoctorView, status_code=status.HTTP_201_CREATED)
def register(request: CreateDoctorRequest, uow: UnitOfWork = Depends(get_uow)):
    return doctor_controller.register_doctor(uow, request)


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, uow: UnitOfWork = Depends(get_uow)):
    return doctor_controller.login_doctor(uow, request)


@router.get("/{doctor_id}", response_model=DoctorView)
def get_doctor(
    doctor_id: str,
    caller: CallerIdentity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    return doctor_controller.get_doctor_profile(uow, caller, doctor_id)


@router.put("/{doctor_id}", response_model=DoctorView)
def update_doctor(
    doctor_id: str,
    update_data: UpdateDoctorRequest,
    caller: CallerIdentity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    return doctor_controller.update_doctor_profile(uow, caller, doctor_id, update_data)
