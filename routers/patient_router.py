from fastapi import APIRouter, Depends, status

from Controller import patient_controller
from core.auth_utils import CallerIdentity, get_current_identity
from core.unit_of_work import UnitOfWork, get_uow
from model.profile_schema import (
    CreatePatientRequest,
    LoginRequest,
    PatientView,
    TokenResponse,
    UpdatePatientRequest,
)

router = APIRouter(prefix="/requesters", tags=["Patients"])


@router.post("/register", response_model=PatientView, status_code=status.HTTP_201_CREATED)
def register(request: CreatePatientRequest, uow: UnitOfWork = Depends(get_uow)):
    return patient_controller.register_patient(uow, request)


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, uow: UnitOfWork = Depends(get_uow)):
    return patient_controller.login_patient(uow, request)


@router.get("/{patient_id}", response_model=PatientView)
def get_patient(
    patient_id: str,
    caller: CallerIdentity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    return patient_controller.get_patient_profile(uow, caller, patient_id)


@router.put("/{patient_id}", response_model=PatientView)
def update_patient(
    patient_id: str,
    update_data: UpdatePatientRequest,
    caller: CallerIdentity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    return patient_controller.update_patient_profile(uow, caller, patient_id, update_data)
