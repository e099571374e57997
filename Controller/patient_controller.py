import logging

from core.access_guard import Action, require
from core.auth_utils import CallerIdentity, Role, create_access_token, hash_password, verify_password
from core.errors import Conflict, NotFound, Unauthorized
from core.unit_of_work import UnitOfWork
from model.patient_model import Patient
from model.profile_schema import (
    CreatePatientRequest,
    LoginRequest,
    PatientView,
    TokenResponse,
    UpdatePatientRequest,
)

logger = logging.getLogger(__name__)


def register_patient(uow: UnitOfWork, request: CreatePatientRequest) -> PatientView:
    uow.begin()
    if uow.patients.exists(Patient.email == request.email):
        raise Conflict("Patient with this email already exists")

    new_patient = uow.patients.add(
        Patient(
            first_name=request.first_name,
            last_name=request.last_name,
            date_of_birth=request.date_of_birth,
            email=request.email,
            phone_number=request.phone_number,
            hashed_password=hash_password(request.password),
        )
    )
    uow.save()
    view = PatientView.model_validate(new_patient)
    uow.commit()

    logger.info(f"New patient registered with ID: {view.id}")
    return view


def login_patient(uow: UnitOfWork, request: LoginRequest) -> TokenResponse:
    patient = uow.patients.find_one(Patient.email == request.email)
    if not patient or not verify_password(request.password, patient.hashed_password):
        logger.warning(f"Failed patient login for email: {request.email}")
        raise Unauthorized("Invalid email or password")

    token = create_access_token(patient.email, patient.id, Role.PATIENT)
    logger.info(f"Patient logged in with email: {patient.email}")
    return TokenResponse(access_token=token)


def get_patient_profile(uow: UnitOfWork, caller: CallerIdentity, patient_id: str) -> PatientView:
    require(caller, Action.READ_PATIENT_PROFILE, patient_id)
    patient = uow.patients.get(patient_id)
    if not patient:
        raise NotFound("Patient not found")
    return PatientView.model_validate(patient)


def update_patient_profile(
    uow: UnitOfWork, caller: CallerIdentity, patient_id: str, update_data: UpdatePatientRequest
) -> PatientView:
    require(caller, Action.UPDATE_PATIENT_PROFILE, patient_id)
    patient = uow.patients.get(patient_id)
    if not patient:
        raise NotFound("Patient not found")

    changes = update_data.changes()
    if "email" in changes and uow.patients.exists(Patient.email == changes["email"], Patient.id != patient_id):
        raise Conflict("Email already exists")

    uow.begin()
    uow.patients.update(patient, **changes)
    uow.commit()

    logger.info(f"Patient updated with ID: {patient_id} ({', '.join(sorted(changes)) or 'no changes'})")
    return PatientView.model_validate(patient)
