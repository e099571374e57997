import logging

from core.access_guard import Action, require
from core.auth_utils import CallerIdentity, Role, create_access_token, hash_password, verify_password
from core.errors import Conflict, NotFound, Unauthorized
from core.unit_of_work import UnitOfWork
from model.doctor_model import Doctor
from model.profile_schema import (
    CreateDoctorRequest,
    DoctorView,
    LoginRequest,
    TokenResponse,
    UpdateDoctorRequest,
)

logger = logging.getLogger(__name__)


def register_doctor(uow: UnitOfWork, request: CreateDoctorRequest) -> DoctorView:
    uow.begin()
    if uow.doctors.exists(Doctor.email == request.email):
        raise Conflict("Doctor with this email already exists")

    new_doctor = uow.doctors.add(
        Doctor(
            first_name=request.first_name,
            last_name=request.last_name,
            specialization=request.specialization,
            email=request.email,
            phone_number=request.phone_number,
            hashed_password=hash_password(request.password),
        )
    )
    uow.save()
    view = DoctorView.model_validate(new_doctor)
    uow.commit()

    logger.info(f"New doctor registered with ID: {view.id}")
    return view


def login_doctor(uow: UnitOfWork, request: LoginRequest) -> TokenResponse:
    doctor = uow.doctors.find_one(Doctor.email == request.email)
    if not doctor or not verify_password(request.password, doctor.hashed_password):
        logger.warning(f"Failed doctor login for email: {request.email}")
        raise Unauthorized("Invalid email or password")

    token = create_access_token(doctor.email, doctor.id, Role.DOCTOR)
    logger.info(f"Doctor logged in with email: {doctor.email}")
    return TokenResponse(access_token=token)


def get_doctor_profile(uow: UnitOfWork, caller: CallerIdentity, doctor_id: str) -> DoctorView:
    require(caller, Action.READ_DOCTOR_PROFILE, doctor_id)
    doctor = uow.doctors.get(doctor_id)
    if not doctor:
        raise NotFound("Doctor not found")
    return DoctorView.model_validate(doctor)


def update_doctor_profile(
    uow: UnitOfWork, caller: CallerIdentity, doctor_id: str, update_data: UpdateDoctorRequest
) -> DoctorView:
    require(caller, Action.UPDATE_DOCTOR_PROFILE, doctor_id)
    doctor = uow.doctors.get(doctor_id)
    if not doctor:
        raise NotFound("Doctor not found")

    changes = update_data.changes()
    if "email" in changes and uow.doctors.exists(Doctor.email == changes["email"], Doctor.id != doctor_id):
        raise Conflict("Email already exists")

    uow.begin()
    uow.doctors.update(doctor, **changes)
    uow.commit()

    logger.info(f"Doctor updated with ID: {doctor_id}")
    return DoctorView.model_validate(doctor)
