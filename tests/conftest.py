import os

# settings must be in place before the application modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["REMINDER_ENABLED"] = "false"
os.environ["MAIL_ENABLED"] = "false"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.auth_utils import hash_password
from core.unit_of_work import UnitOfWork, get_uow
from database import init_db
from main import app
from model.appointment_model import Appointment, AppointmentStatus
from model.doctor_model import Doctor
from model.patient_model import Patient


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def uow_factory(engine):
    session_factory = sessionmaker(autocommit=False, autoflush=True, bind=engine)
    return lambda: UnitOfWork(session_factory)


@pytest.fixture
def client(uow_factory):
    def override_get_uow():
        with uow_factory() as uow:
            yield uow

    app.dependency_overrides[get_uow] = override_get_uow
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def register_patient(client):
    """Register a patient through the API and return (id, auth headers)."""

    def _register(email="patient@example.com", password="secret123", **overrides):
        payload = {
            "first_name": "Rania",
            "last_name": "Haddad",
            "date_of_birth": "1990-04-12",
            "email": email,
            "phone_number": "0790000000",
            "password": password,
        }
        payload.update(overrides)
        response = client.post("/requesters/register", json=payload)
        assert response.status_code == 201, response.text
        login = client.post("/requesters/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        return response.json()["id"], {"Authorization": f"Bearer {login.json()['access_token']}"}

    return _register


@pytest.fixture
def register_doctor(client):
    """Register a doctor through the API and return (id, auth headers)."""

    def _register(email="doctor@example.com", password="secret123", **overrides):
        payload = {
            "first_name": "Omar",
            "last_name": "Saleh",
            "specialization": "Cardiology",
            "email": email,
            "phone_number": "0791111111",
            "password": password,
        }
        payload.update(overrides)
        response = client.post("/providers/register", json=payload)
        assert response.status_code == 201, response.text
        login = client.post("/providers/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        return response.json()["id"], {"Authorization": f"Bearer {login.json()['access_token']}"}

    return _register


@pytest.fixture
def seed(uow_factory):
    """Insert a patient, a doctor and appointments straight into the store."""

    def _seed(appointment_dates=(), status=AppointmentStatus.SCHEDULED):
        with uow_factory() as uow:
            uow.begin()
            patient = uow.patients.add(
                Patient(
                    first_name="Lina",
                    last_name="Nasser",
                    date_of_birth=date(1988, 7, 1),
                    email="lina@example.com",
                    phone_number="0792222222",
                    hashed_password=hash_password("secret123"),
                )
            )
            doctor = uow.doctors.add(
                Doctor(
                    first_name="Karim",
                    last_name="Aziz",
                    specialization="Dermatology",
                    email="karim@example.com",
                    phone_number="0793333333",
                    hashed_password=hash_password("secret123"),
                )
            )
            uow.save()
            ids = []
            for when in appointment_dates:
                appointment = uow.appointments.add(
                    Appointment(
                        patient_id=patient.id,
                        doctor_id=doctor.id,
                        appointment_date=when,
                        reason="checkup",
                        status=status,
                    )
                )
                uow.save()
                ids.append(appointment.id)
            patient_id, doctor_id = patient.id, doctor.id
            uow.commit()
        return patient_id, doctor_id, ids

    return _seed
