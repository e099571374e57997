from datetime import date, timedelta

import pytest

from core.clock import utcnow
from core.errors import ConcurrencyConflict, Conflict
from model.appointment_model import AppointmentStatus
from model.patient_model import Patient


def make_patient(email="amal@example.com"):
    return Patient(
        first_name="Amal",
        last_name="Khoury",
        date_of_birth=date(1995, 3, 3),
        email=email,
        phone_number="0794444444",
        hashed_password="not-a-real-hash",
    )


class TestTransactions:
    def test_pending_changes_visible_inside_but_not_outside(self, uow_factory):
        with uow_factory() as writer, uow_factory() as reader:
            writer.begin()
            writer.patients.add(make_patient())
            writer.save()

            assert writer.patients.exists(Patient.email == "amal@example.com")
            assert not reader.patients.exists(Patient.email == "amal@example.com")

            writer.commit()
            assert reader.patients.exists(Patient.email == "amal@example.com")

    def test_rollback_discards_everything(self, uow_factory):
        with uow_factory() as uow:
            uow.begin()
            uow.patients.add(make_patient())
            uow.save()
            uow.rollback()
            assert not uow.in_transaction
            assert not uow.patients.exists(Patient.email == "amal@example.com")

    def test_leaving_without_commit_rolls_back(self, uow_factory):
        with pytest.raises(RuntimeError):
            with uow_factory() as uow:
                uow.begin()
                uow.patients.add(make_patient())
                uow.save()
                raise RuntimeError("boom")

        with uow_factory() as uow:
            assert uow.patients.all() == []

    def test_save_outside_begin_commits(self, uow_factory):
        with uow_factory() as uow:
            uow.patients.add(make_patient())
            uow.save()

        with uow_factory() as uow:
            assert len(uow.patients.all()) == 1

    def test_failing_step_leaves_no_partial_write(self, uow_factory):
        with uow_factory() as uow:
            uow.begin()
            uow.patients.add(make_patient("first@example.com"))
            uow.save()
            uow.patients.add(make_patient("first@example.com"))
            with pytest.raises(Conflict):
                uow.save()
            assert not uow.in_transaction

        with uow_factory() as uow:
            assert uow.patients.all() == []

    def test_begin_twice_is_an_error(self, uow_factory):
        with uow_factory() as uow:
            uow.begin()
            with pytest.raises(RuntimeError):
                uow.begin()


class TestRepository:
    def test_update_only_touches_given_fields(self, uow_factory):
        with uow_factory() as uow:
            patient = uow.patients.add(make_patient())
            uow.save()
            uow.patients.update(patient, phone_number="0700000000")
            uow.save()

        with uow_factory() as uow:
            stored = uow.patients.find_one(Patient.email == "amal@example.com")
            assert stored.phone_number == "0700000000"
            assert stored.first_name == "Amal"

    def test_update_rejects_unknown_fields(self, uow_factory):
        with uow_factory() as uow:
            patient = uow.patients.add(make_patient())
            with pytest.raises(AttributeError):
                uow.patients.update(patient, nickname="A")


class TestOptimisticLocking:
    def test_stale_status_write_is_a_conflict(self, uow_factory, seed):
        _, _, (appointment_id,) = seed([utcnow() + timedelta(days=3)])

        with uow_factory() as first, uow_factory() as second:
            mine = first.appointments.get(appointment_id)
            theirs = second.appointments.get(appointment_id)
            assert mine.version == theirs.version == 1

            first.begin()
            first.appointments.update(mine, status=AppointmentStatus.CANCELLED)
            first.commit()

            second.begin()
            second.appointments.update(theirs, status=AppointmentStatus.COMPLETED)
            with pytest.raises(ConcurrencyConflict):
                second.commit()

        with uow_factory() as uow:
            stored = uow.appointments.get(appointment_id)
            assert stored.status == AppointmentStatus.CANCELLED
            assert stored.version == 2
