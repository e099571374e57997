"""
Unit of work over a SQLAlchemy session.

One instance per request (or per scheduler tick). Mutations registered through
the repositories stay pending until commit(); reads inside the same unit of
work see them because the session autoflushes, other sessions do not.

    with UnitOfWork() as uow:
        uow.begin()
        uow.patients.add(patient)
        uow.save()      # flushed, still uncommitted
        uow.commit()

Leaving the block without commit() rolls everything back.
"""
import logging
from typing import Callable, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from core.errors import ConcurrencyConflict, Conflict, PersistenceError
from database import SessionLocal
from model.appointment_model import Appointment
from model.doctor_model import Doctor
from model.patient_model import Patient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(Generic[T]):
    """CRUD for one mapped class, bound to the unit of work's session."""

    def __init__(self, session: Session, model: Type[T]):
        self.session = session
        self.model = model

    def get(self, entity_id) -> Optional[T]:
        return self.session.get(self.model, entity_id)

    def find_one(self, *criteria) -> Optional[T]:
        return self.session.scalars(select(self.model).where(*criteria).limit(1)).first()

    def find(self, *criteria, order_by=None) -> List[T]:
        stmt = select(self.model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        return list(self.session.scalars(stmt))

    def exists(self, *criteria) -> bool:
        return self.find_one(*criteria) is not None

    def all(self, order_by=None) -> List[T]:
        return self.find(order_by=order_by)

    def add(self, entity: T) -> T:
        self.session.add(entity)
        return entity

    def update(self, entity: T, **changes) -> T:
        """Apply each given field to the entity; fields not given are left alone."""
        for field, value in changes.items():
            if not hasattr(self.model, field):
                raise AttributeError(f"{self.model.__name__} has no field {field!r}")
            setattr(entity, field, value)
        return entity

    def update_where(self, criteria, **values) -> int:
        """Bulk UPDATE of matching rows; returns the number of rows changed."""
        result = self.session.execute(
            update(self.model).where(*criteria).values(**values).execution_options(synchronize_session=False)
        )
        return result.rowcount


class UnitOfWork:
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory
        self.session: Optional[Session] = None
        self._in_transaction = False

    def __enter__(self):
        self.session = self.session_factory()
        self.patients = Repository(self.session, Patient)
        self.doctors = Repository(self.session, Doctor)
        self.appointments = Repository(self.session, Appointment)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def begin(self):
        if self._in_transaction:
            raise RuntimeError("A transaction is already open in this unit of work")
        self._in_transaction = True

    def save(self):
        """Persist pending changes.

        Inside begin() they are flushed to the open transaction only; outside
        of it they are committed straight away.
        """
        if not self._in_transaction:
            self.commit()
            return
        try:
            self.session.flush()
        except SQLAlchemyError as e:
            self.rollback()
            raise self._translate(e) from e

    def commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self._discard()
            raise self._translate(e) from e
        finally:
            self._in_transaction = False

    def rollback(self):
        self._discard()
        self._in_transaction = False

    def close(self):
        if self.session is None:
            return
        if self.session.in_transaction():
            self.session.rollback()
        self.session.close()
        self.session = None
        self._in_transaction = False

    @staticmethod
    def _translate(error: SQLAlchemyError):
        if isinstance(error, StaleDataError):
            logger.warning(f"Concurrent modification detected: {error}")
            return ConcurrencyConflict()
        if isinstance(error, IntegrityError):
            logger.warning(f"Integrity error, changes rolled back: {error.orig}")
            return Conflict("Request conflicts with an existing record")
        logger.error("Write failed, changes rolled back", exc_info=error)
        return PersistenceError()

    def _discard(self):
        try:
            self.session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed")


def get_uow():
    """FastAPI dependency: one unit of work per request."""
    with UnitOfWork() as uow:
        yield uow
