"""
Appointment status lifecycle.

    Scheduled --cancel--> Cancelled
    Scheduled --complete--> Completed

Completed and Cancelled are terminal. Authorization is checked by the caller
before next_status(); this module only knows about statuses.
"""
import enum

from core.errors import InvalidTransition
from model.appointment_model import AppointmentStatus


class Transition(str, enum.Enum):
    CANCEL = "cancel"
    COMPLETE = "complete"


TRANSITIONS = {
    (AppointmentStatus.SCHEDULED, Transition.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.SCHEDULED, Transition.COMPLETE): AppointmentStatus.COMPLETED,
}

_REJECTIONS = {
    (AppointmentStatus.CANCELLED, Transition.CANCEL): "Appointment is already cancelled",
    (AppointmentStatus.COMPLETED, Transition.CANCEL): "Cannot cancel a completed appointment",
    (AppointmentStatus.COMPLETED, Transition.COMPLETE): "Appointment is already completed",
    (AppointmentStatus.CANCELLED, Transition.COMPLETE): "Cannot complete a cancelled appointment",
}


def next_status(current: AppointmentStatus, transition: Transition) -> AppointmentStatus:
    """Return the status ``transition`` leads to from ``current`` or raise InvalidTransition."""
    current = AppointmentStatus(current)
    target = TRANSITIONS.get((current, transition))
    if target is None:
        raise InvalidTransition(
            _REJECTIONS.get((current, transition), f"Cannot {transition.value} a {current.value.lower()} appointment")
        )
    return target
