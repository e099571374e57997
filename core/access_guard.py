"""
Access control for appointments and profiles.

authorize() answers ALLOW or DENY for (caller, action, resource) and never
touches the store. Anything not matched explicitly below is denied.
"""
import enum
import logging

from core.auth_utils import CallerIdentity, Role
from core.errors import Forbidden

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    CREATE_APPOINTMENT = "create_appointment"
    READ_APPOINTMENT = "read_appointment"
    LIST_PATIENT_APPOINTMENTS = "list_patient_appointments"
    LIST_DOCTOR_APPOINTMENTS = "list_doctor_appointments"
    CANCEL_APPOINTMENT = "cancel_appointment"
    COMPLETE_APPOINTMENT = "complete_appointment"
    READ_PATIENT_PROFILE = "read_patient_profile"
    UPDATE_PATIENT_PROFILE = "update_patient_profile"
    READ_DOCTOR_PROFILE = "read_doctor_profile"
    UPDATE_DOCTOR_PROFILE = "update_doctor_profile"
    BROWSE_DOCTORS = "browse_doctors"


class Decision(enum.Enum):
    ALLOW = "allow"
    DENY = "deny"

    @classmethod
    def of(cls, allowed: bool) -> "Decision":
        return cls.ALLOW if allowed else cls.DENY


def _is_patient_owner(caller: CallerIdentity, appointment) -> bool:
    return caller.role == Role.PATIENT and caller.id == appointment.patient_id


def _is_doctor_owner(caller: CallerIdentity, appointment) -> bool:
    return caller.role == Role.DOCTOR and caller.id == appointment.doctor_id


def authorize(caller: CallerIdentity, action: Action, resource=None) -> Decision:
    """
    Decide whether ``caller`` may perform ``action``.

    ``resource`` is the appointment (or booking request) for appointment
    actions and the id named in the path for list and profile actions.
    """
    if caller is None or (resource is None and action != Action.BROWSE_DOCTORS):
        return Decision.DENY

    if action == Action.CREATE_APPOINTMENT:
        # a patient books only for themself
        return Decision.of(_is_patient_owner(caller, resource))

    if action in (Action.READ_APPOINTMENT, Action.CANCEL_APPOINTMENT):
        return Decision.of(_is_patient_owner(caller, resource) or _is_doctor_owner(caller, resource))

    if action == Action.COMPLETE_APPOINTMENT:
        return Decision.of(_is_doctor_owner(caller, resource))

    # list endpoints are self-only whatever the caller's role
    if action in (Action.LIST_PATIENT_APPOINTMENTS, Action.LIST_DOCTOR_APPOINTMENTS):
        return Decision.of(caller.id == resource)

    if action in (Action.READ_PATIENT_PROFILE, Action.UPDATE_PATIENT_PROFILE):
        return Decision.of(caller.role == Role.PATIENT and caller.id == resource)

    if action in (Action.READ_DOCTOR_PROFILE, Action.UPDATE_DOCTOR_PROFILE):
        return Decision.of(caller.role == Role.DOCTOR and caller.id == resource)

    if action == Action.BROWSE_DOCTORS:
        return Decision.ALLOW

    return Decision.DENY


def require(caller: CallerIdentity, action: Action, resource=None) -> None:
    """Raise Forbidden unless authorize() allows the action."""
    if authorize(caller, action, resource) is Decision.DENY:
        who = f"{caller.role.value} {caller.id}" if caller is not None else "anonymous caller"
        logger.warning(f"Denied {action.value} for {who}")
        raise Forbidden()
