import logging
from dataclasses import dataclass
from datetime import datetime

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema

from core import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderNotice:
    appointment_id: str
    patient_name: str
    patient_email: str
    doctor_name: str
    doctor_email: str
    appointment_date: datetime


class LoggingNotifier:
    """Writes reminders to the log. Used when no mail server is configured."""

    async def send(self, notice: ReminderNotice) -> None:
        logger.info(
            f"Sending reminder for appointment {notice.appointment_id} - "
            f"Patient: {notice.patient_name} ({notice.patient_email}), "
            f"Doctor: {notice.doctor_name} ({notice.doctor_email}), "
            f"Date: {notice.appointment_date.isoformat()}"
        )


class EmailNotifier:
    """Emails the reminder separately to the patient and the doctor through fastapi-mail."""

    def __init__(self, conf: ConnectionConfig = None):
        self.conf = conf or ConnectionConfig(
            MAIL_USERNAME=config.MAIL_USERNAME,
            MAIL_PASSWORD=config.MAIL_PASSWORD,
            MAIL_FROM=config.MAIL_FROM,
            MAIL_PORT=config.MAIL_PORT,
            MAIL_SERVER=config.MAIL_SERVER,
            MAIL_STARTTLS=config.MAIL_STARTTLS,
            MAIL_SSL_TLS=config.MAIL_SSL_TLS,
            USE_CREDENTIALS=bool(config.MAIL_USERNAME),
        )
        self.mailer = FastMail(self.conf)

    async def send(self, notice: ReminderNotice) -> None:
        when = notice.appointment_date.strftime("%Y-%m-%d %H:%M UTC")
        body = f"""
Hello,

This is a reminder of the appointment between {notice.patient_name} and Dr. {notice.doctor_name}.

📅 Date and time: {when}

If you cannot attend, please cancel the appointment in advance."""

        # one message per party; each sees only its own address
        for recipient in (notice.patient_email, notice.doctor_email):
            message = MessageSchema(
                subject="Appointment reminder",
                recipients=[recipient],
                body=body,
                subtype="plain",
            )
            await self.mailer.send_message(message)
        logger.info(f"Reminder emails sent for appointment {notice.appointment_id}")


def build_notifier():
    if config.MAIL_ENABLED:
        return EmailNotifier()
    return LoggingNotifier()
