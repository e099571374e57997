import logging
from datetime import datetime

import pytest
from fastapi_mail import ConnectionConfig

from core.notifications import EmailNotifier, LoggingNotifier, ReminderNotice, build_notifier


@pytest.fixture
def notice():
    return ReminderNotice(
        appointment_id="a-1",
        patient_name="Lina Nasser",
        patient_email="lina@example.com",
        doctor_name="Karim Aziz",
        doctor_email="karim@example.com",
        appointment_date=datetime(2026, 3, 2, 14, 30),
    )


async def test_logging_notifier(notice, caplog):
    with caplog.at_level(logging.INFO, logger="core.notifications"):
        await LoggingNotifier().send(notice)
    assert "Sending reminder for appointment a-1" in caplog.text
    assert "lina@example.com" in caplog.text
    assert "karim@example.com" in caplog.text


async def test_email_notifier_mails_each_party_separately(notice):
    conf = ConnectionConfig(
        MAIL_USERNAME="",
        MAIL_PASSWORD="",
        MAIL_FROM="noreply@example.com",
        MAIL_PORT=587,
        MAIL_SERVER="localhost",
        MAIL_STARTTLS=False,
        MAIL_SSL_TLS=False,
        USE_CREDENTIALS=False,
        SUPPRESS_SEND=1,
    )
    notifier = EmailNotifier(conf)

    with notifier.mailer.record_messages() as outbox:
        await notifier.send(notice)

    assert len(outbox) == 2
    assert [m["To"] for m in outbox] == ["lina@example.com", "karim@example.com"]
    assert all(m["Subject"] == "Appointment reminder" for m in outbox)


def test_logging_notifier_is_the_default():
    assert isinstance(build_notifier(), LoggingNotifier)
