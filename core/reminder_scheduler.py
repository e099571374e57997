"""
Background reminder service.

Every ``interval`` seconds it looks for Scheduled appointments whose date falls
in [now + window_start, now + window_end) and sends one reminder for each. The
window is recomputed from the clock on every tick. With ``dedup`` set, an
appointment reminded less than ``dedup`` ago is skipped, so a reminder goes out
once per appointment instead of once per tick.
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import or_

from core import config
from core.clock import utcnow
from core.notifications import ReminderNotice
from core.unit_of_work import UnitOfWork
from model.appointment_model import Appointment, AppointmentStatus

logger = logging.getLogger(__name__)


class ReminderScheduler:
    def __init__(
        self,
        notifier,
        uow_factory=UnitOfWork,
        interval: float = config.REMINDER_INTERVAL_SECONDS,
        window_start: timedelta = timedelta(hours=config.REMINDER_WINDOW_START_HOURS),
        window_end: timedelta = timedelta(hours=config.REMINDER_WINDOW_END_HOURS),
        dedup: Optional[timedelta] = timedelta(hours=config.REMINDER_DEDUP_HOURS),
        clock=utcnow,
    ):
        self.notifier = notifier
        self.uow_factory = uow_factory
        self.interval = interval
        self.window_start = window_start
        self.window_end = window_end
        self.dedup = dedup if dedup else None
        self.clock = clock
        self._stop = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    def notification_window(self, now: datetime) -> Tuple[datetime, datetime]:
        return now + self.window_start, now + self.window_end

    # ---------------- store access (runs in a worker thread) ----------------
    def collect_due(self, now: datetime) -> List[ReminderNotice]:
        start, end = self.notification_window(now)
        criteria = [
            Appointment.status == AppointmentStatus.SCHEDULED,
            Appointment.appointment_date >= start,
            Appointment.appointment_date < end,
        ]
        if self.dedup:
            criteria.append(
                or_(Appointment.last_reminded_at.is_(None), Appointment.last_reminded_at <= now - self.dedup)
            )

        with self.uow_factory() as uow:
            appointments = uow.appointments.find(*criteria, order_by=Appointment.appointment_date)
            return [
                ReminderNotice(
                    appointment_id=a.id,
                    patient_name=a.patient.full_name,
                    patient_email=a.patient.email,
                    doctor_name=a.doctor.full_name,
                    doctor_email=a.doctor.email,
                    appointment_date=a.appointment_date,
                )
                for a in appointments
            ]

    def mark_reminded(self, appointment_ids: List[str], now: datetime) -> int:
        if not appointment_ids or not self.dedup:
            return 0
        with self.uow_factory() as uow:
            uow.begin()
            # bulk UPDATE: does not bump the optimistic-lock version, so it never
            # races with a cancel/complete issued by a request
            marked = uow.appointments.update_where(
                [Appointment.id.in_(appointment_ids), Appointment.status == AppointmentStatus.SCHEDULED],
                last_reminded_at=now,
            )
            uow.commit()
            return marked

    # ---------------- ticks ----------------
    async def run_once(self) -> int:
        """Run one tick and return how many reminders were sent."""
        now = self.clock()
        notices = await asyncio.to_thread(self.collect_due, now)

        sent = []
        for notice in notices:
            try:
                await self.notifier.send(notice)
            except Exception:
                # left unmarked, retried on the next tick
                logger.exception(f"Failed to send reminder for appointment {notice.appointment_id}")
                continue
            sent.append(notice.appointment_id)

        await asyncio.to_thread(self.mark_reminded, sent, now)
        logger.info(f"Processed {len(notices)} upcoming appointments for reminders ({len(sent)} sent)")
        return len(sent)

    async def run(self):
        logger.info("Background reminder service started")
        try:
            while not self._stop.is_set():
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
                    break
                except asyncio.TimeoutError:
                    pass

                try:
                    await self.run_once()
                except Exception:
                    logger.exception("Error occurred while checking upcoming appointments")
        finally:
            logger.info("Background reminder service stopped")

    # ---------------- lifetime ----------------
    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            raise RuntimeError("Reminder scheduler already running")
        self._stop.clear()
        self._task = asyncio.create_task(self.run(), name="reminder-scheduler")
        return self._task

    async def stop(self):
        """Ask the loop to exit and wait for the tick in progress to finish."""
        self._stop.set()
        if self._task is not None:
            await self._task
            self._task = None
