"""
Notification job service.

Every outgoing email is first recorded as a NotificationJob row, then delivered
after the response by FastAPI's BackgroundTasks. Delivery retries a fixed number
of times and leaves the job SENT or FAILED so failures can be inspected and
re-queued by an administrator.
"""
import asyncio
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from ..config import settings
from ..core.mail import get_mailer
from ..database import SessionLocal
from ..exceptions import NotFoundException, InvalidStateException
from .models import NotificationJob, NotificationStatus

# Set up logging
logger = logging.getLogger(__name__)


class NotificationService:
    """
    Queues and delivers templated emails.

    Args:
        mailer: Object with an async ``send(recipient, subject, template_name, context)``
        session_factory: Callable returning a new database session for delivery
        max_attempts: Delivery attempts before a job is marked FAILED
        retry_delay: Seconds to wait between attempts
    """

    def __init__(self, mailer, session_factory, max_attempts: int = 3, retry_delay: float = 2.0):
        self.mailer = mailer
        self.session_factory = session_factory
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay

    def enqueue(
        self,
        db: Session,
        background_tasks: BackgroundTasks,
        recipient: str,
        subject: str,
        template_name: str,
        context: Optional[Dict[str, Any]] = None
    ) -> NotificationJob:
        """
        Record a PENDING job and schedule its delivery after the response.

        Returns:
            NotificationJob: The saved job
        """
        job = NotificationJob(
            recipient=recipient,
            subject=subject,
            template_name=template_name,
            context=context or {},
            status=NotificationStatus.PENDING,
            attempts=0
        )
        db.add(job)
        db.commit()
        db.refresh(job)

        background_tasks.add_task(self.deliver, job.id)
        logger.info(f"Queued notification {job.id} ({template_name}) for {recipient}")
        return job

    async def deliver(self, job_id: int) -> None:
        """
        Attempt delivery of a job, retrying on failure.

        Uses its own session because it runs after the request session is closed.
        """
        db = self.session_factory()
        try:
            job = db.get(NotificationJob, job_id)
            if job is None:
                logger.warning(f"Notification {job_id} disappeared before delivery")
                return
            if job.status == NotificationStatus.SENT:
                return

            for attempt in range(1, self.max_attempts + 1):
                job.attempts = (job.attempts or 0) + 1
                try:
                    logger.info(f"Notification {job.id} send attempt {attempt}/{self.max_attempts} to {job.recipient}")
                    await self.mailer.send(job.recipient, job.subject, job.template_name, job.context or {})
                except Exception as e:
                    job.last_error = str(e)
                    db.commit()
                    logger.warning(f"Notification {job.id} attempt {attempt} failed: {str(e)}")
                    if attempt < self.max_attempts:
                        await asyncio.sleep(self.retry_delay)
                    continue

                job.status = NotificationStatus.SENT
                job.sent_at = datetime.now(timezone.utc)
                job.last_error = None
                db.commit()
                logger.info(f"Notification {job.id} sent to {job.recipient}")
                return

            job.status = NotificationStatus.FAILED
            db.commit()
            logger.error(
                f"Notification {job.id} to {job.recipient} failed after {self.max_attempts} attempts. "
                f"Last error: {job.last_error}"
            )
        finally:
            db.close()

    def list_jobs(self, db: Session, status: Optional[NotificationStatus] = None) -> List[NotificationJob]:
        query = db.query(NotificationJob)
        if status is not None:
            query = query.filter(NotificationJob.status == status)
        return query.order_by(NotificationJob.created_at.desc(), NotificationJob.id.desc()).all()

    def retry(self, db: Session, background_tasks: BackgroundTasks, job_id: int) -> NotificationJob:
        """
        Put a job back to PENDING and schedule delivery again.

        Raises:
            NotFoundException: If the job does not exist
            InvalidStateException: If the job was already sent
        """
        job = db.get(NotificationJob, job_id)
        if job is None:
            raise NotFoundException("Notification not found")
        if job.status == NotificationStatus.SENT:
            raise InvalidStateException("Notification has already been sent")

        job.status = NotificationStatus.PENDING
        job.last_error = None
        db.commit()
        db.refresh(job)

        background_tasks.add_task(self.deliver, job.id)
        logger.info(f"Re-queued notification {job.id} for {job.recipient}")
        return job


@lru_cache()
def get_notification_service() -> NotificationService:
    """FastAPI dependency returning the process-wide notification service"""
    return NotificationService(
        mailer=get_mailer(),
        session_factory=SessionLocal,
        max_attempts=settings.mail_max_attempts,
        retry_delay=settings.mail_retry_delay_seconds
    )
