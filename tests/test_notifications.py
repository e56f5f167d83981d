"""
Tests for notification job delivery.
"""
import asyncio

from fastapi import BackgroundTasks

from kitadocs.models import NotificationJob, NotificationStatus


def test_enqueue_records_pending_job(db, notifications):
    tasks = BackgroundTasks()
    job = notifications.enqueue(db, tasks, "a@example.com", "Hello", "form_submitted", {"full_name": "A", "form_id": 1})

    assert job.id is not None
    assert job.status == NotificationStatus.PENDING
    assert job.attempts == 0
    assert len(tasks.tasks) == 1


def test_deliver_marks_sent(db, notifications, mailer):
    job = notifications.enqueue(db, BackgroundTasks(), "a@example.com", "Hello", "form_submitted", {})
    asyncio.run(notifications.deliver(job.id))

    db.expire_all()
    job = db.get(NotificationJob, job.id)
    assert job.status == NotificationStatus.SENT
    assert job.attempts == 1
    assert job.sent_at is not None
    assert mailer.sent[0]["subject"] == "Hello"


def test_deliver_retries_then_succeeds(db, notifications, mailer):
    mailer.fail_times = 1
    job = notifications.enqueue(db, BackgroundTasks(), "a@example.com", "Hello", "form_submitted", {})
    asyncio.run(notifications.deliver(job.id))

    db.expire_all()
    job = db.get(NotificationJob, job.id)
    assert job.status == NotificationStatus.SENT
    assert job.attempts == 2
    assert job.last_error is None


def test_deliver_gives_up_after_max_attempts(db, notifications, mailer):
    mailer.fail_times = 5
    job = notifications.enqueue(db, BackgroundTasks(), "a@example.com", "Hello", "form_submitted", {})
    asyncio.run(notifications.deliver(job.id))

    db.expire_all()
    job = db.get(NotificationJob, job.id)
    assert job.status == NotificationStatus.FAILED
    assert job.attempts == 2
    assert "SMTP server unavailable" in job.last_error
    assert mailer.sent == []


def test_deliver_skips_sent_jobs(db, notifications, mailer):
    job = notifications.enqueue(db, BackgroundTasks(), "a@example.com", "Hello", "form_submitted", {})
    asyncio.run(notifications.deliver(job.id))
    asyncio.run(notifications.deliver(job.id))
    assert len(mailer.sent) == 1


def test_list_jobs_filters_by_status(db, notifications, mailer):
    sent = notifications.enqueue(db, BackgroundTasks(), "a@example.com", "One", "form_submitted", {})
    asyncio.run(notifications.deliver(sent.id))
    notifications.enqueue(db, BackgroundTasks(), "b@example.com", "Two", "form_submitted", {})

    db.expire_all()
    pending = notifications.list_jobs(db, NotificationStatus.PENDING)
    assert [job.recipient for job in pending] == ["b@example.com"]
    assert len(notifications.list_jobs(db)) == 2
