import logging

from celery.signals import task_failure, task_retry, task_success
from django.db import DatabaseError

from .models import FailedJob

log = logging.getLogger("celery")


@task_success.connect
def log_task_success(sender=None, result=None, **kwargs):
    log.info("Task %s[%s] completed: %s", sender.name, sender.request.id, result)


@task_retry.connect
def log_task_retry(sender=None, request=None, reason=None, **kwargs):
    log.warning(
        "Task %s[%s] retry %s: %s",
        sender.name,
        getattr(request, "id", None),
        getattr(request, "retries", 0) + 1,
        reason,
    )


@task_failure.connect
def record_failed_job(sender=None, task_id=None, exception=None, args=None, kwargs=None, **extra):
    log.error("Task %s[%s] failed: %s", sender.name, task_id, exception)
    try:
        FailedJob.objects.create(
            task_id=task_id or "",
            task_name=sender.name,
            args=list(args or []),
            kwargs=dict(kwargs or {}),
            reason=f"{type(exception).__name__}: {exception}",
        )
    except DatabaseError as e:
        log.error("Record failed job %s: %s", task_id, str(e))
