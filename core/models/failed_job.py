from django.db import models
from django.utils.translation import gettext_lazy as _


class FailedJob(models.Model):
    """A queued job that ran out of attempts. Kept until pruned."""

    task_id = models.CharField(max_length=255, db_index=True)
    task_name = models.CharField(max_length=255)
    args = models.JSONField(default=list, blank=True)
    kwargs = models.JSONField(default=dict, blank=True)
    reason = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("Failed Job")
        verbose_name_plural = _("Failed Jobs")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.task_name} ({self.task_id})"
