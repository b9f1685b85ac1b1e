"""Celery task definitions."""

from workers.tasks.summary_tasks import update_target_summary_task

__all__ = ["update_target_summary_task"]
