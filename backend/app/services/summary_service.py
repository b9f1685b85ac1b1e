"""
Target summary recompute after issue writes.

The summary is a denormalized view, so recomputing it is best effort: a
failure here is logged and never fails the write that triggered it. Call
only after the triggering write has been committed.
"""

from sqlalchemy.orm import Session

from core.config import get_settings
from core.logging import get_logger
from core.repositories import TargetRepository

logger = get_logger("api.summary_service")


def update_target_summary(db: Session, target_id: int) -> bool:
    """
    Recompute a target summary on the given session and commit it.

    Returns:
        True on success, False when the target is gone or the update failed
    """
    try:
        repo = TargetRepository(db)
        target = repo.get_by_id(target_id)
        if target is None:
            logger.warning("summary_target_missing", target_id=target_id)
            return False
        repo.update_summary(target)
        db.commit()
        return True
    except Exception:
        db.rollback()
        logger.exception("summary_update_failed", target_id=target_id)
        return False


def enqueue_target_summary(target_id: int) -> str | None:
    """
    Submit the summary task to the Celery ``summary`` queue.

    Returns:
        Task id, or None when the broker could not be reached
    """
    from workers.tasks.summary_tasks import update_target_summary_task

    try:
        result = update_target_summary_task.delay(target_id)
    except Exception:
        logger.exception("summary_enqueue_failed", target_id=target_id)
        return None
    logger.info("summary_update_queued", target_id=target_id, task_id=result.id)
    return result.id


def schedule_summary_update(db: Session, target_id: int) -> None:
    """Recompute inline, or hand off to the worker when SUMMARY_QUEUE_ENABLED is set."""
    if get_settings().summary_queue_enabled:
        enqueue_target_summary(target_id)
    else:
        update_target_summary(db, target_id)
