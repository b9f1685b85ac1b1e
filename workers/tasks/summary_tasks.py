"""
Target summary tasks.

A target's summary counts its active issues per severity. The API submits
a recompute after every issue write that can change those counts.
"""

from celery import shared_task
from celery.exceptions import MaxRetriesExceededError

from core.logging import LogContext, get_logger

logger = get_logger("worker.summary")


@shared_task(
    bind=True,
    name="workers.tasks.summary_tasks.update_target_summary",
    max_retries=3,
    default_retry_delay=10,
)
def update_target_summary_task(self, target_id: int) -> dict:
    """
    Rebuild the summary of one target.

    Args:
        target_id: Target to recompute

    Returns:
        Dictionary with the target id and the new summary, or an error
    """
    from core.db import db
    from core.repositories import TargetRepository

    with LogContext(target_id=target_id):
        try:
            with db.session() as session:
                repo = TargetRepository(session)
                target = repo.get_by_id(target_id)
                if target is None:
                    logger.warning("summary_target_missing")
                    return {"target_id": target_id, "error": "target not found"}
                repo.update_summary(target)
                summary = dict(target.summary)

            logger.info("summary_updated", summary=summary)
            return {"target_id": target_id, "summary": summary}

        except Exception as exc:
            logger.error("summary_failed", error=str(exc), error_type=type(exc).__name__)
            try:
                raise self.retry(exc=exc)
            except MaxRetriesExceededError:
                logger.error("summary_max_retries")
                return {"target_id": target_id, "error": str(exc)}
