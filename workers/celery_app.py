"""
Celery application configuration.

Configures Celery with:
- Redis as broker and result backend
- A dedicated ``summary`` queue for target summary recomputes
- Late acknowledgment so interrupted tasks are redelivered
"""

from celery import Celery
from celery.signals import worker_process_init
from kombu import Exchange, Queue

from core.config import get_settings

settings = get_settings()

SUMMARY_QUEUE = "summary"

celery_app = Celery(
    "bearded",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["workers.tasks.summary_tasks"],
)

# =============================================================================
# Queues and Routing
# =============================================================================

default_exchange = Exchange("default", type="direct")
summary_exchange = Exchange(SUMMARY_QUEUE, type="direct")

celery_app.conf.task_queues = (
    Queue("default", default_exchange, routing_key="default"),
    Queue(SUMMARY_QUEUE, summary_exchange, routing_key=SUMMARY_QUEUE),
)

celery_app.conf.task_default_queue = "default"
celery_app.conf.task_default_exchange = "default"
celery_app.conf.task_default_routing_key = "default"

celery_app.conf.task_routes = {
    "workers.tasks.summary_tasks.*": {
        "queue": SUMMARY_QUEUE,
        "routing_key": SUMMARY_QUEUE,
    },
}

# Run a worker for the summary queue with:
# celery -A workers worker -Q summary -c 2 --prefetch-multiplier=1

# =============================================================================
# Serialization, Reliability
# =============================================================================

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    worker_prefetch_multiplier=1,
    broker_connection_retry_on_startup=True,
    result_expires=86400,
    task_soft_time_limit=60,
    task_time_limit=120,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_hijack_root_logger=False,
    task_send_sent_event=True,
)


@worker_process_init.connect
def setup_worker_logging(**kwargs):
    """Configure structured logging and the database when a worker starts."""
    from core.db import db
    from core.logging import configure_celery_logging, configure_logging

    configure_logging(level="INFO")
    configure_celery_logging()
    db.initialize(settings.database_url)
