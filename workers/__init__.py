"""
Celery background workers.

Provides the target summary recompute task.

Usage:
    celery -A workers worker -Q summary --loglevel=info
"""

from workers.celery_app import celery_app

__all__ = ["celery_app"]
