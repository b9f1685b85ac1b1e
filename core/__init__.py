"""
Bearded core library.

Database management, models, repositories, pagination helpers, configuration
and logging shared by the API and the Celery workers.

Usage:
    # Database
    from core.db import db, get_db
    from core.models import TargetIssue, Target, Comment
    from core.repositories import IssueRepository, TargetRepository

    # Config
    from core.config import get_settings, Settings

    # Logging
    from core.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"
