"""
Backend services for the Bearded issues API.
"""

from . import issue_service, permission_service, summary_service

__all__ = [
    "issue_service",
    "permission_service",
    "summary_service",
]
