"""
Scan target model.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from core.db import Base

TARGET_TYPE_WEB = "web"
TARGET_TYPE_MOBILE = "mobile"


class Target(Base):
    """
    An asset that gets scanned inside a project.

    ``summary`` is denormalized from the target's issues: the number of
    active issues per severity. It is rebuilt after issue writes and may
    lag behind them.
    """

    __tablename__ = "targets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), index=True)
    type: Mapped[str] = mapped_column(String(16), default=TARGET_TYPE_WEB)
    name: Mapped[Optional[str]] = mapped_column(String(255))
    url: Mapped[Optional[str]] = mapped_column(String(1024))
    summary: Mapped[Optional[Dict[str, int]]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
